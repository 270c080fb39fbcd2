"""Monte Carlo driver: many seeded simulations of one game."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from uuid import UUID

import numpy as np

from blaseball.simulation.game import Playable, Score, simulate

logger = logging.getLogger(__name__)


@dataclass
class TrialResult:
    """Final scores of every trial, ordered by seed."""

    game_id: UUID
    sim_n: int
    away_scores: np.ndarray  # shape (sim_n,)
    home_scores: np.ndarray  # shape (sim_n,)

    @property
    def away_win_prob(self) -> float:
        return float(np.sum(self.away_scores > self.home_scores) / self.sim_n)

    @property
    def home_win_prob(self) -> float:
        return float(np.sum(self.home_scores > self.away_scores) / self.sim_n)

    @property
    def mean_away_runs(self) -> float:
        return float(np.mean(self.away_scores))

    @property
    def mean_home_runs(self) -> float:
        return float(np.mean(self.home_scores))


def run_trials(playable: Playable, sim_n: int, workers: int = 1) -> TrialResult:
    """Simulate a game with seeds 0..sim_n-1.

    Each trial owns its generator, so results do not depend on the number of
    workers or on scheduling order.

    Args:
        playable: Resolved game
        sim_n: Number of trials
        workers: Worker threads (1 = run inline)

    Returns:
        TrialResult

    Raises:
        ValueError: If sim_n < 1
    """
    if sim_n < 1:
        raise ValueError(f"sim_n must be >= 1 (got {sim_n})")

    seeds = range(sim_n)
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            scores: list[Score] = list(pool.map(lambda seed: simulate(playable, seed), seeds))
    else:
        scores = [simulate(playable, seed) for seed in seeds]

    result = TrialResult(
        game_id=playable.game_id,
        sim_n=sim_n,
        away_scores=np.array([s.away for s in scores], dtype=np.int64),
        home_scores=np.array([s.home for s in scores], dtype=np.int64),
    )
    logger.debug(
        f"Game {playable.game_id}: {sim_n} trials, "
        f"P(away)={result.away_win_prob:.3f}, P(home)={result.home_win_prob:.3f}"
    )
    return result
