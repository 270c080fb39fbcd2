"""Command-line entry point: simulate a slate of games.

Usage:
    blaseball-sim --games game-data/4/001.json --sims 2000
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from blaseball.config import get_config
from blaseball.db import Database, IngestionError
from blaseball.simulation import Game, prepare, run_trials

logger = logging.getLogger(__name__)

_GAMES = TypeAdapter(list[Game])


def load_games(path: Path) -> list[Game]:
    """Read a JSON array of game descriptors."""
    with open(path, encoding="utf-8") as f:
        return _GAMES.validate_python(json.load(f))


def run(data_dir: Path, games_path: Path, sim_n: int, workers: int, limit: int | None) -> int:
    """Load the database and print win probabilities for each game.

    Returns:
        Number of games simulated
    """
    database = Database.load(data_dir)
    games = load_games(games_path)
    if limit is not None:
        games = games[:limit]

    simulated = 0
    for game in games:
        playable = prepare(game, database)
        if playable is None:
            logger.warning(f"Skipping {game!r}: rosters or players unavailable")
            continue

        result = run_trials(playable, sim_n, workers=workers)
        print(
            f"{game.id} season {game.season + 1} day {game.day + 1}: "
            f"away {result.away_win_prob:.3f} ({result.mean_away_runs:.2f} R) "
            f"home {result.home_win_prob:.3f} ({result.mean_home_runs:.2f} R)"
        )
        simulated += 1

    logger.info(f"Simulated {simulated}/{len(games)} games ({sim_n} trials each)")
    return simulated


def main() -> None:
    """CLI entry point with logging configuration."""
    config = get_config()

    parser = argparse.ArgumentParser(
        description="Blaseball game simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Example:\n"
            "  blaseball-sim --data-dir team-data --games game-data/4/001.json"
        ),
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=config.data_dir,
        help="Directory of gzip-compressed snapshot dumps.",
    )
    parser.add_argument(
        "--games",
        type=Path,
        required=True,
        help="JSON file holding an array of game descriptors.",
    )
    parser.add_argument(
        "--sims",
        type=int,
        default=config.default_sim_n,
        help="Monte Carlo trials per game.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=config.sim_workers,
        help="Worker threads per game.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Only simulate the first N games.",
    )
    args = parser.parse_args()

    if args.sims < 1:
        parser.error("--sims must be >= 1")
    if args.workers < 1:
        parser.error("--workers must be >= 1")

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Configuration loaded: env={config.env}")

    try:
        run(args.data_dir, args.games, args.sims, args.workers, args.limit)
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        sys.exit(0)
    except (OSError, IngestionError, ValidationError, json.JSONDecodeError) as e:
        logging.error(f"Simulation failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
