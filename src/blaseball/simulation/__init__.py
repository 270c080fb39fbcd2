"""Pitch-by-pitch game simulation.

Resolves a Game against the Database into a Playable, plays it with a
seeded state machine, and aggregates many seeded runs into win
probabilities.
"""

from blaseball.simulation.game import (
    Game,
    GameState,
    Playable,
    Score,
    make_rng,
    prepare,
    simulate,
)
from blaseball.simulation.montecarlo import TrialResult, run_trials
from blaseball.simulation.pitch import Pitch, simulate_pitch

__all__ = [
    "Game",
    "GameState",
    "Playable",
    "Score",
    "make_rng",
    "prepare",
    "simulate",
    "TrialResult",
    "run_trials",
    "Pitch",
    "simulate_pitch",
]
