"""Blaseball game outcome simulator.

Reconstructs historical rosters and player ratings from dated snapshot
dumps and simulates games pitch-by-pitch to estimate win probabilities.
"""

__version__ = "0.1.0"
