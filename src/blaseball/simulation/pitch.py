"""Single-pitch outcome model.

A pitch is resolved by a fixed sequence of Bernoulli draws over the
pitcher's, batter's and a random defender's ratings. Each step draws one
fresh uniform sample and stops at the first "yes", so the order of the
steps partitions the probability mass and must not change.

Known correlations the formulas encode:
- thwackability → more hits; moxie → more walks; divinity → more home runs
- musclitude → more doubles; patheticism → more strikeouts
- ground friction → more triples, fewer singles
- shakespearianism makes pitches more tempting to swing at
- unthwackability makes pitches harder to hit
The general pitching score stands in where no specific rating is known.
"""

from enum import Enum
from typing import Sequence

import numpy as np

from blaseball.models.ratings import RatedPlayer
from blaseball.util import rescale_clamp

# Share of contacted balls that go foul
FOUL_RATE = 0.4


class Pitch(str, Enum):
    """Result of a single pitch."""

    BALL = "ball"
    STRIKE = "strike"
    FOUL = "foul"
    OUT = "out"
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    HOME_RUN = "home_run"


def roll(rng: np.random.Generator, p: float) -> bool:
    """One Bernoulli trial: True with probability p."""
    return rng.random() < p


def simulate_pitch(
    pitcher: RatedPlayer,
    batter: RatedPlayer,
    defense: Sequence[RatedPlayer],
    rng: np.random.Generator,
) -> Pitch:
    """Resolve one pitch.

    Args:
        pitcher: Day-adjusted pitcher
        batter: Day-adjusted batter
        defense: The fielding side's nine players
        rng: Generator owned by the calling simulation

    Returns:
        Pitch outcome
    """
    b = batter.player
    p = pitcher.player

    # 1. Is it in the strike zone?
    in_strike_zone = roll(
        rng,
        (rescale_clamp(1.0 - b.moxie, 0.2, 0.8) + rescale_clamp(pitcher.pitching, 0.0, 1.0))
        / 2.0,
    )

    # 2. Does the batter swing?
    swing_p = (0.8 if in_strike_zone else 0.2) + rescale_clamp(p.shakespearianism, 0.0, 0.15)
    if not roll(rng, swing_p):
        return Pitch.STRIKE if in_strike_zone else Pitch.BALL

    # 3. Contact?
    contact_p = (
        (0.8 if in_strike_zone else 0.1)
        - rescale_clamp(b.patheticism, 0.0, 0.15)
        + rescale_clamp(b.thwackability, 0.0, 0.4)
        - rescale_clamp(p.unthwackability, 0.0, 0.4)
    )
    if not roll(rng, contact_p):
        return Pitch.STRIKE

    # 4. Where does it go?
    if roll(rng, FOUL_RATE):
        return Pitch.FOUL

    if roll(rng, rescale_clamp(b.divinity, 0.0, 0.06)):
        return Pitch.HOME_RUN

    # 5. In play: a random defender tries to field it
    defender = defense[rng.integers(0, len(defense))]
    out_p = rescale_clamp(defender.defense, 0.2, 0.6) + rescale_clamp(b.thwackability, 0.0, 0.2)
    if roll(rng, out_p):
        return Pitch.OUT

    if roll(rng, 1.0 - rescale_clamp(b.musclitude, 0.2, 0.4)):
        return Pitch.SINGLE

    if roll(rng, rescale_clamp(b.ground_friction, 0.1, 0.4)):
        return Pitch.TRIPLE

    return Pitch.DOUBLE
