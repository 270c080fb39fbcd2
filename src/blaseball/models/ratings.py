"""Player rating model: daily mood adjustment and composite scores.

Composite scores are weighted geometric aggregates of the raw ratings. They
are always computed from a day-adjusted snapshot (see `day_adjust`), never
from the stored one.
"""

import math
from dataclasses import dataclass

from blaseball.db.models import Player
from blaseball.util import rescale_clamp

# Ratings that move with the player's mood; patheticism moves against it and
# tragicness gets a power transform instead.
MOOD_RATINGS = (
    "anticapitalism",
    "base_thirst",
    "buoyancy",
    "chasiness",
    "cinnamon",
    "coldness",
    "continuation",
    "divinity",
    "ground_friction",
    "indulgence",
    "laserlikeness",
    "martyrdom",
    "moxie",
    "musclitude",
    "omniscience",
    "overpowerment",
    "pressurization",
    "ruthlessness",
    "shakespearianism",
    "tenaciousness",
    "thwackability",
    "unthwackability",
    "watchfulness",
)


def js_round(x: float) -> float:
    """Round to the nearest integer with halves rounded toward +infinity.

    Matches JavaScript's Math.round: 5.5 → 6 but -5.5 → -5. This is neither
    banker's rounding nor truncation.
    """
    floor = math.floor(x)
    # x - floor(x) is exact for doubles
    if x - floor >= 0.5:
        return float(floor + 1)
    return float(floor)


def current_mood(player: Player, day: int) -> float:
    """Player's mood on a given (0-based) day of the season.

    A sinusoid whose period is set by buoyancy, and whose amplitude and
    offset come from pressurization and cinnamon.
    """
    period = 6.0 + js_round(10.0 * player.buoyancy)
    n = math.pi * (2.0 / period * day + 0.5)
    return (
        0.5 * (player.pressurization + player.cinnamon) * math.sin(n)
        - 0.5 * player.pressurization
        + 0.5 * player.cinnamon
    )


def day_adjust(player: Player, day: int) -> Player:
    """Return a copy of `player` with the day's mood applied.

    The stored snapshot is left untouched.

    Args:
        player: Stored rating snapshot
        day: 0-based day of the season

    Returns:
        New Player snapshot with adjusted ratings
    """
    adj = current_mood(player, day) / 5.0
    adjusted = player.model_copy()

    exponent = rescale_clamp(abs(adj), 1.0, 3.0)
    if math.copysign(1.0, adj) < 0:
        exponent = 1.0 / exponent
    adjusted.tragicness = _pow(player.tragicness, exponent)

    for name in MOOD_RATINGS:
        setattr(adjusted, name, getattr(player, name) + adj)
    adjusted.patheticism = player.patheticism - adj

    return adjusted


def _pow(x: float, y: float) -> float:
    """Real-valued power; NaN where x**y would be complex."""
    if x < 0.0:
        return math.nan
    return x**y


def batting(player: Player) -> float:
    return (
        _pow(1.0 - player.tragicness, 0.01)
        * _pow(player.thwackability, 0.35)
        * _pow(player.moxie, 0.075)
        * _pow(player.divinity, 0.35)
        * _pow(player.musclitude, 0.075)
        * _pow(1.0 - player.patheticism, 0.05)
        * _pow(player.martyrdom, 0.02)
    )


def pitching(player: Player) -> float:
    return (
        _pow(player.shakespearianism, 0.1)
        * _pow(player.unthwackability, 0.5)
        * _pow(player.coldness, 0.025)
        * _pow(player.overpowerment, 0.15)
        * _pow(player.ruthlessness, 0.4)
    )


def baserunning(player: Player) -> float:
    return (
        _pow(player.laserlikeness, 0.5)
        * _pow(player.continuation, 0.1)
        * _pow(player.base_thirst, 0.1)
        * _pow(player.indulgence, 0.1)
        * _pow(player.ground_friction, 0.1)
    )


def defense(player: Player) -> float:
    return (
        _pow(player.omniscience, 0.2)
        * _pow(player.tenaciousness, 0.2)
        * _pow(player.watchfulness, 0.1)
        * _pow(player.anticapitalism, 0.1)
        * _pow(player.chasiness, 0.1)
    )


@dataclass(frozen=True)
class RatedPlayer:
    """A day-adjusted player with its composite scores precomputed."""

    player: Player
    batting: float
    pitching: float
    baserunning: float
    defense: float

    @classmethod
    def from_player(cls, player: Player) -> "RatedPlayer":
        return cls(
            player=player,
            batting=batting(player),
            pitching=pitching(player),
            baserunning=baserunning(player),
            defense=defense(player),
        )

    @classmethod
    def for_day(cls, player: Player, day: int) -> "RatedPlayer":
        """Day-adjust a stored snapshot and score it."""
        return cls.from_player(day_adjust(player, day))
