"""Small numeric helpers and the away/home pair container."""

import math
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


def rescale_clamp(x: float, low: float, high: float) -> float:
    """Map a rating from [0, 1] onto [low, high], clamped to [0, 1].

    NaN inputs (from ratings that drifted negative) clamp to 0.

    Raises:
        ValueError: If low >= high
    """
    if low >= high:
        raise ValueError(f"rescale_clamp requires low < high (got {low}, {high})")
    y = x * (high - low) + low
    if math.isnan(y):
        return 0.0
    return max(0.0, min(1.0, y))


@dataclass
class AwayHome(Generic[T]):
    """A value for each side of a game."""

    away: T
    home: T

    def map(self, f: Callable[[T], U]) -> "AwayHome[U]":
        return AwayHome(away=f(self.away), home=f(self.home))

    def map_opt(self, f: Callable[[T], U | None]) -> "AwayHome[U] | None":
        """Apply `f` to both sides; None if either side yields None."""
        away = f(self.away)
        if away is None:
            return None
        home = f(self.home)
        if home is None:
            return None
        return AwayHome(away=away, home=home)
