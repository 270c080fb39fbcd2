"""Rating models: mood adjustment and composite scores."""

from blaseball.models.ratings import (
    RatedPlayer,
    current_mood,
    day_adjust,
    js_round,
)

__all__ = ["RatedPlayer", "current_mood", "day_adjust", "js_round"]
