"""Season/day → wall-clock mapping for game start times."""

from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Anchors for season index 3; later seasons start one week apart
_REGULAR_SEASON_START = datetime(2020, 8, 24, 16, 0, 0, tzinfo=timezone.utc)
_POSTSEASON_START = datetime(2020, 8, 29, 13, 0, 0, tzinfo=timezone.utc)
POSTSEASON_DAY = 99


def game_time(season: int, day: int) -> int:
    """Scheduled start of a game as epoch milliseconds.

    Only valid from season index 3 onward. Regular-season games run hourly
    from Monday 16:00 UTC; the postseason starts Saturday 13:00 UTC.

    Args:
        season: 0-based season index
        day: 0-based day index (99+ is postseason)

    Returns:
        Start time in epoch ms
    """
    weeks = timedelta(weeks=season - 3)
    if day >= POSTSEASON_DAY:
        start = _POSTSEASON_START + weeks + timedelta(hours=day - POSTSEASON_DAY)
    else:
        start = _REGULAR_SEASON_START + weeks + timedelta(hours=day)

    # Season 3 had two schedule delays late in the regular season
    if season == 3 and 59 <= day < POSTSEASON_DAY:
        start += timedelta(hours=10)
    if season == 3 and 88 <= day < POSTSEASON_DAY:
        start += timedelta(hours=3)

    return (start - _EPOCH) // timedelta(milliseconds=1)
