"""Point-in-time history of snapshots for a single entity."""

from bisect import bisect_left, bisect_right
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class History(Generic[T]):
    """Ordered mapping of millisecond timestamp → snapshot.

    Timestamps are kept sorted in a parallel list so that "value as of time t"
    lookups are a binary search.
    """

    def __init__(self, items: dict[int, T] | None = None):
        self._times: list[int] = []
        self._values: list[T] = []
        if items:
            for time, value in items.items():
                self.insert(time, value)

    def insert(self, time: int, value: T) -> T | None:
        """Insert or overwrite the snapshot recorded at exactly `time`.

        Args:
            time: Snapshot timestamp (epoch ms)
            value: Snapshot to store

        Returns:
            The value previously stored at `time`, or None
        """
        # Dumps are mostly read in chronological order
        if not self._times or time > self._times[-1]:
            self._times.append(time)
            self._values.append(value)
            return None

        i = bisect_left(self._times, time)
        if i < len(self._times) and self._times[i] == time:
            prior = self._values[i]
            self._values[i] = value
            return prior

        self._times.insert(i, time)
        self._values.insert(i, value)
        return None

    def get(self, time: int) -> T | None:
        """Return the most recent snapshot at or before `time`, or None."""
        i = bisect_right(self._times, time)
        if i == 0:
            return None
        return self._values[i - 1]

    def dedup(self) -> None:
        """Collapse runs of consecutive equal snapshots to their first entry."""
        if len(self._times) < 2:
            return

        times = [self._times[0]]
        values = [self._values[0]]
        for time, value in zip(self._times[1:], self._values[1:]):
            if value != values[-1]:
                times.append(time)
                values.append(value)

        self._times = times
        self._values = values

    def items(self) -> Iterator[tuple[int, T]]:
        """Iterate (time, value) pairs in ascending time order."""
        return zip(self._times, self._values)

    def to_dict(self) -> dict[int, T]:
        return dict(self.items())

    def __len__(self) -> int:
        return len(self._times)

    def __iter__(self) -> Iterator[int]:
        return iter(self._times)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, History):
            return NotImplemented
        return self._times == other._times and self._values == other._values

    def __repr__(self) -> str:
        return f"History({len(self._times)} entries)"
