from __future__ import annotations

from typing import Iterator, List, Tuple

from .errors import PreconditionError
from .models import GanttEntry


class TimelineRecorder:
    """
    Append-only, run-length-encoded log of CPU occupancy.

    Each call to :meth:`record` accounts for exactly one tick. Consecutive ticks
    spent on the same occupant are merged into a single entry, so the log stays
    contiguous and gapless over ``[0, end_time)``.
    """

    def __init__(self) -> None:
        self._entries: List[GanttEntry] = []

    def record(self, occupant: str, time: int) -> None:
        if self._entries:
            last = self._entries[-1]
            if last.end_time != time:
                raise PreconditionError(f"Timeline gap: last entry ends at {last.end_time}, got tick {time}")
            if last.occupant == occupant:
                self._entries[-1] = GanttEntry(occupant, last.start_time, time + 1)
                return
        elif time != 0:
            raise PreconditionError(f"Timeline must start at tick 0, got {time}")

        self._entries.append(GanttEntry(occupant, time, time + 1))

    def reset(self) -> None:
        self._entries.clear()

    @property
    def entries(self) -> Tuple[GanttEntry, ...]:
        return tuple(self._entries)

    @property
    def end_time(self) -> int:
        return self._entries[-1].end_time if self._entries else 0

    def __iter__(self) -> Iterator[GanttEntry]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
