import datetime as dt
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, NamedTuple

from .intervals import DayBlock, TimeOfDay, weekday_index

ALL_DAYS = frozenset(range(7))


class HourWindow(NamedTuple):
    start: TimeOfDay
    end: TimeOfDay

    @classmethod
    def from_hours(cls, start_hour: int, end_hour: int) -> "HourWindow":
        window = cls(TimeOfDay(start_hour), TimeOfDay(end_hour))
        # Windows wrapping past midnight (22:00-02:00) are not supported
        if window.start >= window.end:
            raise ValueError(f"hour window must end after it starts: {window.start} - {window.end}")
        return window


@dataclass(frozen=True)
class ConsideredRange:
    days: FrozenSet[int]
    window: HourWindow
    min_meeting_minutes: int = 0


def _minutes_between(day: dt.date, start: TimeOfDay, end: TimeOfDay) -> int:
    return int((end.on(day) - start.on(day)).total_seconds() // 60)


def trim_block(block: DayBlock, rng: ConsideredRange):
    if weekday_index(block.day) not in rng.days:
        return None

    start = max(block.start, rng.window.start)
    end = min(block.end, rng.window.end)
    if start >= end:
        return None

    # Duration is checked on the clipped block, not the original one
    if _minutes_between(block.day, start, end) < rng.min_meeting_minutes:
        return None
    return DayBlock(block.day, start, end)


def trim(blocks: Iterable[DayBlock], rng: ConsideredRange) -> List[DayBlock]:
    trimmed = []
    for b in blocks:
        t = trim_block(b, rng)
        if t is not None:
            trimmed.append(t)
    return trimmed
