import datetime as dt
import math
import re
from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Tuple
from zoneinfo import ZoneInfo

MINUTES_PER_DAY = 24 * 60

_HHMM = re.compile(r"(\d{1,2}):(\d{2})")


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """Wall clock time without a date. 24:00 marks the end of the day."""

    hour: int
    minute: int = 0

    def __post_init__(self):
        if not 0 <= self.minute <= 59:
            raise ValueError(f"invalid minute: {self.minute}")
        if not (0 <= self.hour <= 23 or (self.hour == 24 and self.minute == 0)):
            raise ValueError(f"invalid time of day: {self.hour}:{self.minute:02d}")

    @classmethod
    def parse(cls, s: str) -> "TimeOfDay":
        m = _HHMM.fullmatch(s.strip())
        if not m:
            raise ValueError(f"expected HH:MM, got {s!r}")
        return cls(int(m.group(1)), int(m.group(2)))

    @classmethod
    def from_minutes(cls, minutes: int) -> "TimeOfDay":
        return cls(*divmod(minutes, 60))

    @property
    def minutes(self) -> int:
        return self.hour * 60 + self.minute

    def on(self, day: dt.date) -> dt.datetime:
        # 24:00 lands on the following midnight
        return dt.datetime.combine(day, dt.time.min) + dt.timedelta(minutes=self.minutes)

    def __str__(self):
        return f"{self.hour:02d}:{self.minute:02d}"


class BusyInterval(NamedTuple):
    start: dt.datetime
    end: dt.datetime


class FreeInterval(NamedTuple):
    start: dt.datetime
    end: dt.datetime


class DayBlock(NamedTuple):
    day: dt.date
    start: TimeOfDay
    end: TimeOfDay

    @property
    def label(self) -> str:
        return format_range(self.start, self.end)


def format_range(start: TimeOfDay, end: TimeOfDay) -> str:
    return f"{start} - {end}"


def parse_range(text: str) -> Tuple[TimeOfDay, TimeOfDay]:
    start, sep, end = text.partition(" - ")
    if not sep:
        raise ValueError(f"expected 'HH:MM - HH:MM', got {text!r}")
    return TimeOfDay.parse(start), TimeOfDay.parse(end)


def weekday_index(day: dt.date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return (day.weekday() + 1) % 7


def _seconds_of_day(t: dt.datetime) -> float:
    return t.hour * 3600 + t.minute * 60 + t.second + t.microsecond / 1e6


def split_by_day(intervals: Iterable[FreeInterval], tz: ZoneInfo) -> List[DayBlock]:
    """Cut intervals at local midnight in ``tz`` and express each piece as a DayBlock.

    A piece starts at its local wall clock time and lasts as long as it
    really does, so on DST change days the end label follows elapsed time
    rather than the shifted wall clock. Starts are rounded up and ends
    rounded down to whole minutes; pieces left empty by the rounding are
    dropped.
    """
    blocks = []
    for interval in intervals:
        # walk in UTC: same-zone aware datetimes compare by wall clock
        cursor = interval.start.astimezone(dt.timezone.utc)
        end = interval.end.astimezone(dt.timezone.utc)
        while cursor < end:
            local = cursor.astimezone(tz)
            midnight = dt.datetime.combine(local.date() + dt.timedelta(days=1), dt.time.min, tzinfo=tz)
            midnight = midnight.astimezone(dt.timezone.utc)
            piece_end = min(end, midnight)

            start_sod = _seconds_of_day(local)
            start_min = math.ceil(start_sod / 60)
            if piece_end == midnight:
                end_min = MINUTES_PER_DAY
            else:
                elapsed = (piece_end - cursor).total_seconds()
                end_min = min(MINUTES_PER_DAY, math.floor((start_sod + elapsed) / 60))
            if start_min < end_min:
                blocks.append(DayBlock(
                    local.date(),
                    TimeOfDay.from_minutes(start_min),
                    TimeOfDay.from_minutes(end_min),
                ))
            cursor = piece_end
    return blocks
