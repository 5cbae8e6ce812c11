import datetime as dt
import logging
from typing import Iterable, List, Optional, Protocol, Sequence, Set, Tuple

from .config import Settings
from .errors import ValidationError
from .free_time import derive_free, horizon
from .intervals import BusyInterval, split_by_day
from .rules import ALL_DAYS, ConsideredRange, HourWindow, trim
from .schedule import DaySchedule, group

logger = logging.getLogger(__name__)


class CalendarSource(Protocol):
    async def get_busy(self, time_min: dt.datetime, time_max: dt.datetime, timezone: str) -> List[BusyInterval]:
        ...


def _int_csv(raw: str, name: str) -> List[int]:
    try:
        return [int(x) for x in raw.split(",") if x.strip()]
    except ValueError:
        raise ValidationError(f"{name} must be comma separated integers, got {raw!r}")


def parse_query(days: Optional[str], hours_range: Optional[str], meeting_length: Optional[str], settings: Settings) -> Tuple[Set[int], List[int], int]:
    """Turn the raw query strings into typed values, falling back to configured defaults."""
    day_set = set(_int_csv(days, "days")) if days is not None else set(settings.default_days)
    hours = _int_csv(hours_range, "hoursRange") if hours_range is not None else list(settings.default_hours)
    if meeting_length is None:
        length = settings.default_meeting_length
    else:
        try:
            length = int(meeting_length)
        except ValueError:
            raise ValidationError(f"meetingLength must be an integer, got {meeting_length!r}")
    return day_set, hours, length


def build_range(considered_days: Iterable[int], hour_range: Sequence[int], meeting_length: int) -> ConsideredRange:
    days = frozenset(considered_days)
    unknown = days - ALL_DAYS
    if unknown:
        raise ValidationError(f"days must be weekday indices 0-6, got {sorted(unknown)}")
    if len(hour_range) != 2:
        raise ValidationError(f"hoursRange needs exactly two values, got {list(hour_range)}")
    start, end = hour_range
    if not (0 <= start < end <= 24):
        raise ValidationError(f"hoursRange must satisfy 0 <= start < end <= 24, got {start},{end}")
    if meeting_length < 0:
        raise ValidationError(f"meetingLength must not be negative, got {meeting_length}")
    return ConsideredRange(days, HourWindow.from_hours(start, end), meeting_length)


async def compute_schedule(
    considered_days: Iterable[int],
    hour_range: Sequence[int],
    meeting_length: int,
    source: CalendarSource,
    settings: Settings,
    now: Optional[dt.datetime] = None,
) -> List[DaySchedule]:
    rng = build_range(considered_days, hour_range, meeting_length)

    tz = settings.tz
    now = now or dt.datetime.now(tz)
    time_min, time_max = horizon(now)

    busy = await source.get_busy(time_min, time_max, settings.timezone)
    free = derive_free(busy, time_min, time_max)
    trimmed = trim(split_by_day(free, tz), rng)
    logger.debug("busy=%d free=%d trimmed=%d", len(busy), len(free), len(trimmed))

    return group(trimmed, settings.locale, today=now.astimezone(tz).date())
