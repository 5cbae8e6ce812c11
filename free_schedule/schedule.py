import datetime as dt
from typing import Dict, Iterable, List, Optional, Tuple

from babel.dates import format_date
from pydantic import BaseModel

from .intervals import DayBlock, TimeOfDay, parse_range

DEFAULT_LOCALE = "pl_PL"


class DaySchedule(BaseModel):
    weekday: str
    date: dt.date
    blocks: List[str]


def capitalize_first(s: str) -> str:
    return s[:1].upper() + s[1:]


def weekday_name(day: dt.date, locale: str = DEFAULT_LOCALE) -> str:
    return capitalize_first(format_date(day, "EEEE", locale=locale))


def group_by_date(blocks: Iterable[DayBlock]) -> Dict[str, List[str]]:
    daily: Dict[str, List[str]] = {}
    for b in blocks:
        daily.setdefault(b.day.isoformat(), []).append(b.label)
    return daily


def group(blocks: Iterable[DayBlock], locale: str = DEFAULT_LOCALE, today: Optional[dt.date] = None) -> List[DaySchedule]:
    """Group trimmed blocks into one entry per date, nearest date first.

    Entries are keyed by date, so next week's Monday and this week's Monday
    stay separate even though they share a label.
    """
    today = today or dt.date.today()
    entries = []
    for iso, labels in group_by_date(blocks).items():
        day = dt.date.fromisoformat(iso)
        entries.append(DaySchedule(weekday=weekday_name(day, locale), date=day, blocks=labels))
    entries.sort(key=lambda e: (abs((e.date - today).days), e.date))
    return entries


def flatten(schedule: Iterable[DaySchedule]) -> List[Tuple[dt.date, TimeOfDay, TimeOfDay]]:
    flat = []
    for entry in schedule:
        for label in entry.blocks:
            start, end = parse_range(label)
            flat.append((entry.date, start, end))
    return flat
