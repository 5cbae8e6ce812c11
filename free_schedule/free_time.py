import datetime as dt
from typing import Iterable, List, Tuple

from .intervals import BusyInterval, FreeInterval

HORIZON_DAYS = 7


def horizon(now: dt.datetime) -> Tuple[dt.datetime, dt.datetime]:
    return now, now + dt.timedelta(days=HORIZON_DAYS)


def derive_free(busy: Iterable[BusyInterval], horizon_start: dt.datetime, horizon_end: dt.datetime) -> List[FreeInterval]:
    """Complement of ``busy`` within [horizon_start, horizon_end].

    ``busy`` must be sorted by start. Overlapping entries are absorbed by the
    cursor; anything past the horizon end is clipped away.
    """
    free = []
    cursor = horizon_start
    for b in busy:
        gap_end = min(b.start, horizon_end)
        if cursor < gap_end:
            free.append(FreeInterval(cursor, gap_end))
        cursor = max(cursor, b.end)
    if cursor < horizon_end:
        free.append(FreeInterval(cursor, horizon_end))
    return free
