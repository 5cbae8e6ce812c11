import datetime as dt

from free_schedule.free_time import HORIZON_DAYS, derive_free, horizon
from free_schedule.intervals import BusyInterval, FreeInterval

from conftest import utc


def test_empty_week_is_one_free_interval():
    now = utc(2024, 1, 1, 6, 42)
    start, end = horizon(now)
    assert end - start == dt.timedelta(days=HORIZON_DAYS)
    assert derive_free([], start, end) == [FreeInterval(now, now + dt.timedelta(days=7))]


def test_single_busy_hour_splits_the_week():
    start, end = utc(2024, 1, 1), utc(2024, 1, 8)
    busy = [BusyInterval(utc(2024, 1, 2, 9), utc(2024, 1, 2, 10))]
    assert derive_free(busy, start, end) == [
        FreeInterval(utc(2024, 1, 1), utc(2024, 1, 2, 9)),
        FreeInterval(utc(2024, 1, 2, 10), utc(2024, 1, 8)),
    ]


def test_back_to_back_and_overlapping_busy_are_absorbed():
    start, end = utc(2024, 1, 1, 8), utc(2024, 1, 1, 18)
    busy = [
        BusyInterval(utc(2024, 1, 1, 9), utc(2024, 1, 1, 11)),
        BusyInterval(utc(2024, 1, 1, 10), utc(2024, 1, 1, 10, 30)),
        BusyInterval(utc(2024, 1, 1, 11), utc(2024, 1, 1, 12)),
    ]
    assert derive_free(busy, start, end) == [
        FreeInterval(utc(2024, 1, 1, 8), utc(2024, 1, 1, 9)),
        FreeInterval(utc(2024, 1, 1, 12), utc(2024, 1, 1, 18)),
    ]


def test_busy_covering_everything_leaves_nothing():
    start, end = utc(2024, 1, 1, 8), utc(2024, 1, 1, 18)
    busy = [BusyInterval(utc(2024, 1, 1, 7), utc(2024, 1, 1, 19))]
    assert derive_free(busy, start, end) == []


def test_busy_outside_horizon_is_tolerated():
    start, end = horizon(utc(2024, 1, 1, 12))
    busy = [
        BusyInterval(utc(2023, 12, 31, 10), utc(2024, 1, 1, 13)),
        BusyInterval(utc(2024, 1, 9), utc(2024, 1, 9, 1)),
    ]
    free = derive_free(busy, start, end)
    assert free == [FreeInterval(utc(2024, 1, 1, 13), end)]
    assert all(f.start <= end and f.end <= end for f in free)


def test_free_and_busy_partition_the_horizon():
    start, end = utc(2024, 1, 1), utc(2024, 1, 8)
    busy = [
        BusyInterval(utc(2024, 1, 1), utc(2024, 1, 1, 3)),
        BusyInterval(utc(2024, 1, 3, 9), utc(2024, 1, 3, 17)),
        BusyInterval(utc(2024, 1, 5, 12), utc(2024, 1, 5, 13)),
    ]
    free = derive_free(busy, start, end)
    pieces = sorted(list(busy) + [tuple(f) for f in free])
    assert pieces[0][0] == start
    assert pieces[-1][1] == end
    for (_, a_end), (b_start, _) in zip(pieces, pieces[1:]):
        assert a_end == b_start
    assert all(f.start < f.end for f in free)
