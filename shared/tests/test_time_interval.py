import random
from datetime import datetime, timedelta, timezone

import pytest

from shared.domain.value_objects import InvalidIntervalError, TimeInterval

UTC = timezone.utc
ALMATY = timezone(timedelta(hours=5))


def interval(start_hour, end_hour, tz=UTC):
    return TimeInterval(
        datetime(2030, 1, 1, start_hour, tzinfo=tz),
        datetime(2030, 1, 1, end_hour, tzinfo=tz),
    )


def test_overlapping_intervals():
    assert interval(9, 11).overlaps(interval(10, 12))
    assert interval(10, 12).overlaps(interval(9, 11))


def test_adjacent_intervals_do_not_overlap():
    assert not interval(9, 10).overlaps(interval(10, 11))
    assert not interval(10, 11).overlaps(interval(9, 10))


def test_containment_overlaps():
    assert interval(9, 17).overlaps(interval(12, 13))
    assert interval(12, 13).overlaps(interval(9, 17))


@pytest.mark.parametrize("seed", [3, 11, 2030])
def test_overlap_is_symmetric_and_matches_shared_minutes(seed):
    rng = random.Random(seed)
    base = datetime(2030, 1, 1, tzinfo=UTC)

    def random_interval():
        start = rng.randrange(0, 120)
        return start, start + rng.randrange(1, 40)

    for _ in range(300):
        (a_start, a_end), (b_start, b_end) = random_interval(), random_interval()
        a = TimeInterval(base + timedelta(minutes=a_start), base + timedelta(minutes=a_end))
        b = TimeInterval(base + timedelta(minutes=b_start), base + timedelta(minutes=b_end))
        shares_a_minute = bool(set(range(a_start, a_end)) & set(range(b_start, b_end)))

        assert a.overlaps(b) == b.overlaps(a) == shares_a_minute, (a, b)


def test_overlap_compares_instants_across_offsets():
    # 14:00+05:00 is 09:00 UTC
    local = interval(14, 15, tz=ALMATY)
    assert local.overlaps(interval(9, 10))
    assert not local.overlaps(interval(10, 11))


@pytest.mark.parametrize("start_hour,end_hour", [(10, 10), (11, 10)])
def test_empty_or_inverted_interval_is_rejected(start_hour, end_hour):
    with pytest.raises(InvalidIntervalError):
        interval(start_hour, end_hour)


def test_naive_bounds_are_rejected():
    with pytest.raises(InvalidIntervalError):
        TimeInterval(datetime(2030, 1, 1, 9), datetime(2030, 1, 1, 10))


def test_non_datetime_bounds_are_rejected():
    with pytest.raises(InvalidIntervalError):
        TimeInterval("2030-01-01T09:00Z", "2030-01-01T10:00Z")


def test_invalid_interval_error_is_a_value_error():
    assert issubclass(InvalidIntervalError, ValueError)


def test_contains_is_half_open():
    slot = interval(9, 10)
    assert slot.contains(datetime(2030, 1, 1, 9, tzinfo=UTC))
    assert slot.contains(datetime(2030, 1, 1, 9, 59, tzinfo=UTC))
    assert not slot.contains(datetime(2030, 1, 1, 10, tzinfo=UTC))


def test_day_window_covers_whole_utc_days():
    window = TimeInterval(
        datetime(2030, 1, 1, 23, tzinfo=UTC),
        datetime(2030, 1, 2, 1, tzinfo=UTC),
    ).day_window()
    assert window.start == datetime(2030, 1, 1, tzinfo=UTC)
    assert window.end == datetime(2030, 1, 3, tzinfo=UTC)


def test_day_window_keeps_midnight_end():
    window = TimeInterval(
        datetime(2030, 1, 1, 8, tzinfo=UTC),
        datetime(2030, 1, 2, tzinfo=UTC),
    ).day_window()
    assert window.end == datetime(2030, 1, 2, tzinfo=UTC)


def test_overlap_with_non_interval_raises_type_error():
    with pytest.raises(TypeError):
        interval(9, 10).overlaps((1, 2))


def test_intervals_compare_by_value():
    assert interval(9, 10) == interval(9, 10)
    assert interval(9, 10).duration == timedelta(hours=1)
