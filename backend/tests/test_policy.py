from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from app.errors import PolicyError
from app.services.policy import (
    BUSINESS_HOURS_MESSAGE,
    PAST_BOOKING_MESSAGE,
    SLOT_LENGTH_MESSAGE,
    check_temporal_policy,
    is_in_past,
    is_slot_length_valid,
    is_within_business_hours,
)


def mon(hour, minute=0):
    return datetime(2024, 1, 8, hour, minute, tzinfo=timezone.utc)


def fri(hour, minute=0):
    return datetime(2024, 1, 12, hour, minute, tzinfo=timezone.utc)


def sat(hour, minute=0):
    return datetime(2024, 1, 13, hour, minute, tzinfo=timezone.utc)


NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "start, end, expected",
    [
        (mon(9), mon(9, 30), True),
        (mon(16, 30), mon(17), True),
        (mon(8, 30), mon(9), False),
        (mon(17), mon(17, 30), False),
        (mon(9, 15), mon(9, 45), False),
        (mon(9), mon(9, 45), False),
        # duration is not this gate's concern
        (mon(9), mon(10), True),
        (sat(9), sat(9, 30), False),
        # ends past closing on the following day
        (mon(23, 30), datetime(2024, 1, 9, 0, 0, tzinfo=timezone.utc), False),
        (fri(23, 30), sat(0), False),
        (fri(16, 30), sat(16, 30), False),
    ],
)
def test_business_hours(start, end, expected):
    assert is_within_business_hours(start, end) is expected


def test_business_hours_use_local_wall_clock():
    ny = ZoneInfo("America/New_York")
    # 13:00Z is 08:00 in New York
    assert is_within_business_hours(mon(13), mon(13, 30)) is True
    assert is_within_business_hours(mon(13), mon(13, 30), ny) is False
    assert is_within_business_hours(mon(14), mon(14, 30), ny) is True


def test_slot_length():
    assert is_slot_length_valid(mon(9), mon(9, 30))
    assert not is_slot_length_valid(mon(9), mon(10))
    assert not is_slot_length_valid(mon(9, 30), mon(9))


def test_past_check_is_strict():
    assert is_in_past(mon(9), mon(9, 1))
    assert not is_in_past(mon(9), mon(9))


def test_valid_slot_passes_all_gates():
    check_temporal_policy(mon(9), mon(9, 30), NOW)


def test_past_gate_wins_over_other_failures():
    with pytest.raises(PolicyError) as exc:
        check_temporal_policy(sat(7), sat(9), datetime(2024, 2, 1, tzinfo=timezone.utc))
    assert str(exc.value) == PAST_BOOKING_MESSAGE


def test_business_hours_gate_runs_before_length_gate():
    with pytest.raises(PolicyError) as exc:
        check_temporal_policy(mon(8), mon(9), NOW)
    assert str(exc.value) == BUSINESS_HOURS_MESSAGE


def test_length_gate():
    with pytest.raises(PolicyError) as exc:
        check_temporal_policy(mon(9), mon(10), NOW)
    assert str(exc.value) == SLOT_LENGTH_MESSAGE


def test_saturday_is_rejected_as_outside_business_hours():
    with pytest.raises(PolicyError) as exc:
        check_temporal_policy(sat(9), sat(9, 30), NOW)
    assert str(exc.value) == BUSINESS_HOURS_MESSAGE


def test_overnight_half_hour_is_rejected_as_outside_business_hours():
    with pytest.raises(PolicyError) as exc:
        check_temporal_policy(fri(23, 30), sat(0), NOW)
    assert str(exc.value) == BUSINESS_HOURS_MESSAGE
