from __future__ import annotations

from datetime import datetime, timezone, tzinfo

from ..errors import PolicyError
from ..timeutil import as_utc
from .slots import BUSINESS_END_HOUR, BUSINESS_START_HOUR, SLOT_LENGTH, SLOT_MINUTES

PAST_BOOKING_MESSAGE = "Cannot book for past time."
BUSINESS_HOURS_MESSAGE = (
    "Appointment must be inside business hours (Mon-Fri 9:00-17:00) and 30-min increments."
)
SLOT_LENGTH_MESSAGE = f"Slot must be exactly {SLOT_MINUTES} minutes."

_VALID_MINUTES = (0, 30)


def is_in_past(start_at: datetime, now: datetime) -> bool:
    return as_utc(start_at) < as_utc(now)


def is_within_business_hours(start_at: datetime, end_at: datetime, tz: tzinfo = timezone.utc) -> bool:
    """
    Wall-clock check in ``tz``: weekday start, start at or after 9:00, end at
    or before 17:00 of the start's own day, and both ends on a :00 or :30
    minute. Duration is not checked here.
    """
    start = as_utc(start_at).astimezone(tz)
    end = as_utc(end_at).astimezone(tz)

    if start.weekday() >= 5:
        return False
    if start.hour < BUSINESS_START_HOUR:
        return False
    closing = start.replace(hour=BUSINESS_END_HOUR, minute=0, second=0, microsecond=0)
    if end.date() != start.date() or end > closing:
        return False
    if start.minute not in _VALID_MINUTES or end.minute not in _VALID_MINUTES:
        return False
    return True


def is_slot_length_valid(start_at: datetime, end_at: datetime) -> bool:
    return as_utc(end_at) - as_utc(start_at) == SLOT_LENGTH


def check_temporal_policy(start_at: datetime, end_at: datetime, now: datetime, tz: tzinfo = timezone.utc) -> None:
    # Gate order is fixed; the first failure is the one reported
    if is_in_past(start_at, now):
        raise PolicyError(PAST_BOOKING_MESSAGE)
    if not is_within_business_hours(start_at, end_at, tz):
        raise PolicyError(BUSINESS_HOURS_MESSAGE)
    if not is_slot_length_valid(start_at, end_at):
        raise PolicyError(SLOT_LENGTH_MESSAGE)
