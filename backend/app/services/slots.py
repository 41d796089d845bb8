from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import List, Protocol, Sequence

from ..errors import ValidationError
from ..timeutil import as_utc

BUSINESS_START_HOUR = 9
BUSINESS_END_HOUR = 17
SLOT_MINUTES = 30
SLOT_LENGTH = timedelta(minutes=SLOT_MINUTES)


class Interval(Protocol):
    start_at: datetime
    end_at: datetime


@dataclass(frozen=True)
class Slot:
    start_at: datetime
    end_at: datetime
    available: bool


def overlaps(s1: datetime, e1: datetime, s2: datetime, e2: datetime) -> bool:
    """Half-open overlap test for [s1, e1) and [s2, e2)."""
    return s1 < e2 and e1 > s2


def generate_slots(
    range_start: datetime,
    range_end: datetime,
    existing: Sequence[Interval],
    tz: tzinfo = timezone.utc,
) -> List[Slot]:
    """
    Deterministic slot grid for [range_start, range_end).
    - Weekdays only, in the ``tz`` calendar
    - 30-minute slots
    - 9:00–16:30 local time (last start at 16:30)
    Only a slot's start is checked against the range; a slot whose start is
    in range is returned even if its end falls past ``range_end``.
    """
    start = as_utc(range_start)
    end = as_utc(range_end)
    if start >= end:
        raise ValidationError("rangeStart must be before rangeEnd")

    booked = [(as_utc(a.start_at), as_utc(a.end_at)) for a in existing]

    slots: List[Slot] = []
    d = start.astimezone(tz).date()
    last_day = end.astimezone(tz).date()

    while d <= last_day:
        # 0=Mon ... 6=Sun
        if d.weekday() < 5:
            cursor = datetime.combine(d, time(BUSINESS_START_HOUR, 0), tzinfo=tz)
            end_boundary = datetime.combine(d, time(BUSINESS_END_HOUR, 0), tzinfo=tz)

            while cursor + SLOT_LENGTH <= end_boundary:
                slot_start = cursor.astimezone(timezone.utc)
                cursor = cursor + SLOT_LENGTH
                if slot_start < start or slot_start >= end:
                    continue

                slot_end = slot_start + SLOT_LENGTH
                taken = any(overlaps(slot_start, slot_end, b_start, b_end) for b_start, b_end in booked)
                slots.append(Slot(start_at=slot_start, end_at=slot_end, available=not taken))
        d = d + timedelta(days=1)

    return slots
