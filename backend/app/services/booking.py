from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from typing import Any, List, Mapping, Optional, Union

from ..errors import ConflictError, NotFoundError, PolicyError, ValidationError
from ..models import Appointment
from ..schemas import AppointmentCreate
from ..timeutil import as_utc, utcnow
from .policy import check_temporal_policy
from .slots import Slot, generate_slots
from .store import SLOT_TAKEN_MESSAGE, AppointmentStore
from .validation import validate_payload

logger = logging.getLogger(__name__)


def list_appointments(store: AppointmentStore) -> List[Appointment]:
    return store.find_all()


def available_slots(
    store: AppointmentStore,
    range_start: datetime,
    range_end: datetime,
    tz: tzinfo = timezone.utc,
) -> List[Slot]:
    start, end = as_utc(range_start), as_utc(range_end)
    if start >= end:
        raise ValidationError("rangeStart must be before rangeEnd")
    return generate_slots(start, end, store.list_overlapping(start, end), tz)


def create_appointment(
    store: AppointmentStore,
    payload: Union[AppointmentCreate, Mapping[str, Any]],
    tz: tzinfo = timezone.utc,
    now: Optional[datetime] = None,
) -> Appointment:
    """
    Validate -> temporal policy -> conflict check -> persist.
    Only the last step writes. ``now`` defaults to the current UTC instant.
    """
    req = validate_payload(payload)

    try:
        check_temporal_policy(req.start_at, req.end_at, now or utcnow(), tz)
    except PolicyError as e:
        logger.info("Booking rejected for %s: %s", req.start_at.isoformat(), e)
        raise

    if store.find_overlapping(req.start_at, req.end_at):
        logger.info("Booking conflict for %s", req.start_at.isoformat())
        raise ConflictError(SLOT_TAKEN_MESSAGE)

    appt = store.reserve(req.model_dump())
    logger.info("Appointment %s booked for %s", appt.id, req.start_at.isoformat())
    return appt


def delete_appointment(store: AppointmentStore, appointment_id: Union[int, str]) -> None:
    # ids arriving from a URL path may not be numeric at all
    try:
        appointment_id = int(appointment_id)
    except (TypeError, ValueError):
        raise NotFoundError("Appointment not found.")

    if not store.find_by_id(appointment_id) or not store.delete_by_id(appointment_id):
        raise NotFoundError("Appointment not found.")
    logger.info("Appointment %s cancelled", appointment_id)
