from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional, Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from ..errors import ConflictError, StoreError
from ..models import Appointment
from ..timeutil import to_storage

logger = logging.getLogger(__name__)

SLOT_TAKEN_MESSAGE = "Time slot already booked."


class AppointmentStore(Protocol):
    def find_all(self) -> List[Appointment]:
        ...

    def find_by_id(self, appointment_id: int) -> Optional[Appointment]:
        ...

    def find_overlapping(self, start: datetime, end: datetime) -> Optional[Appointment]:
        ...

    def list_overlapping(self, start: datetime, end: datetime) -> List[Appointment]:
        ...

    def create(self, fields: Mapping[str, Any]) -> Appointment:
        ...

    def reserve(self, fields: Mapping[str, Any]) -> Appointment:
        """Overlap check and insert as one serializable step."""
        ...

    def delete_by_id(self, appointment_id: int) -> bool:
        ...


def _overlap_stmt(start: datetime, end: datetime):
    return (
        select(Appointment)
        .where(Appointment.start_at < to_storage(end), Appointment.end_at > to_storage(start))
        .order_by(Appointment.start_at)
    )


def _normalize(fields: Mapping[str, Any]) -> dict:
    data = dict(fields)
    data["start_at"] = to_storage(data["start_at"])
    data["end_at"] = to_storage(data["end_at"])
    return data


class SQLAppointmentStore:
    """AppointmentStore backed by a SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    def find_all(self) -> List[Appointment]:
        try:
            return list(self.session.exec(select(Appointment).order_by(Appointment.start_at)).all())
        except SQLAlchemyError as exc:
            logger.exception("Listing appointments failed")
            raise StoreError("Failed to list appointments") from exc

    def find_by_id(self, appointment_id: int) -> Optional[Appointment]:
        try:
            return self.session.get(Appointment, appointment_id)
        except SQLAlchemyError as exc:
            logger.exception("Loading appointment %s failed", appointment_id)
            raise StoreError("Failed to load appointment") from exc

    def find_overlapping(self, start: datetime, end: datetime) -> Optional[Appointment]:
        try:
            return self.session.exec(_overlap_stmt(start, end)).first()
        except SQLAlchemyError as exc:
            logger.exception("Overlap lookup failed")
            raise StoreError("Failed to query appointments") from exc

    def list_overlapping(self, start: datetime, end: datetime) -> List[Appointment]:
        try:
            return list(self.session.exec(_overlap_stmt(start, end)).all())
        except SQLAlchemyError as exc:
            logger.exception("Range lookup failed")
            raise StoreError("Failed to query appointments") from exc

    def create(self, fields: Mapping[str, Any]) -> Appointment:
        appt = Appointment(**_normalize(fields))
        try:
            self.session.add(appt)
            self.session.commit()
            self.session.refresh(appt)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Creating appointment failed")
            raise StoreError("Failed to create appointment") from exc
        return appt

    def reserve(self, fields: Mapping[str, Any]) -> Appointment:
        data = _normalize(fields)
        appt = Appointment(**data)
        try:
            # The flush takes the database write lock; the re-check below
            # then sees every booking committed before ours.
            self.session.add(appt)
            self.session.flush()

            clash = self.session.exec(
                _overlap_stmt(data["start_at"], data["end_at"]).where(Appointment.id != appt.id)
            ).first()
            if clash:
                self.session.rollback()
                raise ConflictError(SLOT_TAKEN_MESSAGE)

            self.session.commit()
            self.session.refresh(appt)
        except IntegrityError as exc:
            self.session.rollback()
            raise ConflictError(SLOT_TAKEN_MESSAGE) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Reserving appointment failed")
            raise StoreError("Failed to create appointment") from exc
        return appt

    def delete_by_id(self, appointment_id: int) -> bool:
        try:
            appt = self.session.get(Appointment, appointment_id)
            if not appt:
                return False
            self.session.delete(appt)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Deleting appointment %s failed", appointment_id)
            raise StoreError("Failed to delete appointment") from exc
        return True
