from __future__ import annotations

from datetime import datetime
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Column, Index

from .timeutil import to_storage, utcnow


def _now() -> datetime:
    return to_storage(utcnow())


class Appointment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # naive UTC
    start_at: datetime = Field(sa_column=Column(DateTime(), nullable=False))
    end_at: datetime = Field(sa_column=Column(DateTime(), nullable=False))

    name: str = Field(max_length=255)
    email: str
    phone: Optional[str] = None
    reason: Optional[str] = Field(default=None, max_length=200)

    created_at: datetime = Field(default_factory=_now, sa_column=Column(DateTime(), nullable=False))
    updated_at: datetime = Field(default_factory=_now, sa_column=Column(DateTime(), nullable=False))


# Grid-aligned 30-minute appointments overlap only when their starts match,
# so a unique start is the storage-level backstop against double booking.
Index("uq_appt_start_at", Appointment.start_at, unique=True)
Index("idx_appt_end_at", Appointment.end_at)
