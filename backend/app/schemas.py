from __future__ import annotations

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, EmailStr, field_validator
from pydantic.alias_generators import to_camel

from .timeutil import as_utc


class CamelModel(BaseModel):
    # Wire format is camelCase (startAt, endAt, ...); snake_case is accepted too
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AppointmentCreate(CamelModel):
    start_at: datetime
    end_at: datetime

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = None
    reason: Optional[str] = Field(None, max_length=200)

    @field_validator("start_at", "end_at")
    @classmethod
    def _normalize_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class AppointmentRead(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    start_at: datetime
    end_at: datetime
    name: str
    email: str
    phone: Optional[str] = None
    reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("start_at", "end_at", "created_at", "updated_at")
    @classmethod
    def _attach_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class SlotRead(CamelModel):
    start_at: datetime
    end_at: datetime
    available: bool


class AppointmentListResponse(BaseModel):
    data: List[AppointmentRead]


class AppointmentResponse(BaseModel):
    data: AppointmentRead


class SlotsResponse(BaseModel):
    data: List[SlotRead]


class DeleteAppointmentResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    detail: str
    errors: Optional[List[str]] = None
