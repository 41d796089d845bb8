from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlmodel import Session

from .db import get_session
from .errors import ConflictError, NotFoundError, PolicyError, ValidationError
from .schemas import (
    AppointmentCreate, AppointmentRead,
    AppointmentListResponse, AppointmentResponse,
    SlotRead, SlotsResponse,
    DeleteAppointmentResponse, ErrorResponse,
)
from .services import booking
from .services.store import AppointmentStore, SQLAppointmentStore
from .timeutil import get_zone

router = APIRouter(prefix="/api/v1/appointment", tags=["appointments"])


def get_store(session: Session = Depends(get_session)) -> AppointmentStore:
    return SQLAppointmentStore(session)


def get_business_zone(request: Request) -> tzinfo:
    return get_zone(request.app.state.settings.business_timezone)


@router.get("/", response_model=AppointmentListResponse)
def list_all(store: AppointmentStore = Depends(get_store)):
    appts = booking.list_appointments(store)
    return AppointmentListResponse(data=[AppointmentRead.model_validate(a) for a in appts])


@router.get("/available", response_model=SlotsResponse, responses={400: {"model": ErrorResponse}})
def available(
    range_start: Optional[datetime] = Query(None, alias="rangeStart"),
    range_end: Optional[datetime] = Query(None, alias="rangeEnd"),
    store: AppointmentStore = Depends(get_store),
    tz: tzinfo = Depends(get_business_zone),
):
    if range_start is None or range_end is None:
        raise HTTPException(
            status_code=400,
            detail="Please provide rangeStart and rangeEnd as ISO strings",
        )

    try:
        slots = booking.available_slots(store, range_start, range_end, tz)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SlotsResponse(
        data=[SlotRead(start_at=s.start_at, end_at=s.end_at, available=s.available) for s in slots]
    )


@router.post(
    "/",
    response_model=AppointmentResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def create(
    req: AppointmentCreate,
    store: AppointmentStore = Depends(get_store),
    tz: tzinfo = Depends(get_business_zone),
):
    try:
        appt = booking.create_appointment(store, req, tz)
    except (ValidationError, PolicyError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return AppointmentResponse(data=AppointmentRead.model_validate(appt))


@router.delete("/{appointment_id}", response_model=DeleteAppointmentResponse, responses={404: {"model": ErrorResponse}})
def delete(appointment_id: str, store: AppointmentStore = Depends(get_store)):
    try:
        booking.delete_appointment(store, appointment_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return DeleteAppointmentResponse(message="Appointment cancelled.")
