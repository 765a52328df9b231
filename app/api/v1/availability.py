from __future__ import annotations

from datetime import date, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db import get_db
from app.deps import get_now, get_scheduling_config
from app.scheduling import SchedulingConfig
from app.schemas.availability import AvailabilityRequest, TimeSlotOut
from app.services.availability import calculate_available_slots

router = APIRouter(prefix="/availability", tags=["availability"])


def _to_out(slots) -> list[TimeSlotOut]:
    return [TimeSlotOut.model_validate(s.model_dump()) for s in slots]


@router.get(
    "", response_model=list[TimeSlotOut], response_model_exclude_none=True
)
def get_availability(
    service_id: Annotated[str, Query(alias="serviceId", min_length=1)],
    barber_id: Annotated[str, Query(alias="barberId", min_length=1)],
    date_local: Annotated[date, Query(alias="date")],
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    config: SchedulingConfig = Depends(get_scheduling_config),
):
    """
    Turnos libres para el servicio en la fecha local. barberId="any" une a
    todos los barberos que ofrecen el servicio (uno por hora de inicio).
    Solo se devuelven turnos disponibles.
    """
    slots = calculate_available_slots(
        db, service_id, barber_id, date_local, now, config
    )
    return _to_out(slots)


@router.post(
    "", response_model=list[TimeSlotOut], response_model_exclude_none=True
)
def post_availability(
    payload: AvailabilityRequest,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    config: SchedulingConfig = Depends(get_scheduling_config),
):
    slots = calculate_available_slots(
        db, payload.service_id, payload.barber_id, payload.date, now, config
    )
    return _to_out(slots)
