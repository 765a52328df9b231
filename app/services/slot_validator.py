from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.models.barber import Barber
from app.models.service import Service
from app.scheduling import DEFAULT_CONFIG, SchedulingConfig
from app.services.availability import barber_slots
from app.services.errors import BarberNotFound
from app.utils.tz import ensure_aware_utc, format_hhmm, to_local


def lock_barber(db: Session, barber_id: str) -> Barber:
    """
    Bloquea la fila del barbero hasta el commit (SELECT ... FOR UPDATE) para
    serializar escrituras concurrentes sobre su agenda. En SQLite es no-op.
    """
    barber = (
        db.query(Barber)
        .filter(Barber.id == barber_id)
        .with_for_update()
        .populate_existing()
        .one_or_none()
    )
    if not barber:
        raise BarberNotFound(barber_id)
    return barber


def validate_slot(
    db: Session,
    barber_id: str,
    service: Service,
    start_utc: datetime,
    now: datetime,
    config: SchedulingConfig = DEFAULT_CONFIG,
    exclude_appointment_id: str | None = None,
) -> tuple[bool, str | None]:
    """
    True si start_utc sigue siendo un turno libre del barbero para el servicio.
    Debe llamarse dentro de la misma transacción que escribe la cita: el
    cálculo de disponibilidad previo es solo orientativo.
    """
    start_utc = ensure_aware_utc(start_utc)
    local = to_local(start_utc, config.tz)
    if local.second or local.microsecond:
        return False, "El horario seleccionado no está disponible"

    barber = lock_barber(db, barber_id)
    if not barber.active:
        return False, "El barbero no está disponible"

    requested = format_hhmm(local)
    slots = barber_slots(
        db,
        service,
        barber,
        local.date(),
        now,
        config,
        exclude_appointment_id=exclude_appointment_id,
    )
    if any(s.start_time == requested for s in slots):
        return True, None

    get_logger().warning(
        "appointment.slot_unavailable",
        barber_id=barber_id,
        start=start_utc.isoformat(),
        requested=requested,
        available=[s.start_time for s in slots],
    )
    return False, "El horario seleccionado ya no está disponible"
