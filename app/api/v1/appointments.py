from __future__ import annotations

from datetime import UTC, datetime, timedelta

import phonenumbers
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.core.settings import settings
from app.db import get_db
from app.deps import get_now, get_scheduling_config
from app.models.appointment import (
    ACTIVE_STATUSES,
    Appointment,
    AppointmentStatus,
    CreatedByRole,
)
from app.models.client import Client
from app.models.service import Service
from app.scheduling import SchedulingConfig, validate_transition
from app.schemas.appointments import (
    AppointmentOut,
    CreateAppointmentIn,
    RescheduleIn,
    StatusUpdateIn,
)
from app.services.availability import ANY_BARBER, load_active_service, load_barber
from app.services.slot_validator import validate_slot
from app.utils.tz import iso_utc, stored_utc

router = APIRouter(prefix="/appointments", tags=["appointments"])

SLOT_TAKEN_MSG = (
    "Ups, el horario acaba de ser reservado por otra persona. "
    "Actualiza los horarios y elige otro."
)

SLOT_INDEX = "ux_appt_barber_start_active"
SQLITE_SLOT_COLUMNS = "appointments.barber_id, appointments.start_date_time"

INVALID_PHONE_MSG = "Número de teléfono inválido"


def _parse_start(payload_iso: str) -> datetime:
    try:
        dt = datetime.fromisoformat(payload_iso.replace("Z", "+00:00"))
    except ValueError:
        raise HTTPException(
            400,
            detail="Fecha inválida (usa ISO-8601, ej.: 2025-11-10T15:00:00Z)",
        ) from None
    if dt.tzinfo is None:
        # sin TZ se interpreta como UTC
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _normalize_phone(raw: str, region: str) -> str:
    """E.164 normalizado; números locales se leen en la región del negocio."""
    try:
        number = phonenumbers.parse(raw, region)
    except phonenumbers.NumberParseException:
        raise HTTPException(400, INVALID_PHONE_MSG) from None
    if not phonenumbers.is_valid_number(number):
        raise HTTPException(400, INVALID_PHONE_MSG)
    return phonenumbers.format_number(number, phonenumbers.PhoneNumberFormat.E164)


def _is_slot_taken(exc: IntegrityError) -> bool:
    """Solo la violación del índice de turnos activos cuenta como horario tomado."""
    orig = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    if getattr(diag, "constraint_name", None) == SLOT_INDEX:
        return True
    msg = str(orig if orig is not None else exc)
    # SQLite nombra las columnas del índice, no el índice
    return SLOT_INDEX in msg or SQLITE_SLOT_COLUMNS in msg


def _commit_or_409(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if _is_slot_taken(e):
            raise HTTPException(status.HTTP_409_CONFLICT, SLOT_TAKEN_MSG) from e
        raise


def _load_appointment(db: Session, appointment_id: str) -> Appointment:
    ap = db.get(Appointment, appointment_id)
    if not ap:
        raise HTTPException(404, "Cita no encontrada")
    return ap


def _out(ap: Appointment) -> AppointmentOut:
    return AppointmentOut(
        id=ap.id,
        service_id=ap.service_id,
        barber_id=ap.barber_id,
        client_id=ap.client_id,
        start_date_time=iso_utc(stored_utc(ap.start_date_time)),
        end_date_time=iso_utc(stored_utc(ap.end_date_time)),
        status=ap.status.value,
        notes=ap.notes,
        created_by_role=ap.created_by_role.value,
    )


def _apply_status(
    db: Session,
    ap: Appointment,
    new_status: AppointmentStatus,
    now: datetime,
    config: SchedulingConfig,
) -> Appointment:
    log = get_logger().bind(appointment_id=ap.id, new_status=new_status.value)
    decision = validate_transition(
        ap.status.value,
        new_status.value,
        stored_utc(ap.start_date_time),
        now,
        config,
    )
    if not decision:
        log.info("appointment.transition_denied", reason=decision.reason)
        raise HTTPException(status.HTTP_400_BAD_REQUEST, decision.reason)

    # reactivar una cita vuelve a ocupar el horario: revalida el turno
    if new_status in ACTIVE_STATUSES and ap.status not in ACTIVE_STATUSES:
        ok, reason = validate_slot(
            db,
            ap.barber_id,
            db.get(Service, ap.service_id),
            stored_utc(ap.start_date_time),
            now,
            config,
            exclude_appointment_id=ap.id,
        )
        if not ok:
            raise HTTPException(status.HTTP_409_CONFLICT, reason)

    ap.status = new_status
    _commit_or_409(db)
    db.refresh(ap)
    log.info("appointment.status_changed")
    return ap


# ------- Crear -------
@router.post(
    "", response_model=AppointmentOut, status_code=status.HTTP_201_CREATED
)
def create_appointment(
    payload: CreateAppointmentIn,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    config: SchedulingConfig = Depends(get_scheduling_config),
):
    if payload.barber_id == ANY_BARBER:
        raise HTTPException(400, "Selecciona el barbero asignado al horario")

    service = load_active_service(db, payload.service_id)
    load_barber(db, payload.barber_id)

    phone = _normalize_phone(
        payload.client_data.phone_e164, settings.PHONE_DEFAULT_REGION
    )
    start_utc = _parse_start(payload.start_date_time)
    end_utc = start_utc + timedelta(minutes=service.duration_min)

    # revalida dentro de la transacción (puede haber carrera con otro cliente)
    ok, reason = validate_slot(db, payload.barber_id, service, start_utc, now, config)
    if not ok:
        raise HTTPException(status.HTTP_409_CONFLICT, reason)

    data = payload.client_data
    client = db.query(Client).filter(Client.email == data.email).one_or_none()
    if not client:
        client = Client(
            full_name=data.full_name,
            phone_e164=phone,
            email=data.email,
            notes=data.notes,
        )
        db.add(client)
        db.flush()

    ap = Appointment(
        service_id=service.id,
        barber_id=payload.barber_id,
        client_id=client.id,
        start_date_time=start_utc,
        end_date_time=end_utc,
        status=AppointmentStatus.SCHEDULED,
        notes=data.notes,
        created_by_role=CreatedByRole.CLIENT,
    )
    db.add(ap)
    _commit_or_409(db)
    db.refresh(ap)

    get_logger().info(
        "appointment.created",
        appointment_id=ap.id,
        barber_id=ap.barber_id,
        start=iso_utc(start_utc),
    )
    return _out(ap)


# ------- Cambiar estado -------
@router.patch("/{appointment_id}/status", response_model=AppointmentOut)
def update_status(
    appointment_id: str,
    payload: StatusUpdateIn,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    config: SchedulingConfig = Depends(get_scheduling_config),
):
    ap = _load_appointment(db, appointment_id)
    return _out(_apply_status(db, ap, payload.status, now, config))


# ------- Cancelar (cliente) -------
@router.delete("/{appointment_id}", response_model=AppointmentOut)
def cancel_appointment(
    appointment_id: str,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    config: SchedulingConfig = Depends(get_scheduling_config),
):
    ap = _load_appointment(db, appointment_id)
    return _out(_apply_status(db, ap, AppointmentStatus.CANCELLED, now, config))


# ------- Reagendar -------
@router.put("/{appointment_id}/reschedule", response_model=AppointmentOut)
def reschedule_appointment(
    appointment_id: str,
    payload: RescheduleIn,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    config: SchedulingConfig = Depends(get_scheduling_config),
):
    ap = _load_appointment(db, appointment_id)
    log = get_logger().bind(appointment_id=ap.id)

    new_start = _parse_start(payload.new_start_date_time)

    # regla de anticipación: la cita actual y el nuevo horario
    for start in (stored_utc(ap.start_date_time), new_start):
        decision = validate_transition(
            ap.status.value, AppointmentStatus.RESCHEDULED.value, start, now, config
        )
        if not decision:
            log.info("appointment.transition_denied", reason=decision.reason)
            raise HTTPException(status.HTTP_400_BAD_REQUEST, decision.reason)

    barber_id = payload.new_barber_id or ap.barber_id
    if barber_id == ANY_BARBER:
        raise HTTPException(400, "Selecciona el barbero asignado al horario")
    load_barber(db, barber_id)

    # conserva la duración del servicio reservado
    service = db.get(Service, ap.service_id)
    ok, reason = validate_slot(
        db, barber_id, service, new_start, now, config, exclude_appointment_id=ap.id
    )
    if not ok:
        raise HTTPException(status.HTTP_409_CONFLICT, reason)

    ap.barber_id = barber_id
    ap.start_date_time = new_start
    ap.end_date_time = new_start + timedelta(minutes=service.duration_min)
    ap.status = AppointmentStatus.RESCHEDULED
    _commit_or_409(db)
    db.refresh(ap)

    log.info("appointment.rescheduled", barber_id=barber_id, start=iso_utc(new_start))
    return _out(ap)
