from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.models.appointment import ACTIVE_STATUSES, Appointment, AppointmentStatus
from app.models.barber import Barber, barber_services
from app.models.service import Service
from app.scheduling import (
    DEFAULT_CONFIG,
    BookedInterval,
    SchedulingConfig,
    TimeSlot,
    aggregate_any_barber,
    generate_slots,
    parse_exceptions,
    parse_weekly_schedule,
    resolve_day_schedule,
)
from app.services.errors import BarberNotFound, InactiveServiceError, ServiceNotFound
from app.utils.tz import local_day_bounds_utc, stored_utc

ANY_BARBER = "any"


def load_active_service(db: Session, service_id: str) -> Service:
    service = db.get(Service, service_id)
    if not service:
        raise ServiceNotFound(service_id)
    if not service.active:
        raise InactiveServiceError(service_id)
    return service


def load_barber(db: Session, barber_id: str) -> Barber:
    barber = db.get(Barber, barber_id)
    if not barber:
        raise BarberNotFound(barber_id)
    return barber


def barbers_offering(db: Session, service_id: str) -> list[str]:
    """Barberos activos que ofrecen el servicio, en orden estable (nombre, id)."""
    rows = db.execute(
        select(Barber.id)
        .join(barber_services, barber_services.c.barber_id == Barber.id)
        .where(
            and_(
                barber_services.c.service_id == service_id,
                Barber.active.is_(True),
            )
        )
        .order_by(Barber.name.asc(), Barber.id.asc())
    ).scalars()
    return list(rows)


def booked_intervals(
    db: Session,
    barber_id: str,
    day: date,
    config: SchedulingConfig = DEFAULT_CONFIG,
    exclude_appointment_id: str | None = None,
    include_completed: bool = False,
) -> list[BookedInterval]:
    """
    Citas del barbero que tocan el día local [00:00, 24:00), como intervalos UTC.
    Por defecto solo cuentan agendado/reagendado.
    """
    start_utc, end_utc = local_day_bounds_utc(day, config.tz)
    statuses = list(ACTIVE_STATUSES)
    if include_completed:
        statuses.append(AppointmentStatus.COMPLETED)

    q = db.query(Appointment.start_date_time, Appointment.end_date_time).filter(
        and_(
            Appointment.barber_id == barber_id,
            Appointment.status.in_(statuses),
            Appointment.start_date_time < end_utc,
            Appointment.end_date_time > start_utc,
        )
    )
    if exclude_appointment_id:
        q = q.filter(Appointment.id != exclude_appointment_id)

    return [
        BookedInterval(start=stored_utc(s), end=stored_utc(e)) for (s, e) in q.all()
    ]


def barber_slots(
    db: Session,
    service: Service,
    barber: Barber,
    day: date,
    now: datetime,
    config: SchedulingConfig = DEFAULT_CONFIG,
    exclude_appointment_id: str | None = None,
) -> list[TimeSlot]:
    """Pipeline completo para un barbero: jornada efectiva -> turnos libres."""
    weekly = parse_weekly_schedule(barber.weekly_schedule)
    exceptions = parse_exceptions(barber.exceptions)
    window = resolve_day_schedule(weekly, exceptions, day)
    if window is None:
        return []

    booked = booked_intervals(
        db, barber.id, day, config, exclude_appointment_id=exclude_appointment_id
    )
    return list(
        generate_slots(window, service.duration_min, booked, day, now, config)
    )


def calculate_available_slots(
    db: Session,
    service_id: str,
    barber_id: str,
    day: date,
    now: datetime,
    config: SchedulingConfig = DEFAULT_CONFIG,
    exclude_appointment_id: str | None = None,
) -> list[TimeSlot]:
    """
    Turnos disponibles para (servicio, barbero | "any", fecha local).

    Lanza ServiceNotFound / InactiveServiceError / BarberNotFound antes de
    entrar al núcleo. Con barber_id="any" cada turno lleva el barbero asignable.
    """
    service = load_active_service(db, service_id)
    log = get_logger().bind(
        service_id=service_id, barber_id=barber_id, date=day.isoformat()
    )

    if barber_id == ANY_BARBER:

        def _for_barber(bid: str) -> list[TimeSlot]:
            return barber_slots(
                db,
                service,
                load_barber(db, bid),
                day,
                now,
                config,
                exclude_appointment_id=exclude_appointment_id,
            )

        slots = aggregate_any_barber(
            service_id, day, barbers_offering(db, service_id), _for_barber
        )
    else:
        barber = load_barber(db, barber_id)
        if not barber.active:
            log.info("availability.barber_inactive")
            return []
        slots = barber_slots(
            db,
            service,
            barber,
            day,
            now,
            config,
            exclude_appointment_id=exclude_appointment_id,
        )

    log.info("availability.computed", count=len(slots))
    return slots
