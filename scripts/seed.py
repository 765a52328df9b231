# scripts/seed.py
from __future__ import annotations

import json
import os
import zoneinfo
from datetime import datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

# get_db es un generator de FastAPI; aquí usamos next(get_db()) para obtener una Session
from app.db import get_db
from app.models.appointment import Appointment, AppointmentStatus, CreatedByRole
from app.models.barber import Barber
from app.models.client import Client
from app.models.service import Service
from app.scheduling import parse_weekly_schedule, resolve_day_schedule
from app.utils.tz import combine_local_to_utc

# ---------------- Configurables por ENV ----------------
CO_TZ = zoneinfo.ZoneInfo(os.getenv("SEED_TZ", "America/Bogota"))
SEED_DAYS = int(os.getenv("SEED_DAYS", "7"))

# ---------------- Datos de ejemplo ----------------
SERVICES_DATA = [
    {"name": "Corte clásico", "category": "corte", "price_cop": 25000, "duration_min": 30},
    {"name": "Corte + barba", "category": "combo", "price_cop": 40000, "duration_min": 60},
    {"name": "Perfilado de barba", "category": "barba", "price_cop": 15000, "duration_min": 15},
]

# Lun-Vie 09:00-17:30 con almuerzo, sábado media jornada (0=domingo)
WEEKDAY = {"start": "09:00", "end": "17:30", "breaks": [{"start": "12:30", "end": "13:30"}]}
SATURDAY = {"start": "09:00", "end": "13:00", "breaks": []}

BARBERS_DATA = [
    {
        "name": "Andrés Gómez",
        "weekly": [{"dayOfWeek": d, **WEEKDAY} for d in range(1, 6)]
        + [{"dayOfWeek": 6, **SATURDAY}],
    },
    {
        "name": "Camilo Rojas",
        "weekly": [{"dayOfWeek": d, **WEEKDAY} for d in (2, 3, 4, 5)]
        + [{"dayOfWeek": 6, **SATURDAY}],
    },
]

CLIENTS_DATA = [
    ("Juan Pérez", "+573001112233", "juan@example.com"),
    ("Laura Torres", "+573104445566", "laura@example.com"),
]


def get_session() -> Session:
    gen = get_db()
    session: Session = next(gen)
    return session


def ensure_services(db: Session) -> list[Service]:
    services = []
    for data in SERVICES_DATA:
        svc = db.execute(
            select(Service).where(Service.name == data["name"])
        ).scalar_one_or_none()
        if not svc:
            svc = Service(description=data["name"], **data)
            db.add(svc)
            db.commit()
            db.refresh(svc)
            print(f"[Seed] Servicio creado: {svc.name} ({svc.duration_min} min)")
        services.append(svc)
    return services


def ensure_barbers(db: Session, services: list[Service]) -> list[Barber]:
    barbers = []
    for data in BARBERS_DATA:
        # valida el documento antes de guardarlo
        parse_weekly_schedule(data["weekly"])

        barber = db.execute(
            select(Barber).where(Barber.name == data["name"])
        ).scalar_one_or_none()
        if not barber:
            barber = Barber(
                name=data["name"],
                weekly_schedule=json.dumps(data["weekly"]),
                exceptions="[]",
                active=True,
            )
            barber.services = list(services)
            db.add(barber)
            db.commit()
            db.refresh(barber)
            print(f"[Seed] Barbero creado: {barber.name}")
        barbers.append(barber)
    return barbers


def ensure_clients(db: Session) -> list[Client]:
    clients = []
    for full_name, phone, email in CLIENTS_DATA:
        client = db.execute(
            select(Client).where(Client.email == email)
        ).scalar_one_or_none()
        if not client:
            client = Client(full_name=full_name, phone_e164=phone, email=email)
            db.add(client)
            db.commit()
            db.refresh(client)
            print(f"[Seed] Cliente creado: {client.full_name}")
        clients.append(client)
    return clients


def ensure_appointments(
    db: Session, services: list[Service], barbers: list[Barber], clients: list[Client]
) -> None:
    """Una cita a las 10:00 (local) por barbero en los próximos días hábiles."""
    today = datetime.now(CO_TZ).date()
    created = 0
    for offset in range(1, SEED_DAYS + 1):
        d = today + timedelta(days=offset)
        if d.isoweekday() == 7:
            continue
        for i, barber in enumerate(barbers):
            weekly = parse_weekly_schedule(barber.weekly_schedule)
            if resolve_day_schedule(weekly, [], d) is None:
                continue
            start = combine_local_to_utc(d, time(10, 0), CO_TZ)
            exists = db.execute(
                select(Appointment.id).where(
                    Appointment.barber_id == barber.id,
                    Appointment.start_date_time == start,
                )
            ).first()
            if exists:
                continue
            service = services[0]
            db.add(
                Appointment(
                    service_id=service.id,
                    barber_id=barber.id,
                    client_id=clients[i % len(clients)].id,
                    start_date_time=start,
                    end_date_time=start + timedelta(minutes=service.duration_min),
                    status=AppointmentStatus.SCHEDULED,
                    created_by_role=CreatedByRole.ADMIN,
                )
            )
            created += 1
    db.commit()
    print(f"[Seed] Citas creadas: {created}")


def main() -> None:
    db = get_session()
    try:
        services = ensure_services(db)
        barbers = ensure_barbers(db, services)
        clients = ensure_clients(db)
        ensure_appointments(db, services, barbers, clients)
    finally:
        db.close()


if __name__ == "__main__":
    main()
