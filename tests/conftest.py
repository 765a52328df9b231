import json
import os
import sys
from datetime import UTC, datetime, timedelta

# Configuración mínima antes de importar la app
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_JSON", "false")

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.db.base  # noqa: F401
from app.db.base_class import Base
from app.models.appointment import Appointment, AppointmentStatus, CreatedByRole
from app.models.barber import Barber
from app.models.client import Client
from app.models.service import Service
from app.utils.tz import CO_TZ

# Domingo 2025-11-09 08:00 en Bogotá (13:00 UTC); el lunes siguiente es 2025-11-10
FROZEN_NOW = datetime(2025, 11, 9, 13, 0, tzinfo=UTC)
MONDAY = datetime(2025, 11, 10).date()

MONDAY_SCHEDULE = [
    {
        "dayOfWeek": 1,
        "start": "09:00",
        "end": "17:30",
        "breaks": [{"start": "12:30", "end": "13:30"}],
    }
]


def local_dt(d, hh: int, mm: int = 0) -> datetime:
    """Hora local de Bogotá -> datetime UTC aware."""
    return datetime(d.year, d.month, d.day, hh, mm, tzinfo=CO_TZ).astimezone(UTC)


@pytest.fixture
def engine():
    """Base SQLite en memoria, limpia por test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def TestingSessionLocal(engine):
    return sessionmaker(
        bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
    )


@pytest.fixture
def db_session(TestingSessionLocal):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def now():
    return FROZEN_NOW


@pytest.fixture
def client(TestingSessionLocal, now):
    """TestClient con la base de pruebas y el reloj congelado."""
    from fastapi.testclient import TestClient

    from app.db import get_db
    from app.deps import get_now
    from app.main import app

    def _override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_now] = lambda: now

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def service(db_session):
    svc = Service(name="Corte clásico", price_cop=25000, duration_min=30)
    db_session.add(svc)
    db_session.commit()
    db_session.refresh(svc)
    return svc


@pytest.fixture
def make_barber(db_session):
    def _make(name: str, weekly=None, exceptions=None, services=(), active=True):
        barber = Barber(
            name=name,
            weekly_schedule=weekly if isinstance(weekly, str) else json.dumps(weekly or []),
            exceptions=json.dumps(exceptions or []),
            active=active,
        )
        barber.services = list(services)
        db_session.add(barber)
        db_session.commit()
        db_session.refresh(barber)
        return barber

    return _make


@pytest.fixture
def barber(make_barber, service):
    return make_barber("Andrés", MONDAY_SCHEDULE, services=[service])


@pytest.fixture
def test_client_record(db_session):
    c = Client(full_name="Juan Pérez", phone_e164="+573001112233", email="juan@example.com")
    db_session.add(c)
    db_session.commit()
    db_session.refresh(c)
    return c


@pytest.fixture
def make_appointment(db_session, service, test_client_record):
    def _make(barber, start_utc, minutes=None, status=AppointmentStatus.SCHEDULED):
        minutes = minutes or service.duration_min
        ap = Appointment(
            service_id=service.id,
            barber_id=barber.id,
            client_id=test_client_record.id,
            start_date_time=start_utc,
            end_date_time=start_utc + timedelta(minutes=minutes),
            status=status,
            created_by_role=CreatedByRole.ADMIN,
        )
        db_session.add(ap)
        db_session.commit()
        db_session.refresh(ap)
        return ap

    return _make


@pytest.fixture
def monday():
    return MONDAY


@pytest.fixture
def at_local():
    return local_dt


@pytest.fixture
def monday_schedule():
    return MONDAY_SCHEDULE
