from __future__ import annotations

import datetime as dt
import enum
import uuid

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import Base


class AppointmentStatus(str, enum.Enum):
    SCHEDULED = "agendado"
    RESCHEDULED = "reagendado"
    COMPLETED = "completado"
    CANCELLED = "cancelado"


class CreatedByRole(str, enum.Enum):
    ADMIN = "ADMIN"
    BARBER = "BARBER"
    CLIENT = "CLIENT"


# Estados que ocupan el horario del barbero
ACTIVE_STATUSES = (AppointmentStatus.SCHEDULED, AppointmentStatus.RESCHEDULED)

_ACTIVE_SQL = text("status IN ('agendado','reagendado')")


def _values(enum_cls):
    return [m.value for m in enum_cls]


class Appointment(Base):
    __tablename__ = "appointments"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    service_id: Mapped[str] = mapped_column(
        ForeignKey("services.id", ondelete="RESTRICT"), nullable=False
    )
    barber_id: Mapped[str] = mapped_column(
        ForeignKey("barbers.id", ondelete="RESTRICT"), nullable=False
    )
    client_id: Mapped[str] = mapped_column(
        ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False
    )
    start_date_time: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    end_date_time: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    status: Mapped[AppointmentStatus] = mapped_column(
        Enum(
            AppointmentStatus,
            name="appointment_status",
            native_enum=False,
            values_callable=_values,
        ),
        nullable=False,
        default=AppointmentStatus.SCHEDULED,
    )
    notes: Mapped[str | None] = mapped_column(Text)
    created_by_role: Mapped[CreatedByRole] = mapped_column(
        Enum(
            CreatedByRole,
            name="created_by_role",
            native_enum=False,
            values_callable=_values,
        ),
        nullable=False,
        default=CreatedByRole.CLIENT,
    )

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: dt.datetime.now(tz=dt.UTC),
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: dt.datetime.now(tz=dt.UTC),
        onupdate=lambda: dt.datetime.now(tz=dt.UTC),
    )

    service = relationship("Service")
    barber = relationship("Barber")
    client = relationship("Client")

    __table_args__ = (
        CheckConstraint(
            "end_date_time > start_date_time", name="ck_appt_time_order"
        ),
        # Garantía real contra doble reserva: solo un turno activo por (barbero, inicio)
        Index(
            "ux_appt_barber_start_active",
            "barber_id",
            "start_date_time",
            unique=True,
            postgresql_where=_ACTIVE_SQL,
            sqlite_where=_ACTIVE_SQL,
        ),
        Index("ix_appt_barber_id", "barber_id"),
        Index("ix_appt_client_id", "client_id"),
    )
