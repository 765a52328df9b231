from __future__ import annotations

import datetime as dt
import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base_class import Base

# Servicios que ofrece cada barbero
barber_services = Table(
    "barber_services",
    Base.metadata,
    Column(
        "barber_id",
        String(36),
        ForeignKey("barbers.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "service_id",
        String(36),
        ForeignKey("services.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Barber(Base):
    __tablename__ = "barbers"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    photo_url: Mapped[str | None] = mapped_column(String(500))
    phone: Mapped[str | None] = mapped_column(String(20))
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Documentos JSON: [{"dayOfWeek":1,"start":"09:00","end":"17:30","breaks":[...]}]
    weekly_schedule: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    # [{"date":"2025-05-10","closed":true}] / [{"date":...,"start":"10:00","end":"14:00","closed":false}]
    exceptions: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(tz=dt.UTC),
        nullable=False,
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(tz=dt.UTC),
        onupdate=lambda: dt.datetime.now(tz=dt.UTC),
        nullable=False,
    )

    services = relationship("Service", secondary=barber_services, lazy="selectin")
