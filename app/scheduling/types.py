from __future__ import annotations

import datetime as dt
import json
from datetime import datetime, time

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)


class ScheduleDataError(ValueError):
    """Horario guardado con formato inválido (JSON roto, ventanas incoherentes...)."""


class _Model(BaseModel):
    # Los documentos guardados usan camelCase (dayOfWeek); internamente snake_case
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("*")
    @classmethod
    def _naive_times(cls, v):
        # las horas son de reloj local; "09:00Z" no se puede comparar con "17:00"
        if isinstance(v, time) and v.tzinfo is not None:
            raise ValueError("la hora no debe llevar zona horaria")
        return v


class BreakWindow(_Model):
    start: time
    end: time

    @model_validator(mode="after")
    def _check_order(self):
        if self.end <= self.start:
            raise ValueError("el descanso debe terminar después de empezar")
        return self


class WeeklyScheduleEntry(_Model):
    day_of_week: int = Field(..., alias="dayOfWeek", ge=0, le=6)  # 0=domingo
    start: time
    end: time
    breaks: tuple[BreakWindow, ...] = ()

    @model_validator(mode="after")
    def _check_window(self):
        if self.end <= self.start:
            raise ValueError("end debe ser mayor que start")
        prev_end: time | None = None
        for brk in sorted(self.breaks, key=lambda b: b.start):
            if brk.start < self.start or brk.end > self.end:
                raise ValueError("descanso fuera de la jornada")
            if prev_end is not None and brk.start < prev_end:
                raise ValueError("descansos superpuestos")
            prev_end = brk.end
        return self


class ScheduleException(_Model):
    date: dt.date
    closed: bool = False
    start: time | None = None
    end: time | None = None

    @model_validator(mode="after")
    def _check_override(self):
        if self.start is not None and self.end is not None and self.end <= self.start:
            raise ValueError("end debe ser mayor que start")
        return self


class EffectiveWindow(_Model):
    start: time
    end: time
    breaks: tuple[BreakWindow, ...] = ()


class BookedInterval(_Model):
    """Cita existente reducida a [start, end) en instantes UTC."""

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _require_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            raise ValueError("se esperaba datetime timezone-aware")
        return v


class TimeSlot(_Model):
    start_time: str = Field(..., alias="startTime")  # "HH:MM" local
    end_time: str = Field(..., alias="endTime")
    available: bool = True
    barber_id: str | None = Field(None, alias="barberId")


_weekly_adapter = TypeAdapter(list[WeeklyScheduleEntry])
_exceptions_adapter = TypeAdapter(list[ScheduleException])


def _decode(raw: str | bytes | list | None) -> list:
    if raw is None or raw == "":
        return []
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ScheduleDataError(f"JSON inválido: {exc}") from exc
    if not isinstance(raw, list):
        raise ScheduleDataError("se esperaba una lista")
    return raw


def parse_weekly_schedule(raw: str | bytes | list | None) -> list[WeeklyScheduleEntry]:
    try:
        entries = _weekly_adapter.validate_python(_decode(raw))
    except ValidationError as exc:
        raise ScheduleDataError(str(exc)) from exc
    days = [e.day_of_week for e in entries]
    if len(days) != len(set(days)):
        raise ScheduleDataError("más de una jornada para el mismo día")
    return entries


def parse_exceptions(raw: str | bytes | list | None) -> list[ScheduleException]:
    try:
        items = _exceptions_adapter.validate_python(_decode(raw))
    except ValidationError as exc:
        raise ScheduleDataError(str(exc)) from exc
    dates = [e.date for e in items]
    if len(dates) != len(set(dates)):
        raise ScheduleDataError("más de una excepción para la misma fecha")
    return items
