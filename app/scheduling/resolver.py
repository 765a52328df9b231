from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from app.scheduling.types import (
    EffectiveWindow,
    ScheduleException,
    WeeklyScheduleEntry,
)


def day_of_week(d: date) -> int:
    """Día de la semana con 0=domingo ... 6=sábado."""
    return d.isoweekday() % 7


def find_exception(
    exceptions: Iterable[ScheduleException], d: date
) -> ScheduleException | None:
    return next((ex for ex in exceptions if ex.date == d), None)


def resolve_day_schedule(
    weekly: Iterable[WeeklyScheduleEntry],
    exceptions: Iterable[ScheduleException],
    d: date,
) -> EffectiveWindow | None:
    """
    Jornada efectiva del barbero para la fecha local d.

    - Excepción cerrada: None (no atiende).
    - Excepción con start y end: esa ventana, sin descansos.
    - Excepción sin horario (y no cerrada): se ignora y aplica la plantilla semanal.
    - Sin jornada para ese día de la semana: None.
    """
    exception = find_exception(exceptions, d)
    if exception is not None:
        if exception.closed:
            return None
        if exception.start is not None and exception.end is not None:
            return EffectiveWindow(start=exception.start, end=exception.end, breaks=())

    weekday = day_of_week(d)
    entry = next((e for e in weekly if e.day_of_week == weekday), None)
    if entry is None:
        return None
    return EffectiveWindow(start=entry.start, end=entry.end, breaks=entry.breaks)
