from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import UTC, date, datetime, time, timedelta

from app.scheduling.config import DEFAULT_CONFIG, SchedulingConfig
from app.scheduling.types import BookedInterval, BreakWindow, EffectiveWindow, TimeSlot
from app.utils.tz import format_hhmm


def overlaps(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    # intervalo [start, end): tocarse en el borde no es conflicto
    return a_start < b_end and a_end > b_start


def hits_break(start: time, end: time, breaks: Iterable[BreakWindow]) -> bool:
    """
    El candidato empieza dentro del descanso, termina dentro de él o lo contiene.
    Un turno que termina justo al iniciar el descanso (o empieza justo al
    terminar) no choca.
    """
    return any(start < brk.end and end > brk.start for brk in breaks)


def as_local(now: datetime, config: SchedulingConfig = DEFAULT_CONFIG) -> datetime:
    if now.tzinfo is None:
        return now.replace(tzinfo=config.tz)
    return now.astimezone(config.tz)


def generate_slots(
    window: EffectiveWindow | None,
    duration_minutes: int,
    booked: Iterable[BookedInterval],
    day: date,
    now_local: datetime,
    config: SchedulingConfig = DEFAULT_CONFIG,
) -> Iterator[TimeSlot]:
    """
    Recorre la jornada en pasos fijos (config.stride) y emite solo los turnos
    disponibles. Generador sin estado: volver a llamarlo con las mismas
    entradas produce exactamente la misma secuencia.
    """
    if window is None:
        return
    if duration_minutes <= 0:
        raise ValueError("duration_minutes debe ser mayor que cero")

    tz = config.tz
    duration = timedelta(minutes=duration_minutes)
    busy = [(b.start.astimezone(UTC), b.end.astimezone(UTC)) for b in booked]

    now_local = as_local(now_local, config)
    is_today = now_local.date() == day

    cursor = datetime.combine(day, window.start).replace(tzinfo=tz)
    window_end = datetime.combine(day, window.end).replace(tzinfo=tz)

    while cursor + duration <= window_end:
        candidate_end = cursor + duration

        if hits_break(cursor.time(), candidate_end.time(), window.breaks):
            cursor += config.stride
            continue

        start_utc = cursor.astimezone(UTC)
        end_utc = candidate_end.astimezone(UTC)
        conflict = any(overlaps(start_utc, end_utc, b0, b1) for (b0, b1) in busy)

        # hoy: un turno que empieza exactamente "ahora" ya pasó
        passed = is_today and cursor <= now_local

        if not conflict and not passed:
            yield TimeSlot(
                start_time=format_hhmm(cursor),
                end_time=format_hhmm(candidate_end),
                available=True,
            )

        cursor += config.stride
