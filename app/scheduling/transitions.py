from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.scheduling.config import DEFAULT_CONFIG, SchedulingConfig
from app.scheduling.slots import as_local

COMPLETED = "completado"
CANCELLED = "cancelado"
RESCHEDULED = "reagendado"


@dataclass(frozen=True)
class TransitionDecision:
    allowed: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def allow(cls) -> TransitionDecision:
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> TransitionDecision:
        return cls(False, reason)


def _minutes_until(start: datetime, now: datetime, config: SchedulingConfig) -> int:
    # trunca hacia cero: 60 min 30 s cuentan como 60
    delta = as_local(start, config) - as_local(now, config)
    return int(delta.total_seconds() / 60)


def can_mark_completed(
    start: datetime, now: datetime, config: SchedulingConfig = DEFAULT_CONFIG
) -> TransitionDecision:
    """Solo se completa una cita cuya hora de inicio ya pasó."""
    if as_local(now, config) < as_local(start, config):
        return TransitionDecision.deny(
            "No se puede marcar como completada una cita que aún no ha ocurrido"
        )
    return TransitionDecision.allow()


def can_cancel(
    start: datetime, now: datetime, config: SchedulingConfig = DEFAULT_CONFIG
) -> TransitionDecision:
    lead = config.lead_time_minutes
    if _minutes_until(start, now, config) <= lead:
        return TransitionDecision.deny(
            f"No se puede cancelar una cita con menos de {lead} minutos de anticipación"
        )
    return TransitionDecision.allow()


def can_reschedule(
    start: datetime, now: datetime, config: SchedulingConfig = DEFAULT_CONFIG
) -> TransitionDecision:
    lead = config.lead_time_minutes
    if _minutes_until(start, now, config) <= lead:
        return TransitionDecision.deny(
            f"No se puede reagendar una cita con menos de {lead} minutos de anticipación"
        )
    return TransitionDecision.allow()


def validate_transition(
    current_status: str,
    new_status: str,
    start: datetime,
    now: datetime,
    config: SchedulingConfig = DEFAULT_CONFIG,
) -> TransitionDecision:
    """
    Decide si la cita puede pasar a new_status. Solo importa el estado destino:
    current_status se recibe pero no restringe (cancelar una cita ya cancelada
    queda sujeto únicamente a la regla de anticipación). Datetimes naive se
    interpretan en la hora local del negocio.
    """
    if new_status == COMPLETED:
        return can_mark_completed(start, now, config)
    if new_status == CANCELLED:
        return can_cancel(start, now, config)
    if new_status == RESCHEDULED:
        return can_reschedule(start, now, config)
    return TransitionDecision.allow()
