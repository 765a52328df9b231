"""Núcleo de agenda: cálculo de turnos y reglas de transición. Sin I/O."""
from app.scheduling.aggregator import aggregate_any_barber
from app.scheduling.config import DEFAULT_CONFIG, SchedulingConfig
from app.scheduling.resolver import day_of_week, resolve_day_schedule
from app.scheduling.slots import generate_slots
from app.scheduling.transitions import TransitionDecision, validate_transition
from app.scheduling.types import (
    BookedInterval,
    BreakWindow,
    EffectiveWindow,
    ScheduleDataError,
    ScheduleException,
    TimeSlot,
    WeeklyScheduleEntry,
    parse_exceptions,
    parse_weekly_schedule,
)

__all__ = [
    "DEFAULT_CONFIG",
    "BookedInterval",
    "BreakWindow",
    "EffectiveWindow",
    "ScheduleDataError",
    "ScheduleException",
    "SchedulingConfig",
    "TimeSlot",
    "TransitionDecision",
    "WeeklyScheduleEntry",
    "aggregate_any_barber",
    "day_of_week",
    "generate_slots",
    "parse_exceptions",
    "parse_weekly_schedule",
    "resolve_day_schedule",
    "validate_transition",
]
