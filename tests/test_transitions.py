from datetime import UTC, datetime, timedelta

import pytest

from app.scheduling import SchedulingConfig, TransitionDecision, validate_transition
from app.utils.tz import CO_TZ

NOW = datetime(2025, 11, 10, 9, 0, tzinfo=CO_TZ)


def _in(minutes=0, seconds=0):
    return NOW + timedelta(minutes=minutes, seconds=seconds)


@pytest.mark.parametrize("new_status", ["cancelado", "reagendado"])
@pytest.mark.parametrize(
    "minutes, seconds, allowed",
    [
        (61, 0, True),
        (120, 0, True),
        (60, 30, False),
        (60, 0, False),
        (59, 0, False),
        (0, 0, False),
        (-30, 0, False),
    ],
)
def test_lead_time_rule(new_status, minutes, seconds, allowed):
    decision = validate_transition(
        "agendado", new_status, _in(minutes, seconds), NOW
    )
    assert decision.allowed is allowed
    assert bool(decision) is allowed
    if allowed:
        assert decision.reason is None
    else:
        assert "60 minutos" in decision.reason


def test_cancel_reason_text():
    decision = validate_transition("agendado", "cancelado", _in(30), NOW)
    assert decision == TransitionDecision.deny(
        "No se puede cancelar una cita con menos de 60 minutos de anticipación"
    )


def test_reschedule_reason_text():
    decision = validate_transition("agendado", "reagendado", _in(30), NOW)
    assert decision.reason == (
        "No se puede reagendar una cita con menos de 60 minutos de anticipación"
    )


def test_completed_only_after_start():
    denied = validate_transition("agendado", "completado", _in(1), NOW)
    assert not denied
    assert "aún no ha ocurrido" in denied.reason

    assert validate_transition("agendado", "completado", NOW, NOW)
    assert validate_transition("agendado", "completado", _in(-90), NOW)


@pytest.mark.parametrize("new_status", ["agendado", "otro"])
def test_other_targets_always_allowed(new_status):
    assert validate_transition("cancelado", new_status, _in(-600), NOW) == (
        TransitionDecision.allow()
    )


def test_current_status_does_not_restrict():
    # cancelar una cita ya cancelada solo depende de la anticipación
    assert validate_transition("cancelado", "cancelado", _in(180), NOW)
    assert validate_transition("completado", "reagendado", _in(180), NOW)


def test_mixed_timezones_compare_instants():
    start_utc = _in(61).astimezone(UTC)
    assert validate_transition("agendado", "cancelado", start_utc, NOW)
    assert not validate_transition("agendado", "cancelado", start_utc, _in(2))


def test_naive_values_are_local_time():
    naive_now = datetime(2025, 11, 10, 9, 0)
    naive_start = datetime(2025, 11, 10, 10, 30)
    assert validate_transition("agendado", "cancelado", naive_start, naive_now)

    # naive 10:00 local == 15:00 UTC: exactamente 60 minutos
    assert not validate_transition(
        "agendado", "cancelado", datetime(2025, 11, 10, 10, 0), NOW.astimezone(UTC)
    )


def test_lead_time_comes_from_config():
    config = SchedulingConfig(lead_time_minutes=15)
    assert validate_transition("agendado", "cancelado", _in(30), NOW, config)
    decision = validate_transition("agendado", "reagendado", _in(10), NOW, config)
    assert not decision
    assert "15 minutos" in decision.reason
