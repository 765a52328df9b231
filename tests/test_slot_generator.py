from datetime import UTC, date, datetime, time, timedelta

import pytest

from app.scheduling import (
    BookedInterval,
    BreakWindow,
    EffectiveWindow,
    SchedulingConfig,
    generate_slots,
)
from app.utils.tz import CO_TZ

MONDAY = date(2025, 11, 10)
# domingo 08:00 local: el lunes no es "hoy"
SUNDAY_MORNING = datetime(2025, 11, 9, 8, 0, tzinfo=CO_TZ)

WINDOW = EffectiveWindow(
    start=time(9, 0),
    end=time(17, 30),
    breaks=(BreakWindow(start=time(12, 30), end=time(13, 30)),),
)


def _local(d, hh, mm=0):
    return datetime(d.year, d.month, d.day, hh, mm, tzinfo=CO_TZ)


def _booked(d, hh, mm, minutes=30):
    start = _local(d, hh, mm).astimezone(UTC)
    return BookedInterval(start=start, end=start + timedelta(minutes=minutes))


def _starts(slots):
    return [s.start_time for s in slots]


def _grid(first: str, last: str, step=15):
    h, m = map(int, first.split(":"))
    cur = datetime(2000, 1, 1, h, m)
    h, m = map(int, last.split(":"))
    end = datetime(2000, 1, 1, h, m)
    out = []
    while cur <= end:
        out.append(cur.strftime("%H:%M"))
        cur += timedelta(minutes=step)
    return out


def test_monday_scenario_with_break_and_booking():
    slots = list(
        generate_slots(WINDOW, 30, [_booked(MONDAY, 10, 0)], MONDAY, SUNDAY_MORNING)
    )

    expected = (
        ["09:00", "09:15", "09:30"]
        + _grid("10:30", "12:00")
        + _grid("13:30", "17:00")
    )
    assert _starts(slots) == expected
    assert slots[0].end_time == "09:30"
    assert slots[-1].start_time == "17:00"
    assert slots[-1].end_time == "17:30"
    assert all(s.available for s in slots)
    assert all(s.barber_id is None for s in slots)


def test_no_slot_overlaps_break():
    slots = list(generate_slots(WINDOW, 45, [], MONDAY, SUNDAY_MORNING))
    for s in slots:
        assert not (s.start_time < "13:30" and s.end_time > "12:30")
    # termina justo al iniciar el descanso / empieza justo al terminar
    assert "11:45" in _starts(slots)
    assert "13:30" in _starts(slots)


def test_touching_booking_is_not_a_conflict():
    booked = [_booked(MONDAY, 9, 30)]
    starts = _starts(generate_slots(WINDOW, 30, booked, MONDAY, SUNDAY_MORNING))
    assert "09:00" in starts  # 09:00-09:30 toca el inicio
    assert "10:00" in starts  # 10:00 toca el final
    assert "09:15" not in starts
    assert "09:30" not in starts
    assert "09:45" not in starts


def test_booking_longer_than_slot_blocks_every_overlap():
    booked = [_booked(MONDAY, 14, 0, minutes=90)]
    starts = _starts(generate_slots(WINDOW, 30, booked, MONDAY, SUNDAY_MORNING))
    for blocked in _grid("13:45", "15:15"):
        assert blocked not in starts
    assert "13:30" in starts
    assert "15:30" in starts


def test_today_skips_past_and_current_slot():
    now = _local(MONDAY, 10, 30)
    starts = _starts(generate_slots(WINDOW, 30, [], MONDAY, now))
    assert starts[0] == "10:45"
    assert "10:30" not in starts


def test_today_with_now_given_in_utc():
    now = _local(MONDAY, 16, 10).astimezone(UTC)
    starts = _starts(generate_slots(WINDOW, 30, [], MONDAY, now))
    assert starts == ["16:15", "16:30", "16:45", "17:00"]


def test_past_filter_only_applies_to_today():
    # 22:00 del domingo en Bogotá ya es lunes en UTC
    sunday_night_utc = datetime(2025, 11, 10, 3, 0, tzinfo=UTC)
    starts = _starts(generate_slots(WINDOW, 30, [], MONDAY, sunday_night_utc))
    assert starts[0] == "09:00"

    # y una fecha pasada tampoco se filtra por hora
    tuesday = _local(MONDAY + timedelta(days=1), 12, 0)
    starts = _starts(generate_slots(WINDOW, 30, [], MONDAY, tuesday))
    assert starts[0] == "09:00"


def test_no_window_yields_nothing():
    assert list(generate_slots(None, 30, [], MONDAY, SUNDAY_MORNING)) == []


def test_duration_longer_than_window_yields_nothing():
    window = EffectiveWindow(start=time(9, 0), end=time(9, 45))
    assert list(generate_slots(window, 60, [], MONDAY, SUNDAY_MORNING)) == []


def test_last_slot_ends_exactly_at_window_end():
    window = EffectiveWindow(start=time(9, 0), end=time(10, 0))
    slots = list(generate_slots(window, 60, [], MONDAY, SUNDAY_MORNING))
    assert [(s.start_time, s.end_time) for s in slots] == [("09:00", "10:00")]


def test_stride_is_independent_of_duration():
    window = EffectiveWindow(start=time(9, 0), end=time(10, 0))
    starts = _starts(generate_slots(window, 15, [], MONDAY, SUNDAY_MORNING))
    assert starts == ["09:00", "09:15", "09:30", "09:45"]


def test_stride_comes_from_config():
    window = EffectiveWindow(start=time(9, 0), end=time(10, 0))
    config = SchedulingConfig(slot_stride_minutes=30)
    starts = _starts(generate_slots(window, 15, [], MONDAY, SUNDAY_MORNING, config))
    assert starts == ["09:00", "09:30"]


def test_non_positive_duration_is_rejected():
    with pytest.raises(ValueError):
        list(generate_slots(WINDOW, 0, [], MONDAY, SUNDAY_MORNING))


def test_same_inputs_same_output():
    booked = [_booked(MONDAY, 10, 0), _booked(MONDAY, 15, 15)]
    now = _local(MONDAY, 9, 20)
    first = [s.model_dump_json() for s in generate_slots(WINDOW, 30, booked, MONDAY, now)]
    second = [s.model_dump_json() for s in generate_slots(WINDOW, 30, booked, MONDAY, now)]
    assert first == second
    assert first
