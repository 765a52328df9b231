from datetime import date, datetime, time

import pytest

from app.utils.tz import (
    CO_TZ,
    UTC,
    combine_local_to_utc,
    ensure_aware_utc,
    format_hhmm,
    iso_utc,
    local_day_bounds_utc,
    stored_utc,
    to_local,
)


@pytest.mark.parametrize(
    "d,t",
    [
        (date(2025, 1, 15), time(0, 0)),
        (date(2025, 11, 10), time(9, 45)),
        (date(2025, 12, 31), time(23, 30)),
    ],
)
def test_local_to_utc_and_back(d, t):
    dt_utc = combine_local_to_utc(d, t, CO_TZ)
    assert dt_utc.tzinfo == UTC

    loc = to_local(dt_utc, CO_TZ)
    assert loc.date() == d
    assert (loc.hour, loc.minute) == (t.hour, t.minute)


def test_bogota_is_utc_minus_5():
    dt_utc = combine_local_to_utc(date(2025, 11, 10), time(9, 0))
    assert dt_utc == datetime(2025, 11, 10, 14, 0, tzinfo=UTC)


def test_local_day_bounds_cross_utc_midnight():
    start, end = local_day_bounds_utc(date(2025, 11, 10))
    assert start == datetime(2025, 11, 10, 5, 0, tzinfo=UTC)
    assert end == datetime(2025, 11, 11, 5, 0, tzinfo=UTC)


def test_to_local_requires_aware_utc():
    with pytest.raises(ValueError):
        to_local(datetime(2025, 9, 10, 17, 0))


def test_ensure_aware_utc_errors_on_naive():
    with pytest.raises(ValueError):
        ensure_aware_utc(datetime(2025, 9, 10, 17, 0))


def test_stored_utc_treats_naive_as_utc():
    assert stored_utc(datetime(2025, 11, 10, 15, 0)) == datetime(
        2025, 11, 10, 15, 0, tzinfo=UTC
    )


def test_format_hhmm():
    assert format_hhmm(time(7, 5)) == "07:05"


def test_iso_utc_has_Z_suffix():
    s = iso_utc(datetime(2025, 11, 10, 9, 0, tzinfo=CO_TZ))
    assert s == "2025-11-10T14:00:00Z"
