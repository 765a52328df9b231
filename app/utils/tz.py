from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

CO_TZ = ZoneInfo("America/Bogota")


def ensure_aware_utc(dt: datetime) -> datetime:
    """
    Garantiza que dt sea timezone-aware en UTC.
    - Si ya viene aware: convierte a UTC.
    - Si viene naive: ERROR (evita guardar mal).
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Datetime naive recibido. Use siempre datetimes timezone-aware."
        )
    return dt.astimezone(UTC)


def stored_utc(dt: datetime) -> datetime:
    """
    Normaliza un datetime leído de la base. Algunos motores (SQLite) devuelven
    naive aunque la columna sea timezone=True; lo guardado siempre es UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_local(dt_utc: datetime, tz: ZoneInfo | None = None) -> datetime:
    """
    Convierte un datetime UTC (aware) a la TZ del negocio (aware).
    """
    tz = tz or CO_TZ
    if dt_utc.tzinfo is None:
        raise ValueError("Se esperaba datetime UTC timezone-aware.")
    return dt_utc.astimezone(tz)


def combine_local_to_utc(d: date, t: time, tz: ZoneInfo | None = None) -> datetime:
    """
    Combina fecha+hora interpretadas en la TZ local y devuelve UTC (aware).
    """
    tz = tz or CO_TZ
    if t.tzinfo is not None:
        t = time(t.hour, t.minute, t.second, t.microsecond)
    local_dt = datetime.combine(d, t).replace(tzinfo=tz)
    return local_dt.astimezone(UTC)


def local_day_bounds_utc(
    d: date, tz: ZoneInfo | None = None
) -> tuple[datetime, datetime]:
    """[00:00, 24:00) del día local d, expresado en UTC."""
    tz = tz or CO_TZ
    start_local = datetime.combine(d, time.min).replace(tzinfo=tz)
    end_local = datetime.combine(d + timedelta(days=1), time.min).replace(tzinfo=tz)
    return start_local.astimezone(UTC), end_local.astimezone(UTC)


def format_hhmm(t: time | datetime) -> str:
    return f"{t.hour:02d}:{t.minute:02d}"


def iso_utc(dt: datetime) -> str:
    """
    Serializa en ISO 8601 siempre en UTC con sufijo 'Z'.
    """
    return ensure_aware_utc(dt).isoformat().replace("+00:00", "Z")
