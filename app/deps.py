from __future__ import annotations

from datetime import UTC, datetime

from app.core.settings import settings
from app.scheduling import SchedulingConfig

_config = SchedulingConfig.from_settings(settings)


def get_scheduling_config() -> SchedulingConfig:
    return _config


def get_now() -> datetime:
    """Instante actual (UTC aware). Se sobreescribe en tests para congelar el reloj."""
    return datetime.now(UTC)
