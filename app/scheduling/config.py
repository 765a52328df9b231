from __future__ import annotations

from datetime import timedelta
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SchedulingConfig(BaseModel):
    """Parámetros de la agenda. Se pasan explícitamente a cada función del núcleo."""

    model_config = ConfigDict(frozen=True)

    timezone: str = "America/Bogota"
    slot_stride_minutes: int = Field(15, gt=0)
    lead_time_minutes: int = Field(60, ge=0)

    @field_validator("timezone")
    @classmethod
    def _check_tz(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except Exception as exc:
            raise ValueError(f"Zona horaria inválida: {v}") from exc
        return v

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def stride(self) -> timedelta:
        return timedelta(minutes=self.slot_stride_minutes)

    @classmethod
    def from_settings(cls, settings) -> SchedulingConfig:
        return cls(
            timezone=settings.BUSINESS_TIMEZONE,
            slot_stride_minutes=settings.SLOT_STRIDE_MINUTES,
            lead_time_minutes=settings.LEAD_TIME_MINUTES,
        )


DEFAULT_CONFIG = SchedulingConfig()
