from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class AvailabilityRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    service_id: str = Field(..., alias="serviceId", min_length=1)
    # UUID del barbero o "any" (sin preferencia)
    barber_id: str = Field(..., alias="barberId", min_length=1)
    date: dt.date = Field(..., description="Fecha local YYYY-MM-DD")


class TimeSlotOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_time: str = Field(..., alias="startTime")  # "HH:MM"
    end_time: str = Field(..., alias="endTime")
    available: bool = True
    barber_id: str | None = Field(None, alias="barberId")
