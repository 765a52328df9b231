from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.models.appointment import AppointmentStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ClientDataIn(_CamelModel):
    full_name: str = Field(..., alias="fullName", min_length=2)
    phone_e164: str = Field(..., alias="phoneE164", min_length=7, max_length=20)
    email: EmailStr
    notes: str | None = None


class CreateAppointmentIn(_CamelModel):
    service_id: str = Field(..., alias="serviceId")
    barber_id: str = Field(..., alias="barberId")
    start_date_time: str = Field(
        ...,
        alias="startDateTime",
        description="ISO-8601; preferir UTC con sufijo Z",
    )
    client_data: ClientDataIn = Field(..., alias="clientData")


class StatusUpdateIn(_CamelModel):
    status: AppointmentStatus


class RescheduleIn(_CamelModel):
    new_start_date_time: str = Field(
        ...,
        alias="newStartDateTime",
        description="ISO-8601; preferir UTC con sufijo Z (ej.: 2025-11-10T15:00:00Z)",
    )
    new_barber_id: str | None = Field(None, alias="newBarberId")


class AppointmentOut(_CamelModel):
    id: str
    service_id: str = Field(..., alias="serviceId")
    barber_id: str = Field(..., alias="barberId")
    client_id: str = Field(..., alias="clientId")
    start_date_time: str = Field(..., alias="startDateTime")
    end_date_time: str = Field(..., alias="endDateTime")
    status: str
    notes: str | None = None
    created_by_role: str = Field(..., alias="createdByRole")
