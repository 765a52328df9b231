from __future__ import annotations

from app.scheduling.types import ScheduleDataError


class SchedulingError(Exception):
    """Base de los errores del lado del llamador (antes de entrar al núcleo)."""


class NotFoundError(SchedulingError):
    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} no encontrado: {entity_id}")


class ServiceNotFound(NotFoundError):
    def __init__(self, service_id: str):
        super().__init__("Servicio", service_id)


class BarberNotFound(NotFoundError):
    def __init__(self, barber_id: str):
        super().__init__("Barbero", barber_id)


class InactiveServiceError(SchedulingError):
    def __init__(self, service_id: str):
        self.service_id = service_id
        super().__init__("Servicio no encontrado o inactivo")


__all__ = [
    "BarberNotFound",
    "InactiveServiceError",
    "NotFoundError",
    "ScheduleDataError",
    "SchedulingError",
    "ServiceNotFound",
]
