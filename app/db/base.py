# Garantiza el registro de TODAS las models en el mismo registry
from app.db.base_class import Base  # noqa
from app.models.appointment import Appointment  # noqa
from app.models.barber import Barber, barber_services  # noqa
from app.models.client import Client  # noqa
from app.models.service import Service  # noqa
