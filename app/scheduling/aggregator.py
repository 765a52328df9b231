from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date

from app.core.logging import get_logger
from app.scheduling.types import TimeSlot

SlotsForBarber = Callable[[str], Iterable[TimeSlot]]


def aggregate_any_barber(
    service_id: str,
    day: date,
    barber_ids: Iterable[str],
    slots_for_barber: SlotsForBarber,
) -> list[TimeSlot]:
    """
    Une los turnos libres de todos los barberos y deja uno por hora de inicio.

    Si el cálculo de un barbero falla (p.ej. horario guardado corrupto) se
    registra y ese barbero queda fuera; el resto del resultado se mantiene.
    Ante empate gana el primer barbero en el orden de barber_ids.
    """
    log = get_logger().bind(service_id=service_id, date=day.isoformat())

    collected: list[TimeSlot] = []
    for barber_id in barber_ids:
        try:
            slots = list(slots_for_barber(barber_id))
        except Exception as exc:
            log.warning(
                "availability.barber_failed", barber_id=barber_id, error=str(exc)
            )
            continue
        collected.extend(s.model_copy(update={"barber_id": barber_id}) for s in slots)

    # sort estable: conserva el orden de barber_ids dentro de cada hora
    collected.sort(key=lambda s: s.start_time)

    unique: dict[str, TimeSlot] = {}
    for slot in collected:
        unique.setdefault(slot.start_time, slot)
    return list(unique.values())
