"""
In-memory, append-only record of confirmed appointments.

Lives for the lifetime of the process. Appends are serialized with a lock
so concurrent submissions never lose or duplicate an entry, and insertion
order is the order in which appends completed.
"""

import logging
import threading

from beautybird.schemas.booking_schema import Appointment

logger = logging.getLogger(__name__)


class AppointmentStore:
    """Audit trail of confirmed bookings. No update or delete."""

    def __init__(self) -> None:
        self._appointments: list[Appointment] = []
        self._lock = threading.Lock()

    def append(self, appointment: Appointment) -> None:
        with self._lock:
            self._appointments.append(appointment)
            count = len(self._appointments)
        logger.debug("Stored appointment #%d for %s", count, appointment.name)

    def all(self) -> tuple[Appointment, ...]:
        """Read-only snapshot in insertion order."""
        with self._lock:
            return tuple(self._appointments)

    def __len__(self) -> int:
        with self._lock:
            return len(self._appointments)
