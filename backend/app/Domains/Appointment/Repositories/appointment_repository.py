from abc import ABC, abstractmethod
from typing import List, Optional

from app.Domains.Appointment.Models.appointment import Appointment, AppointmentStatus


class AppointmentRepository(ABC):
    @abstractmethod
    def insert(self, appointment: Appointment) -> Appointment:
        """Persist a new appointment; raises DuplicateAppointmentError if the id exists."""
        pass

    @abstractmethod
    def get(self, appointment_id: str) -> Optional[Appointment]:
        pass

    @abstractmethod
    def update(self, appointment: Appointment) -> Optional[Appointment]:
        """Overwrite an existing appointment; returns None if it does not exist."""
        pass

    @abstractmethod
    def delete(self, appointment_id: str) -> bool:
        pass

    @abstractmethod
    def list_all(self, status: Optional[AppointmentStatus] = None) -> List[Appointment]:
        """All appointments, newest first, optionally filtered by status."""
        pass

    @abstractmethod
    def ping(self) -> bool:
        """True when the store is reachable and writable."""
        pass
