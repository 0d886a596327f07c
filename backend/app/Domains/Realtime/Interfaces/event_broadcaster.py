from abc import ABC, abstractmethod

from app.Domains.Realtime.Models.event import AppointmentEvent


class EventBroadcaster(ABC):
    @abstractmethod
    def broadcast(self, event: AppointmentEvent) -> None:
        """Deliver an event to every open connection. Must not raise on delivery failures."""
        pass
