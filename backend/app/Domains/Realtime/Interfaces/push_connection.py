from abc import ABC, abstractmethod

from app.Domains.Realtime.Models.event import AppointmentEvent


class PushConnection(ABC):
    """One open push channel to one admin client."""

    @property
    @abstractmethod
    def connection_id(self) -> str:
        pass

    @abstractmethod
    def send(self, event: AppointmentEvent) -> None:
        """Queue an event without blocking; raises if the peer cannot take it."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Idempotent."""
        pass
