from loguru import logger

from app.Domains.Appointment.Models.appointment import Appointment
from app.Domains.Realtime.Interfaces.event_broadcaster import EventBroadcaster
from app.Domains.Realtime.Models.event import DeleteEvent, NewEvent, UpdateEvent


class AppointmentEventPublisher:
    """
    Translates completed store mutations into events for the admin channels.

    Call each hook once, after the mutation has been written.
    """

    def __init__(self, broadcaster: EventBroadcaster):
        self.broadcaster = broadcaster

    def on_created(self, appointment: Appointment) -> None:
        logger.debug(f"Publishing new appointment {appointment.id}")
        self.broadcaster.broadcast(NewEvent(appointment=appointment))

    def on_confirmed(self, appointment: Appointment) -> None:
        logger.debug(f"Publishing confirmation of {appointment.id}")
        self.broadcaster.broadcast(UpdateEvent(appointment=appointment))

    def on_cancelled(self, appointment_id: str) -> None:
        logger.debug(f"Publishing cancellation of {appointment_id}")
        self.broadcaster.broadcast(DeleteEvent(id=appointment_id))
