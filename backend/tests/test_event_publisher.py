from typing import List

from app.Domains.Appointment.Models.appointment import Appointment
from app.Domains.Realtime.Interfaces.event_broadcaster import EventBroadcaster
from app.Domains.Realtime.Models.event import (
    AppointmentEvent,
    DeleteEvent,
    NewEvent,
    UpdateEvent,
)
from app.Domains.Realtime.Services.event_publisher import AppointmentEventPublisher


class CollectingBroadcaster(EventBroadcaster):
    def __init__(self):
        self.events: List[AppointmentEvent] = []

    def broadcast(self, event: AppointmentEvent) -> None:
        self.events.append(event)


def test_each_hook_emits_one_typed_event():
    broadcaster = CollectingBroadcaster()
    publisher = AppointmentEventPublisher(broadcaster)
    appointment = Appointment.book(name="Ana", phone="555-0001")
    confirmed = appointment.confirm()

    publisher.on_created(appointment)
    publisher.on_confirmed(confirmed)
    publisher.on_cancelled(appointment.id)

    new, update, delete = broadcaster.events
    assert isinstance(new, NewEvent) and new.appointment == appointment
    assert isinstance(update, UpdateEvent) and update.appointment.is_confirmed
    assert isinstance(delete, DeleteEvent) and delete.id == appointment.id
