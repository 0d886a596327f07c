"""
Typed events pushed to admin clients over the updates channel.

Each event is one SSE frame::

    event: <kind>
    data: <JSON payload>

The payload is the event minus its ``kind`` tag, so a receiver rebuilds the
event from ``{"kind": <event name>, **json.loads(data)}``.
"""

import json
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from app.Domains.Appointment.Models.appointment import Appointment

KEEPALIVE_FRAME = ": keepalive\n\n"


def retry_frame(delay_seconds: float) -> str:
    """Reconnect hint honoured by browser EventSource clients."""
    return f"retry: {int(delay_seconds * 1000)}\n\n"


class _BaseEvent(BaseModel):
    def encode(self) -> str:
        data = self.model_dump(mode="json", by_alias=True, exclude={"kind"})
        return f"event: {self.kind}\ndata: {json.dumps(data)}\n\n"


class InitEvent(_BaseEvent):
    kind: Literal["init"] = "init"
    appointments: List[Appointment] = Field(default_factory=list)


class NewEvent(_BaseEvent):
    kind: Literal["new"] = "new"
    appointment: Appointment


class UpdateEvent(_BaseEvent):
    kind: Literal["update"] = "update"
    appointment: Appointment


class DeleteEvent(_BaseEvent):
    kind: Literal["delete"] = "delete"
    id: str


AppointmentEvent = Annotated[
    Union[InitEvent, NewEvent, UpdateEvent, DeleteEvent], Field(discriminator="kind")
]

_event_adapter = TypeAdapter(AppointmentEvent)


def decode_event(kind: str, data: str) -> AppointmentEvent:
    """Inverse of ``encode``; raises ValueError on unknown kinds or bad payloads."""
    payload = json.loads(data)
    if not isinstance(payload, dict):
        raise ValueError(f"Event payload for '{kind}' is not an object")
    return _event_adapter.validate_python({**payload, "kind": kind})
