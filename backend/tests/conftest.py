from typing import List

import httpx
import pytest

from app.dependencies import get_appointment_repository, get_connection_registry
from app.Domains.Appointment.Services.appointment_service import AppointmentService
from app.Domains.Realtime.Interfaces.push_connection import PushConnection
from app.Domains.Realtime.Models.event import AppointmentEvent
from app.Domains.Realtime.Services.event_publisher import AppointmentEventPublisher
from app.Infrastructure.Realtime.connection_registry import ConnectionRegistry
from app.Infrastructure.Repositories.file_appointment_repository import FileAppointmentRepository
from main import app


class RecordingConnection(PushConnection):
    """Push connection that keeps what it is sent, or refuses everything."""

    def __init__(self, connection_id: str, reachable: bool = True):
        self._id = connection_id
        self.reachable = reachable
        self.events: List[AppointmentEvent] = []
        self.closed = False

    @property
    def connection_id(self) -> str:
        return self._id

    def send(self, event: AppointmentEvent) -> None:
        if not self.reachable:
            raise ConnectionResetError("peer went away")
        self.events.append(event)

    def close(self) -> None:
        self.closed = True

    @property
    def kinds(self) -> List[str]:
        return [event.kind for event in self.events]


@pytest.fixture
def make_connection():
    return RecordingConnection


@pytest.fixture
def repository(tmp_path):
    return FileAppointmentRepository(str(tmp_path / "appointments"))


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def service(repository, registry):
    return AppointmentService(repository, AppointmentEventPublisher(registry))


@pytest.fixture
def watcher(registry):
    """An admin channel that is already open when the test starts."""
    connection = RecordingConnection("watcher")
    registry.register(connection)
    return connection


@pytest.fixture
async def client(repository, registry):
    app.dependency_overrides[get_appointment_repository] = lambda: repository
    app.dependency_overrides[get_connection_registry] = lambda: registry
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
    app.dependency_overrides.clear()
