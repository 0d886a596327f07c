from functools import lru_cache

from fastapi import Depends

from app.Core.Config.server import ServerConfig
from app.Domains.Appointment.Repositories.appointment_repository import AppointmentRepository
from app.Domains.Appointment.Services.appointment_service import AppointmentService
from app.Domains.Realtime.Services.event_publisher import AppointmentEventPublisher
from app.Infrastructure.Realtime.connection_registry import ConnectionRegistry
from app.Infrastructure.Repositories.file_appointment_repository import FileAppointmentRepository

# Singletons (Infrastructure)
_connection_registry = ConnectionRegistry()


@lru_cache
def get_server_config() -> ServerConfig:
    return ServerConfig()


def get_connection_registry() -> ConnectionRegistry:
    return _connection_registry


def get_appointment_repository(
    config: ServerConfig = Depends(get_server_config),
) -> AppointmentRepository:
    return FileAppointmentRepository(config.data_dir)


def get_event_publisher(
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> AppointmentEventPublisher:
    return AppointmentEventPublisher(registry)


def get_appointment_service(
    repository: AppointmentRepository = Depends(get_appointment_repository),
    publisher: AppointmentEventPublisher = Depends(get_event_publisher),
    config: ServerConfig = Depends(get_server_config),
) -> AppointmentService:
    # Built per request around the shared registry
    return AppointmentService(repository, publisher, default_service=config.default_service)
