from typing import List, Optional

from loguru import logger

from app.Core.Exceptions.exceptions import AppointmentNotFoundError, BookingValidationError
from app.Domains.Appointment.Models.appointment import CONFIRMED, PENDING, Appointment
from app.Domains.Appointment.Repositories.appointment_repository import AppointmentRepository
from app.Domains.Realtime.Services.event_publisher import AppointmentEventPublisher

STATUS_FILTERS = {"all": None, "": None, PENDING: PENDING, CONFIRMED: CONFIRMED}


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class AppointmentService:
    def __init__(
        self,
        repository: AppointmentRepository,
        publisher: AppointmentEventPublisher,
        default_service: str = "Haircut",
    ):
        self.repository = repository
        self.publisher = publisher
        self.default_service = default_service

    def book_appointment(
        self,
        name: Optional[str],
        phone: Optional[str],
        address: Optional[str] = None,
        email: Optional[str] = None,
        service: Optional[str] = None,
    ) -> Appointment:
        name, phone = _clean(name), _clean(phone)
        if not name or not phone:
            raise BookingValidationError("Name and phone are required")

        appointment = Appointment.book(
            name=name,
            phone=phone,
            address=_clean(address),
            email=_clean(email),
            service=_clean(service),
            default_service=self.default_service,
        )
        self.repository.insert(appointment)
        logger.info(f"📅 Booked {appointment.service} for {appointment.name} ({appointment.id})")

        self.publisher.on_created(appointment)
        return appointment

    def list_appointments(self, status: Optional[str] = None) -> List[Appointment]:
        if status is None:
            return self.repository.list_all()
        if status not in STATUS_FILTERS:
            raise BookingValidationError(f"Unknown status filter: {status}")
        return self.repository.list_all(STATUS_FILTERS[status])

    def get_appointment(self, appointment_id: str) -> Appointment:
        appointment = self.repository.get(appointment_id)
        if not appointment:
            raise AppointmentNotFoundError(appointment_id)
        return appointment

    def update_status(self, appointment_id: str, status: Optional[str]) -> Appointment:
        """Only Pending -> Confirmed is allowed; confirming twice just refreshes lastUpdated."""
        if status != CONFIRMED:
            raise BookingValidationError("Invalid status update")

        appointment = self.get_appointment(appointment_id)
        updated = self.repository.update(appointment.confirm())
        if updated is None:
            # Cancelled between the lookup and the write
            raise AppointmentNotFoundError(appointment_id)
        logger.info(f"✅ Confirmed appointment {appointment_id}")

        self.publisher.on_confirmed(updated)
        return updated

    def cancel_appointment(self, appointment_id: str) -> None:
        if not self.repository.delete(appointment_id):
            raise AppointmentNotFoundError(appointment_id)
        logger.info(f"🗑️ Cancelled appointment {appointment_id}")

        self.publisher.on_cancelled(appointment_id)

    def store_available(self) -> bool:
        return self.repository.ping()
