class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BookingValidationError(AppError):
    status_code = 400


class AppointmentNotFoundError(AppError):
    status_code = 404

    def __init__(self, appointment_id: str):
        super().__init__("Appointment not found")
        self.appointment_id = appointment_id


class StoreError(AppError):
    """The record store failed to read or write."""

    status_code = 500


class DuplicateAppointmentError(StoreError):
    def __init__(self, appointment_id: str):
        super().__init__(f"Appointment {appointment_id} already exists")
        self.appointment_id = appointment_id
