import glob
import json
import os
from contextlib import contextmanager
from typing import Iterator, List, Optional

from loguru import logger

from app.Core.Exceptions.exceptions import DuplicateAppointmentError, StoreError
from app.Domains.Appointment.Models.appointment import Appointment, AppointmentStatus
from app.Domains.Appointment.Repositories.appointment_repository import AppointmentRepository


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except OSError as e:
        raise StoreError(f"Failed to {action}: {e}") from e


class FileAppointmentRepository(AppointmentRepository):
    """One JSON document per appointment under ``data_dir``."""

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        try:
            os.makedirs(self.data_dir, exist_ok=True)
        except OSError as e:
            # Reported through ping(); individual operations raise StoreError
            logger.warning(f"Appointment data dir {self.data_dir} unavailable: {e}")

    def _get_file_path(self, appointment_id: str) -> str:
        # Ids are generated server-side, but never let one escape the data dir
        safe_id = os.path.basename(appointment_id)
        return os.path.join(self.data_dir, f"{safe_id}.json")

    def _write(self, appointment: Appointment) -> None:
        file_path = self._get_file_path(appointment.id)
        tmp_path = f"{file_path}.tmp"
        with open(tmp_path, "w") as f:
            json.dump(appointment.model_dump(mode="json", by_alias=True), f, indent=4)
        os.replace(tmp_path, file_path)

    def _read(self, file_path: str) -> Appointment:
        with open(file_path, "r") as f:
            return Appointment.model_validate(json.load(f))

    def insert(self, appointment: Appointment) -> Appointment:
        with _store_errors(f"insert appointment {appointment.id}"):
            if os.path.exists(self._get_file_path(appointment.id)):
                raise DuplicateAppointmentError(appointment.id)
            self._write(appointment)
        return appointment

    def get(self, appointment_id: str) -> Optional[Appointment]:
        file_path = self._get_file_path(appointment_id)
        if not os.path.exists(file_path):
            return None
        with _store_errors(f"read appointment {appointment_id}"):
            try:
                return self._read(file_path)
            except ValueError as e:
                logger.error(f"Error loading appointment {appointment_id}: {e}")
                return None

    def update(self, appointment: Appointment) -> Optional[Appointment]:
        with _store_errors(f"update appointment {appointment.id}"):
            if not os.path.exists(self._get_file_path(appointment.id)):
                return None
            self._write(appointment)
        return appointment

    def delete(self, appointment_id: str) -> bool:
        file_path = self._get_file_path(appointment_id)
        with _store_errors(f"delete appointment {appointment_id}"):
            try:
                os.remove(file_path)
            except FileNotFoundError:
                return False
        return True

    def list_all(self, status: Optional[AppointmentStatus] = None) -> List[Appointment]:
        appointments = []
        with _store_errors("list appointments"):
            for file_path in glob.glob(os.path.join(self.data_dir, "*.json")):
                try:
                    appointment = self._read(file_path)
                except (ValueError, FileNotFoundError):
                    continue  # Skip malformed or concurrently deleted files
                if status is None or appointment.status == status:
                    appointments.append(appointment)
        appointments.sort(key=lambda a: a.created_at, reverse=True)
        return appointments

    def ping(self) -> bool:
        return os.path.isdir(self.data_dir) and os.access(self.data_dir, os.W_OK)
