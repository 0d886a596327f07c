import uuid
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

PENDING = "Pending"
CONFIRMED = "Confirmed"

AppointmentStatus = Literal["Pending", "Confirmed"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Aggregate Root
class Appointment(BaseModel):
    """A booked slot. Serialized with camelCase keys (isConfirmed, createdAt, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    address: Optional[str] = None
    email: Optional[str] = None
    service: str = "Haircut"
    status: AppointmentStatus = PENDING
    is_confirmed: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    last_updated: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def _derive_confirmed_flag(self) -> "Appointment":
        # The flag mirrors status; stored values are never trusted over it
        self.is_confirmed = self.status == CONFIRMED
        return self

    @classmethod
    def book(
        cls,
        name: str,
        phone: str,
        address: Optional[str] = None,
        email: Optional[str] = None,
        service: Optional[str] = None,
        default_service: str = "Haircut",
    ) -> "Appointment":
        now = utcnow()
        return cls(
            name=name,
            phone=phone,
            address=address,
            email=email,
            service=service or default_service,
            status=PENDING,
            created_at=now,
            last_updated=now,
        )

    def confirm(self) -> "Appointment":
        """Return a Confirmed copy with a fresh last_updated."""
        return self.model_copy(
            update={"status": CONFIRMED, "is_confirmed": True, "last_updated": utcnow()}
        )
