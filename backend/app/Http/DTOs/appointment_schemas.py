from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.Http.Responses.hateoas import HateoasModel, Link

# --- Requests ---


class BookingRequest(BaseModel):
    # name/phone are checked by the service so a missing field is a 400, not a 422
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    service: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    status: Optional[str] = None


# --- Responses ---


class AppointmentResponse(HateoasModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    phone: str
    address: Optional[str] = None
    email: Optional[str] = None
    service: str
    status: str
    is_confirmed: bool
    created_at: datetime
    last_updated: datetime

    links: List[Link] = Field(default_factory=list, alias="_links")


class BookingResponse(BaseModel):
    success: bool = True
    appointment: AppointmentResponse


class AppointmentListResponse(BaseModel):
    appointments: List[AppointmentResponse]


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "OK"
    timestamp: datetime
    db_status: str = Field(alias="dbStatus")
    connections: int
