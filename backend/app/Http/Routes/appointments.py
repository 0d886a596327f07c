from typing import Optional

from fastapi import APIRouter, Depends, Request

from app.dependencies import get_appointment_service
from app.Domains.Appointment.Models.appointment import Appointment
from app.Domains.Appointment.Services.appointment_service import AppointmentService
from app.Http.DTOs.appointment_schemas import (
    AppointmentListResponse,
    AppointmentResponse,
    BookingRequest,
    BookingResponse,
    MessageResponse,
    StatusUpdateRequest,
)
from app.Http.DTOs.error_schemas import APIErrorResponse

router = APIRouter(tags=["Appointments"])


def _map_to_response(appointment: Appointment, request: Request) -> AppointmentResponse:
    """Helper to map Domain Entity to HATEOAS Response DTO."""
    base_url = str(request.base_url).rstrip("/")
    response = AppointmentResponse(**appointment.model_dump())

    admin_href = f"{base_url}/api/admin/appointments/{appointment.id}"
    response.add_link(rel="self", href=admin_href, method="GET")
    if not appointment.is_confirmed:
        response.add_link(rel="confirm", href=admin_href, method="PATCH")
    response.add_link(rel="cancel", href=admin_href, method="DELETE")

    return response


@router.post(
    "/api/appointments",
    response_model=BookingResponse,
    status_code=201,
    summary="Book an appointment",
    description="Stores a new Pending appointment and notifies open admin channels.",
    responses={400: {"model": APIErrorResponse}},
)
async def create_appointment(
    body: BookingRequest,
    request: Request,
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.book_appointment(
        name=body.name,
        phone=body.phone,
        address=body.address,
        email=body.email,
        service=body.service,
    )
    return BookingResponse(appointment=_map_to_response(appointment, request))


@router.get(
    "/api/admin/appointments",
    response_model=AppointmentListResponse,
    summary="List appointments",
    description="Newest first. `status` may be all, Pending or Confirmed.",
    responses={400: {"model": APIErrorResponse}},
)
async def list_appointments(
    request: Request,
    status: Optional[str] = None,
    service: AppointmentService = Depends(get_appointment_service),
):
    appointments = service.list_appointments(status)
    return AppointmentListResponse(
        appointments=[_map_to_response(a, request) for a in appointments]
    )


@router.get(
    "/api/admin/appointments/{appointment_id}",
    response_model=AppointmentResponse,
    summary="Get appointment details",
    responses={404: {"model": APIErrorResponse}},
)
async def get_appointment(
    appointment_id: str,
    request: Request,
    service: AppointmentService = Depends(get_appointment_service),
):
    return _map_to_response(service.get_appointment(appointment_id), request)


@router.patch(
    "/api/admin/appointments/{appointment_id}",
    response_model=AppointmentResponse,
    summary="Confirm an appointment",
    description='Only `{"status": "Confirmed"}` is accepted.',
    responses={400: {"model": APIErrorResponse}, 404: {"model": APIErrorResponse}},
)
async def update_appointment_status(
    appointment_id: str,
    body: StatusUpdateRequest,
    request: Request,
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.update_status(appointment_id, body.status)
    return _map_to_response(appointment, request)


@router.delete(
    "/api/admin/appointments/{appointment_id}",
    response_model=MessageResponse,
    summary="Cancel an appointment",
    description="Deletes the appointment permanently and notifies open admin channels.",
    responses={404: {"model": APIErrorResponse}},
)
async def cancel_appointment(
    appointment_id: str,
    service: AppointmentService = Depends(get_appointment_service),
):
    service.cancel_appointment(appointment_id)
    return MessageResponse(message="Appointment deleted")
