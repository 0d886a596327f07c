from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.dependencies import get_appointment_service, get_connection_registry
from app.Domains.Appointment.Services.appointment_service import AppointmentService
from app.Http.DTOs.appointment_schemas import HealthResponse
from app.Infrastructure.Realtime.connection_registry import ConnectionRegistry

router = APIRouter(tags=["Health"])


@router.get("/", summary="API banner")
async def index():
    return {
        "message": "Appointment booking API is running",
        "availableEndpoints": {
            "createAppointment": "POST /api/appointments",
            "getAppointments": "GET /api/admin/appointments",
            "updateStatus": "PATCH /api/admin/appointments/:id",
            "deleteAppointment": "DELETE /api/admin/appointments/:id",
            "realtimeUpdates": "GET /api/admin/updates",
            "healthCheck": "GET /health",
        },
    }


@router.get("/health", response_model=HealthResponse, summary="Store and channel status")
async def health_check(
    service: AppointmentService = Depends(get_appointment_service),
    registry: ConnectionRegistry = Depends(get_connection_registry),
):
    return HealthResponse(
        timestamp=datetime.now(timezone.utc),
        db_status="Connected" if service.store_available() else "Disconnected",
        connections=len(registry),
    )
