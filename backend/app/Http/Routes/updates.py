from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from app.Core.Config.server import ServerConfig
from app.dependencies import get_appointment_service, get_connection_registry, get_server_config
from app.Domains.Appointment.Services.appointment_service import AppointmentService
from app.Infrastructure.Realtime.connection_registry import ConnectionRegistry
from app.Infrastructure.Realtime.sse_channel import SSEChannel

router = APIRouter(tags=["Admin Updates"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


@router.get(
    "/api/admin/updates",
    summary="Live appointment updates",
    description=(
        "Server-Sent Events stream. Starts with one `init` snapshot, then `new`, "
        "`update` and `delete` events; `: keepalive` comments keep it alive."
    ),
    response_class=StreamingResponse,
)
async def stream_updates(
    registry: ConnectionRegistry = Depends(get_connection_registry),
    service: AppointmentService = Depends(get_appointment_service),
    config: ServerConfig = Depends(get_server_config),
):
    channel = SSEChannel(
        registry,
        heartbeat_interval=config.heartbeat_interval,
        reconnect_delay=config.reconnect_delay,
        buffer_size=config.channel_buffer_size,
    )
    # A store failure here surfaces as a 500 before any bytes are streamed
    channel.open(service.list_appointments)

    return StreamingResponse(channel.stream(), media_type="text/event-stream", headers=SSE_HEADERS)
