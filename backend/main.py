"""
Main entry point for the FastAPI server.

This module defines the FastAPI application, its routers and lifecycle
management. Configuration comes from environment variables (e.g. HOST,
FAST_API_PORT, APPOINTMENT_DATA_DIR) and can be overridden on the command line.
"""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.Core.Exceptions.handlers import register_exception_handlers
from app.dependencies import get_connection_registry, get_server_config
from app.Http.Routes.appointments import router as appointments_router
from app.Http.Routes.health import router as health_router
from app.Http.Routes.updates import router as updates_router

# Server configuration
server_config = get_server_config()

# Configure loguru
logger.remove()
logger.add(
    sys.stderr,
    level=server_config.log_level.upper(),
    format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    enqueue=True,
    backtrace=True,
    diagnose=True,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan manager. On shutdown every open admin channel is closed
    so streaming responses end and their keepalive tasks stop.
    """
    logger.info(f"Appointments stored in {server_config.data_dir}")
    try:
        yield
    finally:
        get_connection_registry().close_all()


# Create the FastAPI app with the lifespan context
app: FastAPI = FastAPI(
    lifespan=lifespan,
    title="Appointment Booking API",
    description="Book appointments and follow them live from the admin panel.",
    version="1.0.0",
)

# Register custom exception handlers for standardized error responses
register_exception_handlers(app)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=server_config.cors_origin_list(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(appointments_router)
app.include_router(updates_router)


def parse_server_args():
    """Parse server-specific arguments"""
    import argparse

    parser = argparse.ArgumentParser(description="Appointment booking API server")
    parser.add_argument("--host", help="Server host")
    parser.add_argument("--port", type=int, help="Server port")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    server_args = parser.parse_args()

    if server_args.host:
        server_config.host = server_args.host
    if server_args.port:
        server_config.port = server_args.port
    if server_args.reload:
        server_config.reload = server_args.reload


if __name__ == "__main__":
    import uvicorn

    parse_server_args()

    logger.info("Starting FastAPI server")
    uvicorn.run(
        "main:app",
        host=server_config.host,
        port=server_config.port,
        reload=server_config.reload,
    )
