import os
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BACKEND_ROOT = os.path.dirname(
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
)


class ServerConfig(BaseSettings):
    """Server settings loaded from environment variables (and .env)."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=2400, alias="FAST_API_PORT")
    reload: bool = Field(default=False, alias="RELOAD")
    log_level: str = Field(default="DEBUG", alias="LOG_LEVEL")

    data_dir: str = Field(
        default=os.path.join(BACKEND_ROOT, "resources", "data", "appointments"),
        alias="APPOINTMENT_DATA_DIR",
    )
    cors_origins: str = Field(default="http://localhost:5173", alias="FRONTEND_URL")
    default_service: str = Field(default="Haircut", alias="DEFAULT_SERVICE")

    # Push channel
    heartbeat_interval: float = Field(default=15.0, gt=0, alias="SSE_HEARTBEAT_INTERVAL")
    reconnect_delay: float = Field(default=3.0, gt=0, alias="SSE_RECONNECT_DELAY")
    channel_buffer_size: int = Field(default=100, ge=1, alias="SSE_CHANNEL_BUFFER_SIZE")

    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
