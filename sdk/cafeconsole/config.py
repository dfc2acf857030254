"""Console configuration"""
from pathlib import Path

from pydantic_settings import BaseSettings

# Fixed protocol cadence; not configurable.
HEARTBEAT_INTERVAL_SECONDS = 30
ROSTER_POLL_INTERVAL_SECONDS = 5


class ConsoleSettings(BaseSettings):
    """Console settings"""

    # API origin
    CAFE_API_URL: str = "http://localhost:8000"
    CAFE_REQUEST_TIMEOUT: int = 10  # seconds

    # Persistent ("remember me") session store
    CAFE_SESSION_FILE: str = str(Path.home() / ".cafeconsole" / "session.json")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def api_url(self) -> str:
        return self.CAFE_API_URL.rstrip("/")


settings = ConsoleSettings()
