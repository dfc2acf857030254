"""Application configuration"""
from typing import List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = "sqlite:///./cafe_console.db"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or text

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Admin account ID prefix
    ADMIN_ID_PREFIX: str = "adm_"

    # Presence: an admin with no heartbeat for this long is reported inactive
    PRESENCE_TIMEOUT_SECONDS: int = 90  # three missed 30s heartbeats

    # Bootstrap owner, created on startup when no admin accounts exist
    BOOTSTRAP_OWNER_EMAIL: Optional[str] = None
    BOOTSTRAP_OWNER_PASSWORD: Optional[str] = None
    BOOTSTRAP_OWNER_NAME: str = "Cafe Owner"

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: List[str] = ["300/minute"]
    RATE_LIMIT_LOGIN: str = "10/minute"
    RATE_LIMIT_STORAGE_URI: str = "memory://"  # Use redis:// for production

    # Monitoring
    METRICS_ENABLED: bool = True
    METRICS_PATH: str = "/metrics"

    # JWT Authentication
    JWT_PRIVATE_KEY: Optional[str] = None          # RSA-2048 PEM string; auto-generated on startup if absent
    JWT_ALGORITHM: str = "RS256"
    JWT_ADMIN_EXPIRE_SECONDS: int = 28800          # 8 hours
    JWT_REMEMBER_ME_EXPIRE_SECONDS: int = 2592000  # 30 days
    JWT_KEY_ID: Optional[str] = None               # kid claim for key rotation tracking

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string into list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]


settings = Settings()
