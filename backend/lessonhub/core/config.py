"""Application configuration using Pydantic BaseSettings"""
import logging
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

# Setup logging
logger = logging.getLogger("config")


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Firebase / Firestore
    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_CLIENT_EMAIL: str = ""
    FIREBASE_PRIVATE_KEY: str = ""
    GOOGLE_APPLICATION_CREDENTIALS: str = ""

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"

    # Domain & URLs
    FRONTEND_URL: str = "http://localhost:3000"
    ENVIRONMENT: str = "development"

    # Logging
    LOG_LEVEL: str = "INFO"

    # OpenTelemetry
    OTEL_EXPORTER_OTLP_ENDPOINT: str = ""
    OTEL_SERVICE_NAME: str = "lessonhub-backend"
    OTEL_ENVIRONMENT: str = "development"

    # Rate limiting (fixed window, per client identifier)
    RATE_LIMIT_WINDOW: int = 60  # seconds
    RATE_LIMIT_REQUESTS: int = 300
    RATE_LIMIT_STRICT_WINDOW: int = 60  # seconds
    RATE_LIMIT_STRICT_REQUESTS: int = 60

    # Pydantic V2 Config
    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @field_validator("FIREBASE_PRIVATE_KEY")
    @classmethod
    def expand_private_key(cls, v):
        # Keys pasted into env files carry literal "\n" sequences
        return v.replace("\\n", "\n") if v else v

    @property
    def has_service_account(self) -> bool:
        return bool(self.FIREBASE_PROJECT_ID and self.FIREBASE_CLIENT_EMAIL and self.FIREBASE_PRIVATE_KEY)

    def service_account_info(self) -> Optional[dict]:
        """Service account dict for firebase_admin.credentials.Certificate"""
        if not self.has_service_account:
            return None
        return {
            "type": "service_account",
            "project_id": self.FIREBASE_PROJECT_ID,
            "client_email": self.FIREBASE_CLIENT_EMAIL,
            "private_key": self.FIREBASE_PRIVATE_KEY,
            "token_uri": "https://oauth2.googleapis.com/token",
        }


# Create global settings instance
settings = Settings()


# Firestore layout
USERS_COLLECTION = "users"
VIDEOS_COLLECTION = "videos"
SETTINGS_COLLECTION = "settings"
APP_SETTINGS_DOCUMENT = "app"

UNNAMED_COACH = "Unnamed Coach"
