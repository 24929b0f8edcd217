"""Application configuration settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Database
    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "medischedule"
    
    # OpenAI - used by the schedule adjustment advisor only
    OPENAI_API_KEY: str = ""
    ADVISORY_MODEL: str = "gpt-4o"
    ADVISORY_TIMEOUT_SECONDS: float = 60.0
    
    # Hospital constraints passed to the advisor
    OPERATING_HOURS: str = "08:00-20:00"
    
    # Tokens are issued by the external auth provider, we only verify them
    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    
    # Application
    APP_NAME: str = "MediSchedule Pro"
    API_V1_PREFIX: str = "/api/v1"
    PORT: int = 8000
    
    # CORS
    BACKEND_CORS_ORIGINS: str = '["http://localhost:3000", "http://localhost:9002"]'
    
    # Live subscriptions
    SUBSCRIPTION_POLL_INTERVAL: float = 1.0
    
    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    
    # Logging
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )
    
    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from JSON string."""
        try:
            return json.loads(self.BACKEND_CORS_ORIGINS)
        except json.JSONDecodeError:
            return ["http://localhost:3000"]


settings = Settings()
