"""Application configuration using Pydantic Settings"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# backend/ directory; relative paths in settings resolve against it
BACKEND_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=BACKEND_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Trello credentials
    trello_app_key: str = Field(..., description="Trello application key")
    trello_user_token: str = Field(..., description="Trello user token")

    # Privileged channel
    api_key: str = Field(default="", description="Key for the external submission API")

    # Board / label configuration file
    boards_config_path: Path = Field(
        default=Path("config/config.json"), description="Board and label JSON file"
    )

    # Environment
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="config/backend.log", description="Log file, empty to disable")
    log_retention_days: int = Field(default=90, description="Days of rotated log files to keep")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port")
    frontend_url: str = Field(default="http://localhost:3000", description="Frontend URL for CORS")

    # Board service
    http_timeout_seconds: float = Field(default=10.0, description="Timeout per Trello call")
    verify_labels_on_startup: bool = Field(default=True, description="Provision labels at startup")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper

    @field_validator("http_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be positive")
        return v

    @property
    def resolved_boards_config_path(self) -> Path:
        return self._resolve(self.boards_config_path)

    @property
    def resolved_log_file(self) -> Path | None:
        if not self.log_file:
            return None
        return self._resolve(Path(self.log_file))

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS allowed origins"""
        return [self.frontend_url]

    @property
    def api_enabled(self) -> bool:
        """Privileged routes are only served when a key is configured"""
        return bool(self.api_key)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment.lower() == "development"

    @staticmethod
    def _resolve(path: Path) -> Path:
        return path if path.is_absolute() else BACKEND_DIR / path


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()  # type: ignore[call-arg]
