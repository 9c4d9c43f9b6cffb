"""Configuration management using environment variables"""
import logging
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_COMPUTE_MAX_ATTEMPTS = 3


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name, "")
    if not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got '{value}'")


class Settings:
    """Application settings - read once at import, patchable in tests"""

    def __init__(self):
        # Environment
        self.environment = os.getenv("ENVIRONMENT", "development")
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid LOG_LEVEL '{self.log_level}'")

        # Server configuration
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = _get_int("PORT", 8000)

        # Database configuration (any async SQLAlchemy URL)
        self.database_url = os.getenv(
            "DATABASE_URL",
            "sqlite+aiosqlite:///./openversion.db"
        )

        # Optimistic concurrency retry bound for compute-next-version
        self.compute_max_attempts = _get_int("COMPUTE_MAX_ATTEMPTS", DEFAULT_COMPUTE_MAX_ATTEMPTS)
        if self.compute_max_attempts < 1:
            raise ValueError(
                f"COMPUTE_MAX_ATTEMPTS must be >= 1, got {self.compute_max_attempts}"
            )

        # Personal access token guard for the version endpoints
        # Enforced only when enabled AND a token is configured
        self.api_auth_enabled = _get_bool("API_AUTH_ENABLED", True)
        self.api_token = os.getenv("API_TOKEN", "")
        self.api_auth_enforce_in_development = _get_bool("API_AUTH_ENFORCE_IN_DEVELOPMENT", False)

        if self.is_production and self.api_auth_enabled and not self.api_token:
            raise ValueError(
                "API_TOKEN is required in production while API_AUTH_ENABLED is true. "
                "Set API_TOKEN or explicitly disable the guard with API_AUTH_ENABLED=false."
            )

        if not self.is_production and self.api_auth_enabled and self.api_token \
                and not self.api_auth_enforce_in_development:
            logger.warning(
                "⚠️  API_TOKEN is set but not enforced in development. "
                "Set API_AUTH_ENFORCE_IN_DEVELOPMENT=true to require it locally."
            )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


# Global settings instance
settings = Settings()
