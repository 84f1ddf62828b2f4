import logging
from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_config_logger = logging.getLogger(__name__)

_PROJECT_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _PROJECT_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Invoice Intake API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:3000"]

    # File upload & storage
    upload_dir: str = "uploads"

    # Simulated processing — delay is drawn uniformly from [min, max) seconds
    processing_min_delay_seconds: float = 15.0
    processing_max_delay_seconds: float = 45.0
    processing_success_rate: float = 0.8

    # Placeholder business data for new uploads
    client_names: list[str] = [
        "Acme Corp",
        "TechStart Inc",
        "Global Solutions",
        "Blue Ocean Ltd",
        "Metro Dynamics",
    ]
    amount_min: int = 500
    amount_max: int = 10_500

    # List view
    default_page_limit: int = 10
    status_poll_interval_seconds: float = 3.0

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore — polling client
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_pipeline: str = "INFO"         # Intake + processing pipeline
    log_level_events: str = "WARNING"        # SSE broadcaster

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        """Keep the processing delay window well-formed."""
        if self.processing_max_delay_seconds < self.processing_min_delay_seconds:
            _config_logger.warning(
                "processing_max_delay_seconds (%s) < processing_min_delay_seconds (%s); using min for both",
                self.processing_max_delay_seconds,
                self.processing_min_delay_seconds,
            )
            object.__setattr__(
                self, "processing_max_delay_seconds", self.processing_min_delay_seconds
            )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
