"""
Application settings and configuration management.

Uses pydantic-settings for environment variable loading.
"""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "MockInterview Proctor"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Databricks AI Gateway (for Gemini models)
    databricks_host: str = ""
    databricks_token: str = ""

    # Model endpoints
    gemini_pro_endpoint: str = "/serving-endpoints/databricks-gemini-3-pro/invocations"
    gemini_flash_endpoint: str = "/serving-endpoints/databricks-gemini-flash/invocations"
    llm_timeout_seconds: float = 60.0

    # Interview settings
    question_count: int = Field(default=5, ge=1, le=20)

    # Sampling cadence (seconds)
    snapshot_interval_seconds: float = 5.0
    loudness_interval_seconds: float = 2.0
    gaze_interval_seconds: float = 4.0
    autosave_interval_seconds: float = 60.0
    timer_tick_seconds: float = 1.0
    # Frames pushed by the browser older than this are treated as missing
    frame_max_age_seconds: float = 2.0

    # Malpractice policy
    loud_noise_threshold: float = 85.0
    gaze_window_size: int = 4
    gaze_alert_threshold: int = 3
    malpractice_penalty: float = 0.8

    # Transient feedback
    alert_display_seconds: float = 5.0
    coaching_display_seconds: float = 4.0

    # Persistence
    data_dir: str = "./_data"

    # CORS - stored as comma-separated string in env
    # Uses validation_alias to read from CORS_ORIGINS env var
    cors_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
