"""
Core Configuration Module
Uses pydantic-settings for environment variable management.
Simulation tuning lives in src/modules/garden/constants.py, not here.
"""
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    project_name: str = "Garden Telemetry"
    environment: str = Field(default="development", description="development | staging | production")
    debug: bool = Field(default=False, description="Enable debug mode")
    app_version: str = Field(default="1.0.0", description="Application version")

    # Server
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8080, description="HTTP port (PORT env variable)")

    # Simulation
    simulation_tick_seconds: float = Field(default=1.0, description="Wall-clock seconds per simulated tick")

    # Prometheus
    metrics_prefix: str = Field(default="garden", description="Namespace for process-level metrics")
    process_metrics_enabled: bool = Field(default=True, description="Expose process/platform/GC metrics")

    # CORS
    cors_origins: str = Field(default="*", description="Allowed CORS origins, comma-separated")

    # Sentry (Error Tracking)
    sentry_dsn: str = Field(default="", description="Sentry DSN for error tracking")
    sentry_traces_sample_rate: float = Field(default=0.1, description="Sentry traces sample rate")

    @field_validator("simulation_tick_seconds")
    @classmethod
    def _tick_must_be_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("simulation_tick_seconds must be positive")
        return value

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from a comma-separated string."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
