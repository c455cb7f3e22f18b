"""Configuration management for URL shortener."""

from typing import FrozenSet, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Config(BaseSettings):
    """Application configuration."""

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=5000,
        description="Port to listen on"
    )

    # URL shortener settings
    base_url: str = Field(
        default="http://localhost:5000",
        description="Base URL for short links when the request carries no host"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short URLs (e.g., '/s' for /s/abc123)"
    )

    short_code_length: int = Field(
        default=6,
        ge=3,
        le=10,
        description="Length of generated short codes"
    )

    default_validity_minutes: int = Field(
        default=30,
        ge=1,
        description="Validity window applied when a request omits one"
    )

    max_collision_retries: int = Field(
        default=1000,
        ge=1,
        description="Maximum attempts when generating a free short code"
    )

    enable_custom_codes: bool = Field(
        default=True,
        description="Allow users to provide custom short codes"
    )

    reserved_shortcodes: str = Field(
        default="health,shorturls",
        description="Comma-separated codes that collide with service routes"
    )

    # Expiry sweeper
    sweep_interval_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Seconds between sweeps of expired URLs"
    )

    # Geolocation
    geo_seed: Optional[int] = Field(
        default=None,
        description="Seed for the simulated location resolver"
    )

    # Logging settings
    service_name: str = Field(
        default="url-shortener",
        description="Service name reported in logs and health checks"
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    @property
    def reserved_shortcode_set(self) -> FrozenSet[str]:
        return frozenset(
            code.strip() for code in self.reserved_shortcodes.split(",") if code.strip()
        )


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
