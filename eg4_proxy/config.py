"""
Proxy configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
Every value has a default so the proxy starts with no environment at all;
credentials are never configured here, they arrive with each login call.

CHANGELOG:
- 2026-10-14: Add page sizes and register point count for upstream reads
- 2026-10-12: Initial creation

TODO:
- None
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_EG4_BASE_URL = "https://monitor.eg4electronics.com/WManage"


class ProxySettings(BaseSettings):
    """EG4 session proxy configuration.

    Attributes:
        eg4_base_url: Base URL of the EG4 monitoring web API.
        host: Interface the HTTP server binds to.
        port: TCP port the HTTP server listens on (default 3002).
        api_prefix: Path prefix for the proxy routes.
        session_timeout_s: Seconds after login before the upstream
            session cookie is considered expired (default 30 minutes).
        plant_page_rows: Page size for the plant listing request.
        inverter_page_rows: Page size for each per-plant inverter listing.
        register_point_count: Registers fetched per remote-read batch.
        cors_origins: Origins allowed by the CORS middleware.
        log_level: Root logger level name.
    """

    eg4_base_url: str = DEFAULT_EG4_BASE_URL
    host: str = "0.0.0.0"
    port: int = 3002
    api_prefix: str = "/api/eg4"
    session_timeout_s: int = 30 * 60
    plant_page_rows: int = 100
    inverter_page_rows: int = 50
    register_point_count: int = 127
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"

    @field_validator("eg4_base_url")
    @classmethod
    def eg4_base_url_must_be_http(cls, v: str) -> str:
        """Validate the upstream URL scheme and drop any trailing slash."""
        if not v.lower().startswith(("https://", "http://")):
            raise ValueError(
                f"EG4_BASE_URL must be an http(s) URL (got: '{v[:20]}...')"
            )
        return v.rstrip("/")

    @field_validator("port")
    @classmethod
    def port_must_be_valid(cls, v: int) -> int:
        """Validate TCP port is in valid range."""
        if v < 1 or v > 65535:
            raise ValueError("PORT must be between 1 and 65535")
        return v

    @field_validator("api_prefix")
    @classmethod
    def api_prefix_must_be_absolute(cls, v: str) -> str:
        """Validate the route prefix is an absolute path without trailing slash."""
        if not v.startswith("/"):
            raise ValueError("API_PREFIX must start with '/'")
        return v.rstrip("/")

    @field_validator(
        "session_timeout_s",
        "plant_page_rows",
        "inverter_page_rows",
        "register_point_count",
    )
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        """Validate counts and durations are strictly positive."""
        if v < 1:
            raise ValueError("value must be >= 1")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        """Normalise the log level name and reject unknown levels."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"LOG_LEVEL must be a standard level name (got: '{v}')")
        return level

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}
