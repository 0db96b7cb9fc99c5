"""
Entrypoint for the EG4 session proxy.

Configures structured JSON logging, loads ProxySettings from the environment,
logs a config summary and serves the FastAPI app with uvicorn.

CHANGELOG:
- 2026-10-12: Initial creation

TODO:
- None
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime

import uvicorn

from eg4_proxy.api.main import create_app
from eg4_proxy.config import ProxySettings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Structured JSON logging setup
# ---------------------------------------------------------------------------


class JsonFormatter(logging.Formatter):
    """Minimal JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


def configure_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging on the root logger.

    Sets up a single JSON-formatted handler writing to stderr. Uvicorn's own
    loggers propagate to it because the server is started with
    ``log_config=None``.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def log_config_summary(settings: ProxySettings) -> None:
    """Log the effective configuration at startup."""
    logger.info(
        "EG4 proxy starting with config: "
        "eg4_base_url=%s, host=%s, port=%s, api_prefix=%s, "
        "session_timeout_s=%s, plant_page_rows=%s, inverter_page_rows=%s, "
        "register_point_count=%s, cors_origins=%s",
        settings.eg4_base_url,
        settings.host,
        settings.port,
        settings.api_prefix,
        settings.session_timeout_s,
        settings.plant_page_rows,
        settings.inverter_page_rows,
        settings.register_point_count,
        settings.cors_origins,
    )


def main() -> None:
    """Synchronous entrypoint for the proxy server."""
    settings = ProxySettings()
    configure_logging(settings.log_level)
    log_config_summary(settings)

    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
