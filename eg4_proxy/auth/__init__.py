"""
Session package.

Exports the SessionContext holder and the FastAPI dependencies that gate
routes on a valid upstream session and a selected inverter.

CHANGELOG:
- 2026-10-12: Initial creation

TODO:
- None
"""

from eg4_proxy.auth.session import (
    SessionContext,
    get_session,
    require_device,
    require_session,
)

__all__ = ["SessionContext", "get_session", "require_device", "require_session"]
