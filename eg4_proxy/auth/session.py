"""
Upstream session state for the EG4 proxy.

Holds the single EG4 session cookie, the time it was acquired, and the
serial number of the currently selected inverter. One SessionContext lives
on ``app.state.session`` for the lifetime of the process; route handlers
reach it through FastAPI dependencies.

There is no locking: all mutations are synchronous and run on the event
loop, so concurrent logins simply overwrite each other (last writer wins).

CHANGELOG:
- 2026-10-16: Report lastLogin as millisecond UTC with a Z suffix
- 2026-10-13: Inject clock so the timeout boundary is testable
- 2026-10-12: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TIMEOUT = timedelta(minutes=30)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class SessionContext:
    """In-memory EG4 session plus the selected device.

    Args:
        timeout: How long a session cookie stays usable after login.
        clock: Zero-argument callable returning an aware ``datetime``.
            Defaults to the UTC wall clock.
    """

    def __init__(
        self,
        timeout: timedelta = DEFAULT_SESSION_TIMEOUT,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.timeout = timeout
        self._clock = clock
        self.credential: str | None = None
        self.acquired_at: datetime | None = None
        self.serial_num: str | None = None

    def start(self, credential: str) -> None:
        """Store a freshly acquired session cookie, replacing any previous one."""
        self.credential = credential
        self.acquired_at = self._clock()
        logger.info("EG4 session started at %s", self.acquired_at.isoformat())

    def is_valid(self) -> bool:
        """Return True while a cookie is held and younger than the timeout."""
        if not self.credential or self.acquired_at is None:
            return False
        return self._clock() - self.acquired_at < self.timeout

    def select_device(self, serial_num: str) -> None:
        """Remember the inverter targeted by device-scoped operations."""
        self.serial_num = serial_num
        logger.info("Selected inverter %s", serial_num)

    def last_login_iso(self) -> str | None:
        """UTC login time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``, or None before any login."""
        if self.acquired_at is None:
            return None
        stamp = self.acquired_at.astimezone(UTC).isoformat(timespec="milliseconds")
        return stamp.replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------


def get_session(request: Request) -> SessionContext:
    """Return the process-wide SessionContext stored on app.state."""
    return request.app.state.session


def require_session(request: Request) -> SessionContext:
    """Gate a route on a valid upstream session.

    Raises:
        HTTPException: 401 if no session exists or it has expired.
    """
    session = get_session(request)
    if not session.is_valid():
        raise HTTPException(status_code=401, detail="Not authenticated")
    return session


def require_device(request: Request) -> SessionContext:
    """Gate a route on a valid session and a selected inverter.

    Raises:
        HTTPException: 401 if the session is missing or expired.
        HTTPException: 400 if no station has been selected.
    """
    session = require_session(request)
    if not session.serial_num:
        raise HTTPException(status_code=400, detail="No station selected")
    return session
