"""
Unprefixed status routes: GET / and GET /health.

GET / reports that the proxy is running together with the session state,
for quick checks from a browser. GET /health answers ``{"status": "ok"}``
without looking at the session or the upstream API, for Docker
HEALTHCHECK and process supervisors.

CHANGELOG:
- 2026-10-15: Move the root banner next to the health check
- 2026-10-12: Initial creation

TODO:
- None
"""

from fastapi import APIRouter

from eg4_proxy.api.deps import AnySession

router = APIRouter(tags=["status"])


@router.get("/")
async def root(session: AnySession) -> dict:
    """Running banner plus whether a usable session and device exist."""
    return {
        "status": "EG4 Proxy Server running",
        "connected": session.is_valid(),
        "serialNum": session.serial_num,
    }


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
