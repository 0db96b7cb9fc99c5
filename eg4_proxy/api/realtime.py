"""
GET /realtime endpoint for live telemetry of the selected inverter.

Unlike the other device routes this one is soft-gated: without a valid
session or a selected inverter it answers HTTP 200 with
``{"success": false, "error": ...}`` so polling dashboards can show a
disconnected state without treating it as a failure.

CHANGELOG:
- 2026-10-15: Initial creation

TODO:
- None
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from eg4_proxy.api.deps import AnySession, ClientDep
from eg4_proxy.client import Eg4Error
from eg4_proxy.services.realtime import read_realtime

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.get("/realtime", response_model=None)
async def realtime(session: AnySession, client: ClientDep) -> dict | JSONResponse:
    """Return live power, battery, grid and energy-today values.

    Returns:
        dict: RealtimeSnapshot serialised in camelCase, or a soft failure
        object when not connected.
        JSONResponse: 500 with ``{"success": false, "error": ...}`` when the
        upstream read fails.
    """
    if not session.is_valid() or not session.serial_num:
        return {"success": False, "error": "Not connected to EG4"}

    try:
        snapshot = await read_realtime(client, session.serial_num, session.credential)
    except Eg4Error as exc:
        logger.error("Realtime read failed for %s: %s", session.serial_num, exc)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": str(exc)},
        )

    return snapshot.model_dump(by_alias=True)
