"""
Inverter routes for the selected device.

GET /working-modes and GET /read-settings need a valid session and a
selected inverter. The four POST /set-* routes need a valid session and
relay the upstream answer verbatim.

CHANGELOG:
- 2026-10-14: Add GET /working-modes
- 2026-10-13: Initial creation

TODO:
- None
"""

import logging
from typing import Any

from fastapi import APIRouter, Request

from eg4_proxy.api.deps import (
    AuthedSession,
    ClientDep,
    DeviceSession,
    SettingsDep,
    read_body,
)
from eg4_proxy.auth.session import SessionContext
from eg4_proxy.client import Eg4Client
from eg4_proxy.services.realtime import read_settings
from eg4_proxy.services.schedule import read_working_modes
from eg4_proxy.services.settings_writer import (
    SET_AC_CHARGE_PATH,
    SET_BATTERY_SETTINGS_PATH,
    SET_PEAK_SHAVING_PATH,
    SET_WORKING_MODE_PATH,
    forward_setting,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["inverter"])


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


@router.get("/working-modes")
async def working_modes(
    session: DeviceSession,
    client: ClientDep,
    settings: SettingsDep,
) -> dict:
    """Return the reconstructed daily working-mode schedule.

    Returns:
        dict: WorkingModes serialised in camelCase.
    """
    modes = await read_working_modes(
        client,
        session.serial_num,
        session.credential,
        point_count=settings.register_point_count,
    )
    return modes.model_dump(by_alias=True)


@router.get("/read-settings")
async def read_settings_route(session: DeviceSession, client: ClientDep) -> dict:
    """Return raw runtime data and system configuration of the inverter."""
    return await read_settings(client, session.serial_num, session.credential)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


async def _forward(
    request: Request, session: SessionContext, client: Eg4Client, path: str
) -> Any:
    payload = await read_body(request)
    return await forward_setting(
        client, path, payload, session.serial_num, session.credential
    )


@router.post("/set-working-mode")
async def set_working_mode(
    request: Request, session: AuthedSession, client: ClientDep
) -> Any:
    """Relay a working-mode change."""
    return await _forward(request, session, client, SET_WORKING_MODE_PATH)


@router.post("/set-ac-charge")
async def set_ac_charge(
    request: Request, session: AuthedSession, client: ClientDep
) -> Any:
    """Relay an AC charge window change."""
    return await _forward(request, session, client, SET_AC_CHARGE_PATH)


@router.post("/set-peak-shaving")
async def set_peak_shaving(
    request: Request, session: AuthedSession, client: ClientDep
) -> Any:
    """Relay a peak-shaving change."""
    return await _forward(request, session, client, SET_PEAK_SHAVING_PATH)


@router.post("/set-battery-settings")
async def set_battery_settings(
    request: Request, session: AuthedSession, client: ClientDep
) -> Any:
    """Relay a battery threshold change."""
    return await _forward(request, session, client, SET_BATTERY_SETTINGS_PATH)
