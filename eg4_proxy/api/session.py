"""
Session routes: login, station selection and connection status.

POST /login authenticates against EG4, stores the session cookie and returns
the freshly listed stations. POST /select-station records the inverter used
by every device-scoped route. GET /status reports the session state.

CHANGELOG:
- 2026-10-13: Prefix upstream failures during login with "Login failed"
- 2026-10-12: Initial creation

TODO:
- None
"""

import logging

from fastapi import APIRouter, HTTPException, Request

from eg4_proxy.api.deps import AnySession, ClientDep, SettingsDep, read_body
from eg4_proxy.client import UpstreamError
from eg4_proxy.services.stations import list_stations

logger = logging.getLogger(__name__)

router = APIRouter(tags=["session"])


@router.post("/login")
async def login(
    request: Request,
    session: AnySession,
    client: ClientDep,
    settings: SettingsDep,
) -> dict:
    """Log in to EG4 and list the stations visible to the account.

    Returns:
        dict: ``{"success": True, "stations": [...]}``.

    Raises:
        HTTPException: 400 if account or password is missing.
        AuthError: upstream set no session cookie (rendered as 401).
        UpstreamError: network or listing failure (rendered as 500).
    """
    body = await read_body(request)
    account = body.get("account")
    password = body.get("password")
    if not account or not password:
        raise HTTPException(status_code=400, detail="Account and password required")

    try:
        cookie = await client.login(str(account), str(password))
        session.start(cookie)
        logger.info("EG4 login successful")
        stations = await list_stations(
            client,
            cookie,
            plant_rows=settings.plant_page_rows,
            inverter_rows=settings.inverter_page_rows,
        )
    except UpstreamError as exc:
        logger.error("Login error: %s", exc)
        raise UpstreamError(f"Login failed: {exc}") from exc

    return {
        "success": True,
        "stations": [station.model_dump(by_alias=True) for station in stations],
    }


@router.post("/select-station")
async def select_station(request: Request, session: AnySession) -> dict:
    """Select the inverter targeted by device-scoped routes.

    The serial number is trusted as given; it is not checked against the
    station list.

    Raises:
        HTTPException: 400 if serialNum is missing.
    """
    body = await read_body(request)
    serial_num = body.get("serialNum")
    if not serial_num:
        raise HTTPException(status_code=400, detail="serialNum required")

    session.select_device(str(serial_num))
    return {"success": True, "serialNum": session.serial_num}


@router.get("/status")
async def status(session: AnySession) -> dict:
    """Report whether the upstream session is usable."""
    return {
        "connected": session.is_valid(),
        "serialNum": session.serial_num,
        "lastLogin": session.last_login_iso(),
    }
