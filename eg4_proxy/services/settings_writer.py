"""
Settings writer: relay configuration changes to the EG4 API.

Payloads are forwarded untouched apart from ``serialNum``, which is always
set to the selected inverter so a caller cannot target another device. The
upstream answer, success or rejection, is returned verbatim.

CHANGELOG:
- 2026-10-13: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from typing import Any

from eg4_proxy.client import Eg4Client

logger = logging.getLogger(__name__)

SET_WORKING_MODE_PATH = "/api/inverter/setWorkingMode"
SET_AC_CHARGE_PATH = "/api/inverter/setAcChargeConfig"
SET_PEAK_SHAVING_PATH = "/api/inverter/setPeakShavingConfig"
SET_BATTERY_SETTINGS_PATH = "/api/inverter/setBatteryConfig"


def with_device(payload: dict[str, Any], serial_num: str | None) -> dict[str, Any]:
    """Copy *payload* with ``serialNum`` overridden by the selected device."""
    return {**payload, "serialNum": serial_num}


async def forward_setting(
    client: Eg4Client,
    path: str,
    payload: dict[str, Any],
    serial_num: str | None,
    cookie: str,
) -> Any:
    """POST a settings change upstream and return the decoded response.

    Args:
        client: Upstream client.
        path: One of the ``SET_*_PATH`` upstream paths.
        payload: Caller-supplied body, not validated here.
        serial_num: Selected inverter serial number.
        cookie: Session cookie.
    """
    logger.info("Forwarding %s for %s", path, serial_num)
    return await client.post_json(path, with_device(payload, serial_num), cookie)
