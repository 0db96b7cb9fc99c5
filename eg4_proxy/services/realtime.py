"""
Realtime telemetry and raw settings reads for the selected inverter.

build_snapshot() is a pure function that renames the vendor runtime and
energy fields into RealtimeSnapshot and rescales the deci-volt and
centi-hertz values to natural units. read_realtime() and read_settings()
issue their two upstream requests concurrently and need both to succeed.

CHANGELOG:
- 2026-10-16: Coerce loosely typed numbers and texts; report reshaping
  failures as UpstreamError
- 2026-10-15: Clamp derived consumption at zero
- 2026-10-15: Initial creation

TODO:
- None
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any

from pydantic import ValidationError

from eg4_proxy.client import Eg4Client, UpstreamError
from eg4_proxy.models import RealtimeSnapshot

logger = logging.getLogger(__name__)

RUNTIME_PATH = "/api/inverter/getInverterRuntime"
ENERGY_PATH = "/api/inverter/getInverterEnergyInfo"
SYSTEM_CONFIG_PATH = "/api/inverter/getSystemConfigInfo"

VOLT_SCALE = 10
FREQ_SCALE = 100


def _num(data: dict[str, Any], key: str) -> float:
    """Numeric field; absent, null, non-numeric or non-finite values read as 0.

    The vendor sends some powers as JSON numbers and some as numeric strings.
    """
    value = data.get(key)
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    return number if math.isfinite(number) else 0


def _text(data: dict[str, Any], key: str, default: str | None) -> str | None:
    """Display field as a string; absent, null or empty values read as *default*."""
    value = data.get(key)
    if value is None or value == "":
        return default
    return str(value)


def compute_consumption(
    solar: float,
    grid_import: float,
    battery_discharge: float,
    grid_export: float,
    battery_charge: float,
) -> float:
    """House load from the power balance, never negative.

    Measurement noise can make the balance dip below zero; that reads as 0.
    """
    return max(0, solar + grid_import + battery_discharge - grid_export - battery_charge)


def build_snapshot(runtime: dict[str, Any], energy: dict[str, Any]) -> RealtimeSnapshot:
    """Reshape vendor runtime and energy-today payloads.

    Args:
        runtime: Body of ``getInverterRuntime``.
        energy: Body of ``getInverterEnergyInfo``.

    Returns:
        RealtimeSnapshot with powers in W, voltages in V and frequency in Hz.
    """
    solar = _num(runtime, "ppv")
    charging = _num(runtime, "pCharge")
    discharging = _num(runtime, "pDisCharge")
    grid_import = _num(runtime, "pToUser")
    grid_export = _num(runtime, "pToGrid")

    return RealtimeSnapshot(
        solar_power=solar,
        battery_power=_num(runtime, "batPower"),
        battery_charging=charging,
        battery_discharging=discharging,
        grid_import=grid_import,
        grid_export=grid_export,
        consumption_power=compute_consumption(
            solar, grid_import, discharging, grid_export, charging
        ),
        inverter_power=_num(runtime, "pinv"),
        eps_power=_num(runtime, "peps"),
        pv1_power=_num(runtime, "ppv1"),
        pv2_power=_num(runtime, "ppv2"),
        pv3_power=_num(runtime, "ppv3"),
        pv1_voltage=_num(runtime, "vpv1") / VOLT_SCALE,
        pv2_voltage=_num(runtime, "vpv2") / VOLT_SCALE,
        pv3_voltage=_num(runtime, "vpv3") / VOLT_SCALE,
        soc=_num(runtime, "soc"),
        battery_voltage=_num(runtime, "vBat") / VOLT_SCALE,
        battery_temp=_num(runtime, "tBat"),
        grid_voltage=_num(runtime, "vacr") / VOLT_SCALE,
        grid_frequency=_num(runtime, "fac") / FREQ_SCALE,
        status_text=_text(runtime, "statusText", "unknown"),
        device_time=_text(runtime, "deviceTime", None),
        lost=bool(runtime.get("lost")),
        has_runtime_data=bool(runtime.get("hasRuntimeData")),
        work_mode_text=_text(runtime, "workModeText", None),
        today_solar_yield=_text(energy, "todayYieldingText", "0"),
        today_battery_discharge=_text(energy, "todayDischargingText", "0"),
        today_battery_charge=_text(energy, "todayChargingText", "0"),
        today_grid_import=_text(energy, "todayImportText", "0"),
        today_grid_export=_text(energy, "todayExportText", "0"),
        today_consumption=_text(energy, "todayUsageText", "0"),
        bms_charge=runtime.get("bmsCharge"),
        bms_discharge=runtime.get("bmsDischarge"),
        bms_force_charge=runtime.get("bmsForceCharge"),
        max_charge_current=_num(runtime, "maxChgCurrValue"),
        max_discharge_current=_num(runtime, "maxDischgCurrValue"),
    )


def _as_dict(body: Any) -> dict[str, Any]:
    return body if isinstance(body, dict) else {}


async def read_realtime(
    client: Eg4Client, serial_num: str, cookie: str
) -> RealtimeSnapshot:
    """Fetch runtime and energy-today concurrently and build the snapshot.

    Raises:
        UpstreamError: Either request failed, or the bodies could not be
            reshaped into a snapshot.
    """
    form = {"serialNum": serial_num}
    runtime, energy = await asyncio.gather(
        client.post_form(RUNTIME_PATH, form, cookie),
        client.post_form(ENERGY_PATH, form, cookie),
    )
    try:
        return build_snapshot(_as_dict(runtime), _as_dict(energy))
    except (ValidationError, TypeError, ValueError) as exc:
        logger.warning("Unusable realtime data for %s: %s", serial_num, exc)
        raise UpstreamError(f"Unexpected realtime data from EG4: {exc}") from exc


async def read_settings(
    client: Eg4Client, serial_num: str, cookie: str
) -> dict[str, Any]:
    """Fetch raw runtime and system config concurrently.

    Returns:
        ``{"success": True, "runtime": ..., "config": ...}`` with the
        ``data`` member of each upstream response.
    """
    params = {"serialNum": serial_num}
    runtime, config = await asyncio.gather(
        client.get_json(RUNTIME_PATH, params, cookie),
        client.get_json(SYSTEM_CONFIG_PATH, params, cookie),
    )
    return {
        "success": True,
        "runtime": _as_dict(runtime).get("data"),
        "config": _as_dict(config).get("data"),
    }
