"""
Pydantic models for the proxy's reshaped EG4 data.

Field names are snake_case in Python and serialised in camelCase, the shape
the proxy's callers consume (``serialNum``, ``peakShavingEnabled`` ...).
Always dump with ``by_alias=True`` when building a response body.

CHANGELOG:
- 2026-10-15: Add RealtimeSnapshot
- 2026-10-14: Add schedule and battery settings models
- 2026-10-12: Initial creation

TODO:
- None
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialising field names in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Station(CamelModel):
    """One inverter inside one EG4 plant, flattened for station pickers.

    Attributes:
        name: Display label ``"<plant> — <device type> (<serial>)"``.
        plant_name: Plant (site) name.
        plant_id: EG4 plant identifier.
        serial_num: Inverter serial number, used by ``select-station``.
        device_type: Human-readable inverter model.
        status: Vendor status text for the inverter.
        address: Plant address, empty when the plant has none.
    """

    name: str
    plant_name: str | None = None
    plant_id: Any = None
    serial_num: str
    device_type: str | None = None
    status: str | None = None
    address: str = ""


class TimeSlot(CamelModel):
    """A configured ``[start, end)`` window as ``HH:MM`` strings."""

    start: str
    end: str


class ModeSegment(CamelModel):
    """A working mode active over one window of the daily schedule."""

    mode_name: str
    start: str
    end: str


class BatterySettings(CamelModel):
    """Battery thresholds read alongside the working-mode registers."""

    ac_charge_start_soc: int = 0
    ac_charge_end_soc: int = 0
    ac_charge_start_voltage: float = 0.0
    ac_charge_end_voltage: float = 0.0
    peak_shaving_power1: float = 0.0
    peak_shaving_soc1: int = 0
    peak_shaving_power2: float = 0.0
    peak_shaving_soc2: int = 0


class WorkingModes(CamelModel):
    """Reconstructed daily schedule plus the raw per-family slot lists."""

    success: bool = True
    schedule: list[ModeSegment]
    ac_charge: list[TimeSlot]
    peak_shaving: list[TimeSlot]
    peak_shaving_enabled: bool
    forced_charge: list[TimeSlot]
    forced_charge_enabled: bool
    forced_discharge: list[TimeSlot]
    forced_discharge_enabled: bool
    battery_settings: BatterySettings
    firmware: str | None = None
    device_time: str | None = None


class RealtimeSnapshot(CamelModel):
    """Live inverter telemetry rescaled to natural units.

    Power values are watts, voltages volts, frequency hertz. The ``today*``
    energy totals are the vendor's preformatted display strings.
    """

    success: bool = True

    solar_power: float = 0
    battery_power: float = 0
    battery_charging: float = 0
    battery_discharging: float = 0
    grid_import: float = 0
    grid_export: float = 0
    consumption_power: float = 0
    inverter_power: float = 0
    eps_power: float = 0

    pv1_power: float = 0
    pv2_power: float = 0
    pv3_power: float = 0
    pv1_voltage: float = 0
    pv2_voltage: float = 0
    pv3_voltage: float = 0

    soc: float = 0
    battery_voltage: float = 0
    battery_temp: float = 0

    grid_voltage: float = 0
    grid_frequency: float = 0

    status_text: str = "unknown"
    device_time: str | None = None
    lost: bool = False
    has_runtime_data: bool = False
    work_mode_text: str | None = None

    today_solar_yield: str = "0"
    today_battery_discharge: str = "0"
    today_battery_charge: str = "0"
    today_grid_import: str = "0"
    today_grid_export: str = "0"
    today_consumption: str = "0"

    bms_charge: Any = None
    bms_discharge: Any = None
    bms_force_charge: Any = None
    max_charge_current: float = 0
    max_discharge_current: float = 0
