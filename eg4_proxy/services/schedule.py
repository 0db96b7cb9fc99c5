"""
Working-mode schedule reconstruction from EG4 holding-register fields.

The inverter stores its time-of-use configuration as independent slot
registers per mode family (three AC charge windows, two peak-shaving
windows, two forced-charge and two forced-discharge windows), each slot
being four fields: start hour, start minute, end hour, end minute. A slot
whose start equals its end is the vendor's way of saying "unused".

reconstruct_working_modes() turns that flat register bag into:
- the kept (non-degenerate) slots of each family,
- a single day schedule: enabled slots of all families sorted by start time,
  with "Self Consumption" filling every uncovered stretch of the day,
- the battery thresholds and firmware/clock strings read in the same batches.

Overlapping windows are passed through as-is. The gap fill assumes sorted,
non-overlapping input; when two enabled windows overlap, both appear in the
schedule and no filler is inserted between them. Callers relying on a strict
partition of the day must detect overlaps themselves.

CHANGELOG:
- 2026-10-15: Record absent register fields via RegisterFields
- 2026-10-14: Initial creation

TODO:
- Decide with the dashboard owners whether overlapping enabled windows
  should be clipped or reported as an error instead of passed through.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from eg4_proxy.client import Eg4Client
from eg4_proxy.models import BatterySettings, ModeSegment, TimeSlot, WorkingModes
from eg4_proxy.services.registers import RegisterFields, merge_batches

logger = logging.getLogger(__name__)

SELF_CONSUMPTION = "Self Consumption"
DAY_START = "00:00"
DAY_END = "24:00"


# ---------------------------------------------------------------------------
# Mode family definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ModeFamily:
    """Register layout of one time-windowed working mode.

    Attributes:
        mode_name: Name emitted in the schedule.
        prefix: Common prefix of the slot fields, e.g. ``HOLD_AC_CHARGE_``.
        slot_count: Number of configurable windows.
        enable_flag: Function-enable field gating the family, or None when
            the family is always active.
    """

    mode_name: str
    prefix: str
    slot_count: int
    enable_flag: str | None = None


AC_CHARGE = ModeFamily("AC Charge", "HOLD_AC_CHARGE_", 3)
PEAK_SHAVING = ModeFamily(
    "Peak Shaving", "HOLD_PEAK_SHAVING_", 2, "FUNC_GRID_PEAK_SHAVING"
)
FORCED_CHARGE = ModeFamily(
    "Forced Charge", "HOLD_FORCED_CHARGE_", 2, "FUNC_FORCED_CHG_EN"
)
FORCED_DISCHARGE = ModeFamily(
    "Forced Discharge", "HOLD_FORCED_DISCHARGE_", 2, "FUNC_FORCED_DISCHG_EN"
)

MODE_FAMILIES: tuple[ModeFamily, ...] = (
    AC_CHARGE,
    PEAK_SHAVING,
    FORCED_CHARGE,
    FORCED_DISCHARGE,
)


def slot_suffix(index: int) -> str:
    """Field-name suffix of slot *index*: none for the first, ``_N`` after."""
    return "" if index == 0 else f"_{index}"


def format_hhmm(hour: int, minute: int) -> str:
    """Render an hour/minute pair as zero-padded ``HH:MM``."""
    return f"{hour:02d}:{minute:02d}"


# ---------------------------------------------------------------------------
# Slot extraction
# ---------------------------------------------------------------------------


def extract_slots(fields: RegisterFields, family: ModeFamily) -> list[TimeSlot]:
    """Return the non-degenerate windows configured for *family*.

    Missing or unparseable hour/minute fields count as 0, so a slot whose
    fields are all absent collapses to 00:00-00:00 and is dropped.
    """
    slots: list[TimeSlot] = []
    for index in range(family.slot_count):
        suffix = slot_suffix(index)
        start_hour = fields.integer(f"{family.prefix}START_HOUR{suffix}")
        start_minute = fields.integer(f"{family.prefix}START_MINUTE{suffix}")
        end_hour = fields.integer(f"{family.prefix}END_HOUR{suffix}")
        end_minute = fields.integer(f"{family.prefix}END_MINUTE{suffix}")

        if (start_hour, start_minute) == (end_hour, end_minute):
            continue

        slots.append(
            TimeSlot(
                start=format_hhmm(start_hour, start_minute),
                end=format_hhmm(end_hour, end_minute),
            )
        )
    return slots


def family_enabled(fields: RegisterFields, family: ModeFamily) -> bool:
    """Whether *family* contributes to the schedule."""
    if family.enable_flag is None:
        return True
    return fields.flag(family.enable_flag)


# ---------------------------------------------------------------------------
# Merge and gap fill
# ---------------------------------------------------------------------------


def fill_gaps(segments: list[ModeSegment]) -> list[ModeSegment]:
    """Sort *segments* by start and pad uncovered time with Self Consumption.

    Start times compare as strings, which orders correctly because every
    value is fixed-width ``HH:MM``. The sort is stable, so windows sharing a
    start time keep their family order.

    The cursor always moves to the end of the last emitted segment, even if
    that end is earlier than the cursor (overlap or a window wrapping past
    midnight). A segment starting at or before the cursor never triggers a
    filler.
    """
    if not segments:
        return [ModeSegment(mode_name=SELF_CONSUMPTION, start=DAY_START, end=DAY_END)]

    ordered = sorted(segments, key=lambda seg: seg.start)
    schedule: list[ModeSegment] = []
    cursor = DAY_START

    for segment in ordered:
        if segment.start > cursor:
            schedule.append(
                ModeSegment(mode_name=SELF_CONSUMPTION, start=cursor, end=segment.start)
            )
        schedule.append(segment)
        cursor = segment.end

    if cursor < DAY_END and cursor != DAY_START:
        schedule.append(
            ModeSegment(mode_name=SELF_CONSUMPTION, start=cursor, end=DAY_END)
        )

    return schedule


# ---------------------------------------------------------------------------
# Battery settings
# ---------------------------------------------------------------------------


def read_battery_settings(fields: RegisterFields) -> BatterySettings:
    """Collect AC-charge and peak-shaving battery thresholds."""
    return BatterySettings(
        ac_charge_start_soc=fields.integer("HOLD_AC_CHARGE_START_BATTERY_SOC"),
        ac_charge_end_soc=fields.integer("HOLD_AC_CHARGE_SOC_LIMIT"),
        ac_charge_start_voltage=fields.number("HOLD_AC_CHARGE_START_BATTERY_VOLTAGE"),
        ac_charge_end_voltage=fields.number("HOLD_AC_CHARGE_END_BATTERY_VOLTAGE"),
        peak_shaving_power1=fields.number("_12K_HOLD_GRID_PEAK_SHAVING_POWER"),
        peak_shaving_soc1=fields.integer("_12K_HOLD_GRID_PEAK_SHAVING_SOC"),
        peak_shaving_power2=fields.number("_12K_HOLD_GRID_PEAK_SHAVING_POWER_2"),
        peak_shaving_soc2=fields.integer("_12K_HOLD_GRID_PEAK_SHAVING_SOC_2"),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def reconstruct_working_modes(raw: Mapping[str, Any]) -> WorkingModes:
    """Build the working-mode view of an inverter from its register fields.

    This is a pure function: no I/O, no clock.

    Args:
        raw: Merged register fields from the remote-read batches.

    Returns:
        WorkingModes with the gap-filled day schedule, per-family kept
        slots (before enable gating), enable flags, battery thresholds,
        firmware code and device time.
    """
    fields = RegisterFields(raw)

    slots = {family: extract_slots(fields, family) for family in MODE_FAMILIES}
    enabled = {family: family_enabled(fields, family) for family in MODE_FAMILIES}

    pooled = [
        ModeSegment(mode_name=family.mode_name, start=slot.start, end=slot.end)
        for family in MODE_FAMILIES
        if enabled[family]
        for slot in slots[family]
    ]

    result = WorkingModes(
        schedule=fill_gaps(pooled),
        ac_charge=slots[AC_CHARGE],
        peak_shaving=slots[PEAK_SHAVING],
        peak_shaving_enabled=enabled[PEAK_SHAVING],
        forced_charge=slots[FORCED_CHARGE],
        forced_charge_enabled=enabled[FORCED_CHARGE],
        forced_discharge=slots[FORCED_DISCHARGE],
        forced_discharge_enabled=enabled[FORCED_DISCHARGE],
        battery_settings=read_battery_settings(fields),
        firmware=fields.text("HOLD_FW_CODE"),
        device_time=fields.text("HOLD_TIME"),
    )

    fields.log_gaps("working modes")
    return result


async def read_working_modes(
    client: Eg4Client,
    serial_num: str,
    cookie: str,
    point_count: int = 127,
) -> WorkingModes:
    """Read both holding-register batches and reconstruct the working modes.

    The batches ``[0, point_count)`` and ``[point_count, 2 * point_count)``
    are read one after the other; a failure in either aborts the whole read.
    """
    batches = []
    for start in (0, point_count):
        batches.append(
            await client.read_registers(serial_num, start, point_count, cookie)
        )
    logger.debug("Read %d register batches for %s", len(batches), serial_num)
    return reconstruct_working_modes(merge_batches(batches))
