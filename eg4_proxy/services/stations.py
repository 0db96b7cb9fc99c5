"""
Station directory: flatten EG4 plants and their inverters into one list.

Reads the first page of plants visible to the session, then the first page
of inverters of each plant, one plant after the other. Any failing request
aborts the whole listing; there are no partial results.

CHANGELOG:
- 2026-10-16: Coerce loosely typed text fields; skip non-object rows
- 2026-10-12: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from typing import Any

from eg4_proxy.client import Eg4Client
from eg4_proxy.models import Station

logger = logging.getLogger(__name__)

PLANT_LIST_PATH = "/web/config/plant/list/viewer"
INVERTER_LIST_PATH = "/web/config/inverter/list"


def _rows(body: Any) -> list[dict[str, Any]]:
    """Return the object rows of a paged listing, empty when absent.

    Rows that are not JSON objects are skipped with a warning.
    """
    rows = body.get("rows") if isinstance(body, dict) else None
    if not isinstance(rows, list):
        return []
    kept = [row for row in rows if isinstance(row, dict)]
    if len(kept) != len(rows):
        logger.warning("Skipped %d malformed listing row(s)", len(rows) - len(kept))
    return kept


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


def to_station(plant: dict[str, Any], inverter: dict[str, Any]) -> Station:
    """Combine one plant row and one inverter row into a Station."""
    plant_name = _text(plant.get("name"))
    device_type = _text(inverter.get("deviceTypeText"))
    serial_num = inverter.get("serialNum")
    return Station(
        name=f"{plant_name} — {device_type} ({serial_num})",
        plant_name=plant_name,
        plant_id=plant.get("id"),
        serial_num=str(serial_num),
        device_type=device_type,
        status=_text(inverter.get("statusText")),
        address=_text(plant.get("address")) or "",
    )


async def list_stations(
    client: Eg4Client,
    cookie: str,
    plant_rows: int = 100,
    inverter_rows: int = 50,
) -> list[Station]:
    """List every (plant, inverter) pair visible to the session.

    Args:
        client: Upstream client.
        cookie: Session cookie from a successful login.
        plant_rows: Page size of the plant listing.
        inverter_rows: Page size of each inverter listing.

    Returns:
        Stations in plant order, then inverter order within each plant.
    """
    plants = _rows(
        await client.post_form(
            PLANT_LIST_PATH, {"page": 1, "rows": plant_rows}, cookie
        )
    )

    stations: list[Station] = []
    for plant in plants:
        inverters = _rows(
            await client.post_form(
                INVERTER_LIST_PATH,
                {"page": 1, "rows": inverter_rows, "plantId": plant.get("id")},
                cookie,
            )
        )
        stations.extend(to_station(plant, inverter) for inverter in inverters)

    logger.info(
        "Found %d station(s) across %d plant(s)", len(stations), len(plants)
    )
    return stations
