from __future__ import annotations

import logging
import math
import re
from datetime import datetime

from dtek_bot.core.constants import KYIV_TZ
from dtek_bot.core.models import PowerRow

FIELD_DELIMITER = ";&&&;"
LOCATION_SEPARATOR = "->"
MIN_FIELDS = 6

LIGHT_RAW_INDEX = 1
TIMESTAMP_INDEX = 2
LOCATION_INDEX = 3
PEOPLE_INDEX = 5
LAT_INDEX = 6
LON_INDEX = 7

_SETTLEMENT_PREFIX_RE = re.compile(r"^с\. ?", flags=re.IGNORECASE)

_logger = logging.getLogger("dtek_bot.svitlobot")


def _field(fields: list[str], index: int) -> str | None:
    return fields[index] if index < len(fields) else None


def _parse_number(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _parse_timestamp(raw: str | None) -> datetime | None:
    if raw is None or not raw.strip():
        return None
    try:
        parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=KYIV_TZ)
    return parsed


def parse_light_status(raw: str | None) -> int | None:
    """``1`` -> available (1), ``2`` -> unavailable (0), anything else -> unknown."""
    value = _parse_number(raw)
    if value == 1:
        return 1
    if value == 2:
        return 0
    return None


def parse_location(raw: str | None) -> tuple[str, str | None] | None:
    if not raw:
        return None

    parts = raw.split(LOCATION_SEPARATOR)
    city = _SETTLEMENT_PREFIX_RE.sub("", parts[0]).strip()
    if not city:
        return None

    address = parts[1].strip() if len(parts) > 1 else ""
    return city, address or None


def parse_power_row(row: str) -> PowerRow | None:
    if not row:
        return None

    fields = row.split(FIELD_DELIMITER)
    if len(fields) < MIN_FIELDS:
        return None

    location = parse_location(_field(fields, LOCATION_INDEX))
    if location is None:
        return None
    city, address = location

    return PowerRow(
        city=city,
        address=address,
        timestamp=_parse_timestamp(_field(fields, TIMESTAMP_INDEX)),
        people_count=_parse_number(_field(fields, PEOPLE_INDEX)),
        light_status=parse_light_status(_field(fields, LIGHT_RAW_INDEX)),
        lat=_parse_number(_field(fields, LAT_INDEX)),
        lon=_parse_number(_field(fields, LON_INDEX)),
        raw=row,
    )


def parse_power_rows(text: str) -> list[PowerRow]:
    rows: list[PowerRow] = []
    dropped = 0
    for line in text.strip().split("\n"):
        parsed = parse_power_row(line.rstrip("\r"))
        if parsed is None:
            dropped += 1
            continue
        rows.append(parsed)

    if dropped:
        _logger.debug("Dropped %d malformed power rows", dropped)
    return rows
