from __future__ import annotations

import logging
import re
from typing import Any

from dtek_bot.core.constants import UNKNOWN_LABEL
from dtek_bot.core.models import DaySchedule, HouseRecord

_GROUP_NUMBER_RE = re.compile(r"(\d+\.?\d*)")

_logger = logging.getLogger("dtek_bot.dtek")


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def get_fact(response: dict[str, Any] | None) -> dict[str, Any]:
    return _as_dict((response or {}).get("fact"))


def get_preset(response: dict[str, Any] | None) -> dict[str, Any]:
    return _as_dict((response or {}).get("preset"))


def get_house_record(response: dict[str, Any] | None, house_id: str | None) -> HouseRecord | None:
    houses = (response or {}).get("data")
    if not isinstance(houses, dict):
        return None

    raw = houses.get(str(house_id)) if house_id is not None else None
    if raw is None:
        _logger.error('House key "%s" not found in response data', house_id)
        return None

    return HouseRecord.from_payload(raw)


def extract_today_unix(fact: dict[str, Any] | None) -> int | None:
    """Day anchor of the schedule, or ``None`` when it is missing or not a positive integer."""
    raw = (fact or {}).get("today")

    if isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        try:
            raw = int(raw.strip())
        except ValueError:
            return None
    if isinstance(raw, float):
        if not raw.is_integer():
            return None
        raw = int(raw)

    if isinstance(raw, int) and raw > 0:
        return raw
    return None


def get_hours_data(fact: dict[str, Any] | None, reason_key: str, day_unix: int) -> DaySchedule | None:
    days = _as_dict((fact or {}).get("data"))
    hours = _as_dict(days.get(str(day_unix))).get(reason_key)
    if not isinstance(hours, dict):
        return None
    return {str(hour): str(status) for hour, status in hours.items()}


def get_house_group(house: HouseRecord | None, preset: dict[str, Any] | None) -> str:
    reason_key = house.reason_key if house is not None else None
    if reason_key is None:
        return UNKNOWN_LABEL

    names = _as_dict((preset or {}).get("sch_names"))
    name = names.get(reason_key)
    if name:
        return str(name)

    match = _GROUP_NUMBER_RE.search(reason_key)
    if match is not None:
        return match.group(1)
    return UNKNOWN_LABEL


def has_any_outage(hours: DaySchedule | None) -> bool:
    return any(status != "yes" for status in (hours or {}).values())
