from __future__ import annotations

import logging
import math
from typing import Any

from dtek_bot.core.dates import add_next_day
from dtek_bot.core.errors import ResolutionError
from dtek_bot.core.models import HouseRecord, PowerRow, PowerStats, ScheduleContext
from dtek_bot.parsers.schedule_response import (
    extract_today_unix,
    get_fact,
    get_hours_data,
    get_house_record,
    get_preset,
)

_logger = logging.getLogger("dtek_bot.service")


def resolve_schedule(
    response: dict[str, Any],
    house: HouseRecord | None = None,
    *,
    house_id: str | None = None,
) -> ScheduleContext:
    """Build the schedule context or raise ``ResolutionError``.

    The day anchor and the reason code are both mandatory; hour maps may be
    missing for either day.
    """
    fact = get_fact(response)
    today_unix = extract_today_unix(fact)
    if today_unix is None:
        raise ResolutionError(f"fact.today is not a valid day anchor: {fact.get('today')!r}")

    record = house if house is not None else get_house_record(response, house_id)
    reason_key = record.reason_key if record is not None else None
    if reason_key is None:
        raise ResolutionError(f"no reason code resolved for house {house_id!r}")

    tomorrow_unix = add_next_day(today_unix)
    return ScheduleContext(
        today_unix=today_unix,
        tomorrow_unix=tomorrow_unix,
        reason_key=reason_key,
        preset=get_preset(response),
        hours_today=get_hours_data(fact, reason_key, today_unix),
        hours_tomorrow=get_hours_data(fact, reason_key, tomorrow_unix),
    )


def extract_schedule_data(
    response: dict[str, Any],
    house: HouseRecord | None = None,
    *,
    house_id: str | None = None,
) -> ScheduleContext | None:
    try:
        return resolve_schedule(response, house, house_id=house_id)
    except ResolutionError as exc:
        _logger.warning("Schedule unavailable: %s", exc)
        return None


def calculate_light_percent(rows: list[PowerRow]) -> float:
    if not rows:
        return 0

    available = sum(1 for row in rows if row.light_status == 1)
    # Half-up rounding to two decimals.
    return math.floor(available * 10000 / len(rows) + 0.5) / 100


def get_regional_power_stats(
    rows: list[PowerRow],
    city_names: list[str],
    region: str,
) -> PowerStats | None:
    wanted = {name.strip().lower() for name in city_names if name.strip()}
    if not wanted or not rows:
        return None

    matched = [row for row in rows if row.city.strip().lower() in wanted]
    if not matched:
        return None

    return PowerStats(region=region, light_percent=calculate_light_percent(matched))
