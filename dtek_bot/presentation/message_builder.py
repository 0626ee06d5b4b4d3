from __future__ import annotations

from datetime import datetime

from dtek_bot.core.constants import NO_OUTAGE_ADVISORY, UNKNOWN_LABEL
from dtek_bot.core.dates import (
    format_ua_date,
    format_ua_time,
    parse_ua_datetime,
    same_local_day,
    time_difference,
)
from dtek_bot.core.models import HouseRecord, OutageData, PowerStats
from dtek_bot.parsers.schedule_response import get_house_group
from dtek_bot.presentation.html_utils import escape_html
from dtek_bot.presentation.schedule_formatter import build_schedule_blocks


def join_parts(parts: list[str | None]) -> str:
    return "\n\n".join(part for part in parts if part)


def format_percent(value: float) -> str:
    return f"{value:g}"


def format_power_stats(power_stats: PowerStats | None) -> str | None:
    if power_stats is None:
        return None
    return (
        f"<b>📊 {escape_html(power_stats.region)}:</b> "
        f"{format_percent(power_stats.light_percent)}% з електропостачанням"
    )


def format_outage_period(start_raw: str | None, end_raw: str | None) -> str:
    start = parse_ua_datetime(start_raw)
    end = parse_ua_datetime(end_raw)

    if start is None or end is None:
        start_text, end_text = escape_html(start_raw), escape_html(end_raw)
    elif same_local_day(start, end):
        start_text, end_text = format_ua_time(start), format_ua_time(end)
    else:
        start_text = f"{format_ua_time(start)} {format_ua_date(start)}"
        end_text = f"{format_ua_time(end)} {format_ua_date(end)}"

    return f"🪫 <b>Вимкнення:</b> {start_text}\n🔋 <b>Відновлення:</b> {end_text}"


def format_outage_details(house: HouseRecord, now: datetime) -> list[str]:
    start = parse_ua_datetime(house.start_date)
    end = parse_ua_datetime(house.end_date)
    elapsed = time_difference(start, now) or UNKNOWN_LABEL
    remaining = time_difference(now, end) or UNKNOWN_LABEL

    return [
        f"❗️ <b>Тип:</b> {escape_html(house.sub_type)}",
        format_outage_period(house.start_date, house.end_date),
        f"⛔️ <b>Без світла:</b> {escape_html(elapsed)}\n🔌 <b>До відновлення:</b> {escape_html(remaining)}",
    ]


def _trailer(data: OutageData, schedule_blocks: list[str]) -> list[str | None]:
    return [
        *schedule_blocks,
        format_power_stats(data.power_stats),
        f"🕒 Оновлено: <i>{escape_html(data.update_timestamp)}</i>",
    ]


def format_no_outage_message(data: OutageData, house_group: str, schedule_blocks: list[str]) -> str:
    return join_parts(
        [
            f"⚡️ <b>{escape_html(house_group)} | Відключень не зафіксовано.</b>",
            NO_OUTAGE_ADVISORY,
            *_trailer(data, schedule_blocks),
        ]
    )


def format_active_outage_message(
    data: OutageData,
    house: HouseRecord,
    house_group: str,
    schedule_blocks: list[str],
) -> str:
    return join_parts(
        [
            f"🚨 <b>{escape_html(house_group)} | Відключення.</b>",
            *format_outage_details(house, data.requested_at),
            *_trailer(data, schedule_blocks),
        ]
    )


def format_outage_message(data: OutageData) -> str:
    preset = data.schedule.preset if data.schedule is not None else data.schedule_response.get("preset")
    house_group = get_house_group(data.house, preset if isinstance(preset, dict) else None)
    schedule_blocks = build_schedule_blocks(data.schedule)

    if data.house is not None and data.house.has_outage_period:
        return format_active_outage_message(data, data.house, house_group, schedule_blocks)
    return format_no_outage_message(data, house_group, schedule_blocks)
