from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

from dtek_bot.core.constants import KYIV_TZ, UA_MONTHS_GENITIVE

_DATE_RE = re.compile(r"^(\d{2})\.(\d{2})\.(\d{4})$")
_TIME_RE = re.compile(r"^(\d{2}):(\d{2})$")


def parse_ua_datetime(value: object) -> datetime | None:
    """Parse ``DD.MM.YYYY HH:MM`` or ``HH:MM DD.MM.YYYY`` as Kyiv wall-clock time.

    ``24:00`` is accepted and means midnight of the following day.
    Returns ``None`` for anything that is not exactly one date and one time.
    """
    if not isinstance(value, str) or not value.strip():
        return None

    parts = value.split()
    if len(parts) != 2:
        return None

    first, second = parts
    date_part, time_part = (first, second) if "." in first else (second, first)

    date_match = _DATE_RE.match(date_part)
    time_match = _TIME_RE.match(time_part)
    if date_match is None or time_match is None:
        return None

    day, month, year = (int(chunk) for chunk in date_match.groups())
    hour, minute = (int(chunk) for chunk in time_match.groups())

    rollover = hour == 24 and minute == 0
    if rollover:
        hour = 0

    try:
        parsed = datetime(year, month, day, hour, minute, tzinfo=KYIV_TZ)
    except ValueError:
        return None

    if rollover:
        parsed = add_calendar_day(parsed)
    return parsed


def add_calendar_day(moment: datetime) -> datetime:
    local = moment.astimezone(KYIV_TZ)
    # Aware arithmetic on zoneinfo datetimes keeps the wall clock, not elapsed seconds.
    return (local.replace(tzinfo=None) + timedelta(days=1)).replace(tzinfo=KYIV_TZ)


def add_next_day(unix_seconds: int) -> int:
    moment = datetime.fromtimestamp(unix_seconds, tz=KYIV_TZ)
    return int(add_calendar_day(moment).timestamp())


def format_time_difference(delta: timedelta) -> str | None:
    total_seconds = delta.total_seconds()
    if total_seconds <= 0:
        return None

    total_minutes = int(total_seconds // 60)
    days, remainder = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(remainder, 60)

    parts: list[str] = []
    if days > 0:
        parts.append(f"{days} дн")
    parts.append(f"{hours} год")
    parts.append(f"{minutes} хв")
    return " ".join(parts)


def time_difference(start: datetime | None, end: datetime | None) -> str | None:
    if start is None or end is None:
        return None
    # Same-zone subtraction ignores offsets, so compare in UTC.
    return format_time_difference(end.astimezone(timezone.utc) - start.astimezone(timezone.utc))


def now_kyiv() -> datetime:
    return datetime.now(tz=KYIV_TZ)


def format_ua_datetime(moment: datetime) -> str:
    return moment.astimezone(KYIV_TZ).strftime("%H:%M %d.%m.%Y")


def format_update_fact(moment: datetime) -> str:
    return moment.astimezone(KYIV_TZ).strftime("%d.%m.%Y %H:%M")


def format_ua_time(moment: datetime) -> str:
    return moment.astimezone(KYIV_TZ).strftime("%H:%M")


def format_ua_date(moment: datetime) -> str:
    local = moment.astimezone(KYIV_TZ)
    return f"{local.day} {UA_MONTHS_GENITIVE[local.month - 1]}"


def day_month_from_unix(unix_seconds: int) -> str:
    return format_ua_date(datetime.fromtimestamp(unix_seconds, tz=KYIV_TZ))


def same_local_day(first: datetime, second: datetime) -> bool:
    return first.astimezone(KYIV_TZ).date() == second.astimezone(KYIV_TZ).date()
