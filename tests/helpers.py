from __future__ import annotations

from datetime import datetime
from typing import Any

from dtek_bot.config import Settings
from dtek_bot.core.constants import KYIV_TZ, TIME_TYPE
from dtek_bot.parsers.power_rows import FIELD_DELIMITER

TODAY_UNIX = int(datetime(2025, 6, 15, tzinfo=KYIV_TZ).timestamp())
TOMORROW_UNIX = int(datetime(2025, 6, 16, tzinfo=KYIV_TZ).timestamp())
HOUSE_ID = "12"
REASON_KEY = "GPV3.1"


def build_hours(default: str = "yes", overrides: dict[int, str] | None = None) -> dict[str, str]:
    hours = {str(hour): default for hour in range(1, 25)}
    for hour, status in (overrides or {}).items():
        hours[str(hour)] = status
    return hours


def build_house(**overrides: Any) -> dict[str, Any]:
    house: dict[str, Any] = {
        "sub_type": "",
        "start_date": "",
        "end_date": "",
        "type": "",
        "sub_type_reason": [REASON_KEY],
    }
    house.update(overrides)
    return house


def build_schedule_response(
    *,
    today: dict[str, str] | None = None,
    tomorrow: dict[str, str] | None = None,
    house: dict[str, Any] | None = None,
    update_timestamp: str | None = "11:45 15.06.2025",
) -> dict[str, Any]:
    days: dict[str, Any] = {str(TODAY_UNIX): {REASON_KEY: today if today is not None else build_hours()}}
    if tomorrow is not None:
        days[str(TOMORROW_UNIX)] = {REASON_KEY: tomorrow}

    response: dict[str, Any] = {
        "fact": {"today": TODAY_UNIX, "data": days},
        "preset": {
            "sch_names": {REASON_KEY: "Черга 3.1"},
            "time_type": dict(TIME_TYPE),
        },
        "data": {HOUSE_ID: house if house is not None else build_house()},
    }
    if update_timestamp is not None:
        response["updateTimestamp"] = update_timestamp
    return response


def build_power_line(**overrides: str) -> str:
    fields = {
        "id": "123",
        "light": "1",
        "timestamp": "2025-06-16T12:00:00Z",
        "location": "с. Місто А->вул. Тестова 1",
        "extra": "x",
        "people": "5",
        "lat": "50.5",
        "lon": "30.2",
    }
    fields.update(overrides)
    return FIELD_DELIMITER.join(fields[name] for name in ("id", "light", "timestamp", "location", "extra", "people", "lat", "lon"))


def build_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "telegram_bot_token": "123456:TEST-token",
        "telegram_webhook_secret": "webhook-secret",
        "dtek_csrf_token": "csrf",
        "dtek_cookie": "session=abc",
        "dtek_city": "с. Гатне",
        "dtek_street": "вул. Тестова",
        "dtek_house": HOUSE_ID,
        "power_cities": "Місто А, Місто Б",
        "power_region": "Тестовий район",
    }
    values.update(overrides)
    return Settings(**values)


async def no_sleep(_: float) -> None:
    return None
