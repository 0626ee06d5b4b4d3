from __future__ import annotations

import os
from dataclasses import dataclass

from dtek_bot.core.constants import FALLBACK_IMAGE_URL, FONT_CSS_URL
from dtek_bot.core.errors import ConfigError

REQUIRED_ENV_VARS = (
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_WEBHOOK_SECRET",
    "DTEK_CSRF_TOKEN",
    "DTEK_COOKIE",
    "DTEK_CITY",
    "DTEK_STREET",
    "DTEK_HOUSE",
)


@dataclass(frozen=True)
class Settings:
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"

    telegram_bot_token: str = ""
    telegram_webhook_secret: str = ""
    bot_command: str = "dtek"

    dtek_csrf_token: str = ""
    dtek_cookie: str = ""
    dtek_city: str = ""
    dtek_street: str = ""
    dtek_house: str = ""
    dtek_retry_attempts: int = 10
    dtek_timeout_seconds: float = 2.0

    power_cities: str = ""
    power_region: str = "Регіон"
    power_retry_attempts: int = 3
    power_timeout_seconds: float = 1.0

    fallback_image_url: str = FALLBACK_IMAGE_URL
    fallback_image_timeout_seconds: float = 1.0
    font_css_url: str = FONT_CSS_URL
    image_cache_ttl_seconds: int = 86400
    image_cache_max_entries: int = 32

    @property
    def power_city_names(self) -> list[str]:
        return [city.strip() for city in self.power_cities.split(",") if city.strip()]


def _as_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    return int(raw)


def _as_float(raw: str | None, default: float) -> float:
    if raw is None:
        return default
    return float(raw)


def load_settings() -> Settings:
    missing = [name for name in REQUIRED_ENV_VARS if not os.getenv(name)]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    return Settings(
        app_host=os.getenv("APP_HOST", "0.0.0.0"),
        app_port=_as_int(os.getenv("APP_PORT"), 8000),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        telegram_bot_token=os.environ["TELEGRAM_BOT_TOKEN"],
        telegram_webhook_secret=os.environ["TELEGRAM_WEBHOOK_SECRET"],
        bot_command=os.getenv("BOT_COMMAND", "dtek"),
        dtek_csrf_token=os.environ["DTEK_CSRF_TOKEN"],
        dtek_cookie=os.environ["DTEK_COOKIE"],
        dtek_city=os.environ["DTEK_CITY"],
        dtek_street=os.environ["DTEK_STREET"],
        dtek_house=os.environ["DTEK_HOUSE"],
        dtek_retry_attempts=_as_int(os.getenv("DTEK_RETRY_ATTEMPTS"), 10),
        dtek_timeout_seconds=_as_float(os.getenv("DTEK_TIMEOUT_SECONDS"), 2.0),
        power_cities=os.getenv("POWER_CITIES", ""),
        power_region=os.getenv("POWER_REGION") or "Регіон",
        power_retry_attempts=_as_int(os.getenv("POWER_RETRY_ATTEMPTS"), 3),
        power_timeout_seconds=_as_float(os.getenv("POWER_TIMEOUT_SECONDS"), 1.0),
        fallback_image_url=os.getenv("FALLBACK_IMAGE_URL", FALLBACK_IMAGE_URL),
        fallback_image_timeout_seconds=_as_float(
            os.getenv("FALLBACK_IMAGE_TIMEOUT_SECONDS"), 1.0
        ),
        font_css_url=os.getenv("FONT_CSS_URL", FONT_CSS_URL),
        image_cache_ttl_seconds=_as_int(os.getenv("IMAGE_CACHE_TTL_SECONDS"), 86400),
        image_cache_max_entries=_as_int(os.getenv("IMAGE_CACHE_MAX_ENTRIES"), 32),
    )
