from __future__ import annotations

from typing import Final
from zoneinfo import ZoneInfo

KYIV_TZ: Final[ZoneInfo] = ZoneInfo("Europe/Kyiv")

DTEK_API_URL: Final[str] = "https://www.dtek-krem.com.ua/ua/ajax"
DTEK_API_METHOD: Final[str] = "getHomeNum"
DTEK_API_HEADERS: Final[dict[str, str]] = {
    "accept": "application/json, text/javascript, */*; q=0.01",
    "content-type": "application/x-www-form-urlencoded; charset=UTF-8",
    "x-requested-with": "XMLHttpRequest",
    "Referer": "https://www.dtek-krem.com.ua/ua/shutdowns",
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/142.0.0.0 Safari/537.36"
    ),
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}

SVITLOBOT_API_URL: Final[str] = "https://api.svitlobot.in.ua/website/getChannelsForMap"
SVITLOBOT_API_HEADERS: Final[dict[str, str]] = {
    "accept": "*/*",
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "origin": "https://svitlobot.in.ua",
    "referer": "https://svitlobot.in.ua/",
    "user-agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/144.0.0.0 Safari/537.36"
    ),
}

FALLBACK_IMAGE_URL: Final[str] = "https://y2.vyshgorod.in.ua/dtek_data/images/kyiv-region/today.png"
FONT_CSS_URL: Final[str] = "https://fonts.googleapis.com/css2?family=Inter:wght@700&subset=cyrillic"

# Labels used when the upstream preset does not provide one.
TIME_TYPE: Final[dict[str, str]] = {
    "yes": "Світло є",
    "maybe": "Можливе відключення",
    "no": "Світла немає",
    "first": "Світла не буде перші 30 хв.",
    "second": "Світла не буде другі 30 хв.",
    "mfirst": "Світла можливо не буде перші 30 хв.",
    "msecond": "Світла можливо не буде другі 30 хв.",
}

STATUS_ICONS: Final[dict[str, str]] = {
    "yes": "🟢",
    "no": "🔴",
    "maybe": "🟡",
    "mfirst": "🟡",
    "msecond": "🟡",
}

UA_MONTHS_GENITIVE: Final[tuple[str, ...]] = (
    "січня",
    "лютого",
    "березня",
    "квітня",
    "травня",
    "червня",
    "липня",
    "серпня",
    "вересня",
    "жовтня",
    "листопада",
    "грудня",
)

UNKNOWN_LABEL: Final[str] = "Невідомо"
ERROR_REPLY_TEXT: Final[str] = "❌ Сталася помилка при отриманні даних"
NO_OUTAGE_ADVISORY: Final[str] = (
    "⚠️ Якщо в даний момент у вас відсутнє світло, імовірно виникла аварійна ситуація, "
    "або діють стабілізаційні або екстрені відключення."
)
TELEGRAM_CAPTION_LIMIT: Final[int] = 1024
