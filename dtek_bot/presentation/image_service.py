from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import re
import time
from collections import OrderedDict
from typing import Callable

import httpx

from dtek_bot.core.dates import day_month_from_unix
from dtek_bot.core.errors import RenderError, UpstreamError, UpstreamHttpError
from dtek_bot.core.models import ScheduleContext
from dtek_bot.observability.metrics import Metrics
from dtek_bot.parsers.schedule_response import has_any_outage
from dtek_bot.presentation.table_image import (
    FontFactory,
    build_combined_outage_table,
    build_outage_table,
    rasterize,
    truetype_fonts,
)

_FONT_URL_RE = re.compile(r"src:\s*url\(([^)]+)\)")
_BROWSER_HEADERS = {"User-Agent": "Mozilla/5.0"}

_logger = logging.getLogger("dtek_bot.image")


def extract_font_url(css: str) -> str:
    match = _FONT_URL_RE.search(css)
    if match is None:
        raise RenderError("Failed to parse font URL from Google Fonts CSS")
    return match.group(1).strip("'\"")


class FontLoader:
    """Downloads the font once and keeps it for the lifetime of the instance."""

    def __init__(self, css_url: str, timeout_seconds: float = 5.0) -> None:
        self.css_url = css_url
        self.timeout_seconds = timeout_seconds
        self._data: bytes | None = None

    @property
    def cached(self) -> bool:
        return self._data is not None

    def reset(self) -> None:
        self._data = None

    async def load(self) -> bytes:
        if self._data is not None:
            return self._data

        timeout = httpx.Timeout(self.timeout_seconds)
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            css_response = await client.get(self.css_url, headers=_BROWSER_HEADERS)
            css_response.raise_for_status()
            font_url = extract_font_url(css_response.text)

            font_response = await client.get(font_url)
            font_response.raise_for_status()

        self._data = font_response.content
        return self._data


class ImageCache:
    """Content-addressed PNG cache with a TTL and a bounded entry count."""

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = 32,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, bytes]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> bytes | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, value = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: bytes) -> None:
        self._entries[key] = (self._clock() + self.ttl_seconds, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()


def build_cache_key(schedule: ScheduleContext, include_tomorrow: bool) -> str:
    payload: dict[str, object] = {
        "today": schedule.hours_today,
        "todayLabel": day_month_from_unix(schedule.today_unix),
    }
    if include_tomorrow:
        payload["tomorrow"] = schedule.hours_tomorrow
        payload["tomorrowLabel"] = day_month_from_unix(schedule.tomorrow_unix)

    encoded = json.dumps(payload, sort_keys=True, ensure_ascii=False).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()[:16]


def wants_combined_layout(schedule: ScheduleContext) -> bool:
    return bool(schedule.hours_tomorrow) and has_any_outage(schedule.hours_tomorrow)


class OutageImageService:
    def __init__(
        self,
        *,
        font_loader: FontLoader,
        fallback_url: str,
        fallback_timeout_seconds: float = 1.0,
        cache: ImageCache | None = None,
        metrics: Metrics | None = None,
        font_factory: Callable[[bytes], FontFactory] = truetype_fonts,
    ) -> None:
        self.font_loader = font_loader
        self.fallback_url = fallback_url
        self.fallback_timeout_seconds = fallback_timeout_seconds
        self.cache = cache
        self.metrics = metrics
        self._font_factory = font_factory

    def _mark(self, result: str) -> None:
        if self.metrics is not None:
            self.metrics.mark_image_result(result)

    async def render(self, schedule: ScheduleContext) -> bytes:
        include_tomorrow = wants_combined_layout(schedule)
        if include_tomorrow:
            tree = build_combined_outage_table(
                schedule.hours_today,
                day_month_from_unix(schedule.today_unix),
                schedule.hours_tomorrow,
                day_month_from_unix(schedule.tomorrow_unix),
            )
        else:
            tree = build_outage_table(schedule.hours_today, day_month_from_unix(schedule.today_unix))

        font_data = await self.font_loader.load()
        fonts = self._font_factory(font_data)
        _logger.debug("Rendering schedule image (combined=%s)", include_tomorrow)
        return await asyncio.to_thread(rasterize, tree, fonts)

    async def fetch_fallback_image(self) -> bytes:
        timeout = httpx.Timeout(self.fallback_timeout_seconds)
        params = {"v": str(int(time.time() * 1000))}

        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.get(self.fallback_url, params=params, headers=_BROWSER_HEADERS)
        except httpx.HTTPError as exc:
            raise UpstreamError("fallback-image", f"request failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise UpstreamHttpError("fallback-image", response.status_code)
        return response.content

    async def get_outage_image(self, schedule: ScheduleContext | None) -> bytes | None:
        try:
            if schedule is None or not schedule.hours_today:
                raise RenderError("No schedule data")

            key = build_cache_key(schedule, wants_combined_layout(schedule))
            cached = self.cache.get(key) if self.cache is not None else None
            if cached is not None:
                _logger.info("Image cache hit: %s", key)
                self._mark("cache_hit")
                return cached

            image = await self.render(schedule)
            if self.cache is not None:
                self.cache.set(key, image)
            self._mark("rendered")
            return image
        except (RenderError, httpx.HTTPError) as exc:
            _logger.warning("Generated image failed, trying fallback: %s", exc)

        try:
            image = await self.fetch_fallback_image()
        except UpstreamError as exc:
            _logger.error("Fallback image failed: %s", exc)
            self._mark("none")
            return None

        self._mark("fallback")
        return image
