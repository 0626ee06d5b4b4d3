from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from dtek_bot.core.constants import SVITLOBOT_API_HEADERS, SVITLOBOT_API_URL
from dtek_bot.core.errors import UpstreamError, UpstreamHttpError, UpstreamTimeout
from dtek_bot.core.models import PowerRow
from dtek_bot.parsers.power_rows import parse_power_rows

SOURCE = "svitlobot"

_logger = logging.getLogger("dtek_bot.svitlobot")


@dataclass
class SvitlobotClient:
    url: str = SVITLOBOT_API_URL
    timeout_seconds: float = 1.0

    async def fetch_text(self) -> str:
        timeout = httpx.Timeout(self.timeout_seconds)

        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.get(self.url, headers=SVITLOBOT_API_HEADERS)
        except httpx.TimeoutException as exc:
            raise UpstreamTimeout(SOURCE, f"request timed out after {self.timeout_seconds}s") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(SOURCE, f"request failed: {exc}") from exc

        _logger.info("Svitlobot API response status: %s", response.status_code)
        if not 200 <= response.status_code < 300:
            raise UpstreamHttpError(SOURCE, response.status_code)

        return response.text

    async def fetch_rows(self) -> list[PowerRow]:
        return parse_power_rows(await self.fetch_text())
