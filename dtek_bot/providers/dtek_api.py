from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from dtek_bot.core.constants import DTEK_API_HEADERS, DTEK_API_METHOD, DTEK_API_URL
from dtek_bot.core.errors import (
    UpstreamError,
    UpstreamHttpError,
    UpstreamParseError,
    UpstreamTimeout,
)

SOURCE = "dtek"

_logger = logging.getLogger("dtek_bot.dtek")


def build_form(city: str, street: str, update_fact: str) -> dict[str, str]:
    return {
        "method": DTEK_API_METHOD,
        "data[0][name]": "city",
        "data[0][value]": city,
        "data[1][name]": "street",
        "data[1][value]": street,
        "data[2][name]": "updateFact",
        "data[2][value]": update_fact,
    }


@dataclass
class DtekScheduleClient:
    csrf_token: str
    cookie: str
    city: str
    street: str
    url: str = DTEK_API_URL
    timeout_seconds: float = 2.0

    def _headers(self) -> dict[str, str]:
        return {
            **DTEK_API_HEADERS,
            "x-csrf-token": self.csrf_token,
            "Cookie": self.cookie,
        }

    async def fetch(self, update_fact: str) -> dict[str, Any]:
        timeout = httpx.Timeout(self.timeout_seconds)
        form = build_form(self.city, self.street, update_fact)

        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.post(self.url, headers=self._headers(), data=form)
        except httpx.TimeoutException as exc:
            raise UpstreamTimeout(SOURCE, f"request timed out after {self.timeout_seconds}s") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(SOURCE, f"request failed: {exc}") from exc

        _logger.info("DTEK API response status: %s", response.status_code)
        if not 200 <= response.status_code < 300:
            raise UpstreamHttpError(SOURCE, response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamParseError(SOURCE, "response body is not valid JSON") from exc

        if not isinstance(payload, dict):
            raise UpstreamParseError(SOURCE, "response body is not a JSON object")
        return payload
