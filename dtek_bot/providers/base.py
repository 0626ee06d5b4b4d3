from __future__ import annotations

from typing import Any, Protocol

from dtek_bot.core.models import PowerRow


class ScheduleSource(Protocol):
    async def fetch(self, update_fact: str) -> dict[str, Any]:
        """Fetch the raw schedule response for the configured address."""


class PowerSource(Protocol):
    async def fetch_rows(self) -> list[PowerRow]:
        """Fetch crowd-sourced power status rows."""
