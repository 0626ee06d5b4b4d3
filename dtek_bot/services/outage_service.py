from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable

from dtek_bot.config import Settings
from dtek_bot.core.dates import format_ua_datetime, format_update_fact, now_kyiv
from dtek_bot.core.errors import UpstreamParseError
from dtek_bot.core.models import OutageData, PowerRow
from dtek_bot.core.retry import with_retry
from dtek_bot.observability.metrics import Metrics
from dtek_bot.parsers.schedule_response import get_house_record
from dtek_bot.providers.base import PowerSource, ScheduleSource
from dtek_bot.services.reconciliation import extract_schedule_data, get_regional_power_stats


class OutageService:
    def __init__(
        self,
        *,
        settings: Settings,
        schedule_source: ScheduleSource,
        power_source: PowerSource,
        metrics: Metrics | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.settings = settings
        self.schedule_source = schedule_source
        self.power_source = power_source
        self.metrics = metrics
        self._sleep = sleep
        self._logger = logging.getLogger("dtek_bot.service")

    async def fetch_schedule(self, update_fact: str) -> dict[str, Any]:
        result = await with_retry(
            lambda: self.schedule_source.fetch(update_fact),
            self.settings.dtek_retry_attempts,
            "dtek",
            metrics=self.metrics,
            sleep=self._sleep,
        )
        if not result:
            raise UpstreamParseError("dtek", "empty schedule response")
        return result

    async def fetch_power_rows(self) -> list[PowerRow]:
        try:
            return await with_retry(
                self.power_source.fetch_rows,
                self.settings.power_retry_attempts,
                "svitlobot",
                metrics=self.metrics,
                sleep=self._sleep,
            )
        except Exception as exc:
            self._logger.warning("Svitlobot data unavailable: %s", exc)
            return []

    async def get_outage_data(self, requested_at: datetime | None = None) -> OutageData:
        moment = requested_at or now_kyiv()

        schedule_response, power_rows = await asyncio.gather(
            self.fetch_schedule(format_update_fact(moment)),
            self.fetch_power_rows(),
        )

        house = get_house_record(schedule_response, self.settings.dtek_house)
        schedule = extract_schedule_data(schedule_response, house, house_id=self.settings.dtek_house)
        power_stats = get_regional_power_stats(
            power_rows,
            self.settings.power_city_names,
            self.settings.power_region,
        )

        update_timestamp = schedule_response.get("updateTimestamp")
        return OutageData(
            schedule_response=schedule_response,
            house=house,
            schedule=schedule,
            power_stats=power_stats,
            requested_at=moment,
            update_timestamp=str(update_timestamp) if update_timestamp else format_ua_datetime(moment),
        )
