from __future__ import annotations

import logging
from time import perf_counter

from dtek_bot.core.errors import UnsupportedCommandError
from dtek_bot.core.models import Reply
from dtek_bot.observability.metrics import Metrics
from dtek_bot.presentation.image_service import OutageImageService
from dtek_bot.presentation.message_builder import format_outage_message
from dtek_bot.services.outage_service import OutageService


class ReplyService:
    def __init__(
        self,
        *,
        command: str,
        outage_service: OutageService,
        image_service: OutageImageService,
        metrics: Metrics | None = None,
    ) -> None:
        self.command = command
        self.outage_service = outage_service
        self.image_service = image_service
        self.metrics = metrics
        self._logger = logging.getLogger("dtek_bot.service")

    async def produce_reply(self, command: str) -> Reply:
        normalized = command.strip().lstrip("/").lower()
        if normalized != self.command.lower():
            raise UnsupportedCommandError(f"Unsupported command: {command}")

        started = perf_counter()
        status = "success"
        try:
            outage_data = await self.outage_service.get_outage_data()
            text = format_outage_message(outage_data)
            image = await self.image_service.get_outage_image(outage_data.schedule)
        except Exception:
            status = "error"
            raise
        finally:
            if self.metrics is not None:
                self.metrics.mark_reply(status, perf_counter() - started)

        self._logger.info("Reply ready (image=%s, length=%d)", image is not None, len(text))
        return Reply(text=text, image=image)
