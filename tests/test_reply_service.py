from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from aiogram.enums import ParseMode
from aiogram.types import BufferedInputFile

from dtek_bot.bot.handlers import handle_outage_command
from dtek_bot.core.constants import ERROR_REPLY_TEXT, KYIV_TZ
from dtek_bot.core.errors import UnsupportedCommandError, UpstreamHttpError
from dtek_bot.core.models import OutageData, Reply
from dtek_bot.observability.metrics import Metrics
from dtek_bot.services.reply_service import ReplyService
from tests.helpers import build_schedule_response


class _OutageService:
    def __init__(self, error: Exception | None = None) -> None:
        self._error = error

    async def get_outage_data(self) -> OutageData:
        if self._error is not None:
            raise self._error
        response = build_schedule_response()
        return OutageData(
            schedule_response=response,
            house=None,
            schedule=None,
            power_stats=None,
            requested_at=datetime(2025, 6, 15, 12, 0, tzinfo=KYIV_TZ),
            update_timestamp="11:45 15.06.2025",
        )


class _ImageService:
    def __init__(self, image: bytes | None) -> None:
        self.image = image
        self.requested: list = []

    async def get_outage_image(self, schedule):
        self.requested.append(schedule)
        return self.image


class _ReplyService:
    def __init__(self, reply: Reply | None = None, error: Exception | None = None) -> None:
        self._reply = reply
        self._error = error
        self.commands: list[str] = []

    async def produce_reply(self, command: str) -> Reply:
        self.commands.append(command)
        if self._error is not None:
            raise self._error
        return self._reply


def _message() -> SimpleNamespace:
    return SimpleNamespace(
        bot=SimpleNamespace(send_chat_action=AsyncMock()),
        chat=SimpleNamespace(id=42),
        answer=AsyncMock(),
        answer_photo=AsyncMock(),
    )


def _command() -> SimpleNamespace:
    return SimpleNamespace(command="dtek")


@pytest.mark.asyncio
async def test_reply_combines_text_and_image() -> None:
    metrics = Metrics()
    image_service = _ImageService(b"png")
    service = ReplyService(
        command="dtek",
        outage_service=_OutageService(),
        image_service=image_service,
        metrics=metrics,
    )

    reply = await service.produce_reply("/DTEK")

    assert reply.image == b"png"
    assert reply.text.startswith("⚡️ <b>Невідомо | Відключень не зафіксовано.</b>")
    assert image_service.requested == [None]
    assert metrics.registry.get_sample_value("dtek_bot_replies_total", {"status": "success"}) == 1


@pytest.mark.asyncio
async def test_reply_rejects_other_commands() -> None:
    service = ReplyService(command="dtek", outage_service=_OutageService(), image_service=_ImageService(None))

    with pytest.raises(UnsupportedCommandError):
        await service.produce_reply("start")


@pytest.mark.asyncio
async def test_reply_propagates_schedule_failure() -> None:
    metrics = Metrics()
    service = ReplyService(
        command="dtek",
        outage_service=_OutageService(UpstreamHttpError("dtek", 500)),
        image_service=_ImageService(None),
        metrics=metrics,
    )

    with pytest.raises(UpstreamHttpError):
        await service.produce_reply("dtek")

    assert metrics.registry.get_sample_value("dtek_bot_replies_total", {"status": "error"}) == 1


@pytest.mark.asyncio
async def test_handler_sends_short_text_as_caption() -> None:
    message = _message()
    reply_service = _ReplyService(Reply(text="short", image=b"png"))

    await handle_outage_command(message, _command(), reply_service)

    message.bot.send_chat_action.assert_awaited_once()
    assert message.bot.send_chat_action.await_args.kwargs["chat_id"] == 42
    assert reply_service.commands == ["dtek"]
    message.answer.assert_not_awaited()
    photo = message.answer_photo.await_args.args[0]
    assert isinstance(photo, BufferedInputFile)
    assert photo.data == b"png"
    assert message.answer_photo.await_args.kwargs == {"caption": "short", "parse_mode": ParseMode.HTML}


@pytest.mark.asyncio
async def test_handler_splits_long_text_from_photo() -> None:
    message = _message()
    long_text = "x" * 1024

    await handle_outage_command(message, _command(), _ReplyService(Reply(text=long_text, image=b"png")))

    assert message.answer_photo.await_args.kwargs == {}
    message.answer.assert_awaited_once_with(long_text, parse_mode=ParseMode.HTML)


@pytest.mark.asyncio
async def test_handler_sends_text_only_without_image() -> None:
    message = _message()

    await handle_outage_command(message, _command(), _ReplyService(Reply(text="text only")))

    message.answer_photo.assert_not_awaited()
    message.answer.assert_awaited_once_with("text only", parse_mode=ParseMode.HTML)


@pytest.mark.asyncio
async def test_handler_reports_failures_to_user() -> None:
    message = _message()

    await handle_outage_command(message, _command(), _ReplyService(error=UpstreamHttpError("dtek", 500)))

    message.answer_photo.assert_not_awaited()
    message.answer.assert_awaited_once_with(ERROR_REPLY_TEXT)
