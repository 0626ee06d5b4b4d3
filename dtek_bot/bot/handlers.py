from __future__ import annotations

import logging

from aiogram import Router
from aiogram.enums import ChatAction, ParseMode
from aiogram.filters import Command, CommandObject
from aiogram.types import BufferedInputFile, Message

from dtek_bot.core.constants import ERROR_REPLY_TEXT, TELEGRAM_CAPTION_LIMIT
from dtek_bot.services.reply_service import ReplyService

_logger = logging.getLogger("dtek_bot.bot")


async def handle_outage_command(
    message: Message,
    command: CommandObject,
    reply_service: ReplyService,
) -> None:
    _logger.info("Outage command started")
    try:
        await message.bot.send_chat_action(chat_id=message.chat.id, action=ChatAction.TYPING)
        reply = await reply_service.produce_reply(command.command)
    except Exception:
        _logger.exception("Outage command failed")
        await message.answer(ERROR_REPLY_TEXT)
        return

    if reply.image is None:
        await message.answer(reply.text, parse_mode=ParseMode.HTML)
        return

    photo = BufferedInputFile(reply.image, filename="schedule.png")
    if len(reply.text) < TELEGRAM_CAPTION_LIMIT:
        await message.answer_photo(photo, caption=reply.text, parse_mode=ParseMode.HTML)
        return

    await message.answer_photo(photo)
    await message.answer(reply.text, parse_mode=ParseMode.HTML)


def build_router(command: str) -> Router:
    router = Router(name="outage")
    router.message.register(handle_outage_command, Command(command))
    return router
