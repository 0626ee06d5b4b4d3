from __future__ import annotations

import logging

from aiogram.types import Update
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse, Response

router = APIRouter()

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"

_logger = logging.getLogger("dtek_bot.bot")


@router.get("/healthz")
async def healthz(request: Request) -> dict:
    return {
        "status": "ok",
        "command": request.app.state.settings.bot_command,
    }


@router.post("/webhook")
async def webhook(request: Request) -> Response:
    secret = request.app.state.settings.telegram_webhook_secret
    if not secret or request.headers.get(SECRET_HEADER) != secret:
        raise HTTPException(status_code=401, detail="Unauthorized")

    bot = request.app.state.bot
    try:
        update = Update.model_validate(await request.json(), context={"bot": bot})
        await request.app.state.dispatcher.feed_update(bot, update)
    except Exception as exc:
        _logger.exception("Bot handling failed")
        raise HTTPException(status_code=500, detail="Error processing bot handling.") from exc

    return PlainTextResponse("OK")


@router.get("/metrics")
async def metrics(request: Request) -> Response:
    payload, content_type = request.app.state.metrics.render()
    return Response(content=payload, media_type=content_type)
