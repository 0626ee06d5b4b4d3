from __future__ import annotations

import logging

from aiogram import Bot, Dispatcher
from fastapi import FastAPI

from dtek_bot.api.routes import router as api_router
from dtek_bot.bot.handlers import build_router
from dtek_bot.config import Settings, load_settings
from dtek_bot.observability.metrics import Metrics
from dtek_bot.presentation.image_service import FontLoader, ImageCache, OutageImageService
from dtek_bot.providers.dtek_api import DtekScheduleClient
from dtek_bot.providers.svitlobot_api import SvitlobotClient
from dtek_bot.services.outage_service import OutageService
from dtek_bot.services.reply_service import ReplyService


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def build_reply_service(settings: Settings, metrics: Metrics) -> ReplyService:
    outage_service = OutageService(
        settings=settings,
        schedule_source=DtekScheduleClient(
            csrf_token=settings.dtek_csrf_token,
            cookie=settings.dtek_cookie,
            city=settings.dtek_city,
            street=settings.dtek_street,
            timeout_seconds=settings.dtek_timeout_seconds,
        ),
        power_source=SvitlobotClient(timeout_seconds=settings.power_timeout_seconds),
        metrics=metrics,
    )
    image_service = OutageImageService(
        font_loader=FontLoader(settings.font_css_url),
        fallback_url=settings.fallback_image_url,
        fallback_timeout_seconds=settings.fallback_image_timeout_seconds,
        cache=ImageCache(
            ttl_seconds=settings.image_cache_ttl_seconds,
            max_entries=settings.image_cache_max_entries,
        ),
        metrics=metrics,
    )
    return ReplyService(
        command=settings.bot_command,
        outage_service=outage_service,
        image_service=image_service,
        metrics=metrics,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    app_settings = settings or load_settings()
    configure_logging(app_settings.log_level)

    metrics = Metrics()
    reply_service = build_reply_service(app_settings, metrics)

    bot = Bot(token=app_settings.telegram_bot_token)
    dispatcher = Dispatcher(reply_service=reply_service)
    dispatcher.include_router(build_router(app_settings.bot_command))

    app = FastAPI(title="dtek-outage-bot", version="0.1.0")
    app.state.settings = app_settings
    app.state.metrics = metrics
    app.state.reply_service = reply_service
    app.state.bot = bot
    app.state.dispatcher = dispatcher

    @app.on_event("shutdown")
    async def _on_shutdown() -> None:
        await bot.session.close()

    app.include_router(api_router)
    return app
