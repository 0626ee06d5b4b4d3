from __future__ import annotations

import uvicorn

from dtek_bot.config import load_settings


if __name__ == "__main__":
    settings = load_settings()
    uvicorn.run(
        "dtek_bot.main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=False,
    )
