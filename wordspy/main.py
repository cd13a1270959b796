# wordspy/main.py
from __future__ import annotations

import asyncio

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from wordspy.domain.session.timers import PhaseTimers
from wordspy.settings import get_settings
from wordspy.store.models import GameSettings
from wordspy.store.registry import RoomRegistry
from wordspy.transport.admin import router as admin_router
from wordspy.transport.ws import router as ws_router
from wordspy.transport.ws_manager import WSManager
from wordspy.util.logs import configure_logging
from wordspy.words.provider import WordProvider


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME)
    allowed_origins = [o.strip() for o in settings.WS_ALLOWED_ORIGINS.split(",") if o.strip()]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def _startup() -> None:
        # WordDatasetError here aborts startup
        words = WordProvider.from_path(settings.WORDS_PATH or None)
        app.state.settings = settings
        app.state.words = words
        app.state.registry = RoomRegistry(
            defaults=GameSettings(
                speaking_time_seconds=settings.SPEAKING_TIME_MS / 1000,
                min_players=settings.MIN_PLAYERS,
                max_players=settings.MAX_PLAYERS,
            )
        )
        app.state.wsman = WSManager()
        app.state.timers = PhaseTimers()
        app.state.lock = asyncio.Lock()
        logger.info("Starting {} with {} words", settings.APP_NAME, len(words))

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await app.state.timers.shutdown()

    @app.get("/health")
    async def health():
        return {"ok": True, "rooms": len(app.state.registry)}

    app.include_router(ws_router)
    app.include_router(admin_router)
    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run("wordspy.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


app = create_app()
