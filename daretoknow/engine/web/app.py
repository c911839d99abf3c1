"""FastAPI application for Dare to Know tournaments."""

import asyncio
import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from daretoknow.engine.config import AppConfig
from daretoknow.engine.content import ContentProvider, InMemoryContentProvider
from daretoknow.engine.match import LoopScheduler
from daretoknow.engine.tournaments import TournamentManager
from .commands import CommandDispatcher
from .connection_manager import ConnectionManager
from .endpoints.game import router as game_router, ws_router as game_ws_router

logger: logging.Logger = logging.getLogger(__name__)


def get_allowed_origins(config: AppConfig) -> list[str] | None:
    """Get CORS origins from environment, then config; None means development."""
    env_origins: str | None = os.environ.get("ALLOWED_ORIGINS")
    if env_origins:
        return [origin.strip() for origin in env_origins.split(",")]
    return config.system.allowed_origins or None


def load_content(config: AppConfig) -> ContentProvider:
    """Load prompts from the configured file, or start with none."""
    prompts_path = Path(config.content.prompts_path)
    if not prompts_path.exists():
        logger.warning(f"Prompt file {prompts_path} not found, starting without content")
        return InMemoryContentProvider()
    return InMemoryContentProvider.load_from_file(prompts_path)


def create_app(
    config: AppConfig | None = None, content: ContentProvider | None = None
) -> FastAPI:
    """Build the application with its own tournament manager."""
    config = config or AppConfig()
    content = content or load_content(config)

    connections = ConnectionManager()
    manager = TournamentManager(
        content,
        config.game,
        sink=connections.publish,
        scheduler=LoopScheduler(),
    )
    dispatcher = CommandDispatcher(manager, connections.publish)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Run the broadcast pump for the lifetime of the app."""
        logger.info("Starting broadcast pump...")
        pump_task = asyncio.create_task(connections.run_pump())

        yield

        manager.timer.cancel()
        pump_task.cancel()
        try:
            await pump_task
        except asyncio.CancelledError:
            pass
        logger.info("Broadcast pump stopped")

    app = FastAPI(
        title="Dare to Know",
        description="Bracketed truth-or-dare tournament server",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.manager = manager
    app.state.connections = connections
    app.state.dispatcher = dispatcher

    allowed_origins = get_allowed_origins(config)
    if allowed_origins:
        logger.info(f"Setting CORS allowed origins: {allowed_origins}")

        # Production: Use specific origins
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        logger.info("No allowed origins set, using development CORS settings")

        # Development: Allow any localhost/127.0.0.1
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(game_router, prefix="/v1")
    app.include_router(game_ws_router, prefix="/v1")
    return app
