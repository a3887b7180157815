"""
FastAPI app factory.

Responsibilities:
- Create and configure FastAPI app
- Set up middleware
- Start the shared RCClient for the app's lifetime (lifespan)
- Register routes
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import AppConfig
from observability import logger
from session.client import RCClient

from server.routes import register_routes


def create_app(config: AppConfig | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    The RCClient needs a running event loop, so it is built inside the
    lifespan rather than here. Pass `config` to override the environment
    (tests).
    """
    config = config or AppConfig.load_from_env()

    logger.configure(level=config.log_level, json_lines=config.enable_json_logs)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.rc_client = RCClient.from_config(config)
        try:
            yield
        finally:
            await app.state.rc_client.shutdown()

    app = FastAPI(title="RC Control API", lifespan=lifespan)

    app.state.config = config

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # tighten later
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes
    register_routes(app)

    return app
