from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wordflight_chat.api.middleware.correlation_id import CorrelationIdMiddleware
from wordflight_chat.api.middleware.timing import RequestTimingMiddleware
from wordflight_chat.api.v1.routers import health, messages, rooms, ws
from wordflight_chat.application.exceptions import (
    NotFoundError,
    ValidationError,
)
from wordflight_chat.config import settings
from wordflight_chat.infrastructure.bus.redis_pubsub import (
    RedisPubSubPublisher,
    RedisPubSubSubscriber,
)
from wordflight_chat.infrastructure.db.session import init_models
from wordflight_chat.infrastructure.db.uow import new_uow
from wordflight_chat.infrastructure.store.document_store import CHANGE_EVENT, LiveDocumentStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    await init_models()

    app.state.redis = aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )
    logger.info("Redis connection pool created")

    store = LiveDocumentStore(
        new_uow,
        RedisPubSubPublisher(app.state.redis),
        channel=settings.REDIS_CHANGES_CHANNEL,
        rooms_limit=settings.ROOMS_LIMIT,
    )
    app.state.store = store

    async def _on_change(event_type: str, data: dict[str, Any]) -> None:
        if event_type == CHANGE_EVENT:
            await store.apply_remote_change(data)

    subscriber = RedisPubSubSubscriber(
        app.state.redis,
        settings.REDIS_CHANGES_CHANNEL,
        _on_change,
        on_connect=store.enable_network,
        on_disconnect=store.disable_network,
        reconnect_delay=settings.REDIS_RECONNECT_SECONDS,
    )
    await subscriber.start()
    app.state.pubsub_subscriber = subscriber

    yield

    await ws.get_manager().close_all()
    await subscriber.stop()
    await app.state.redis.aclose()
    logger.info("Redis connection pool closed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="WordFlight Chat",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(rooms.router)
    app.include_router(messages.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})
