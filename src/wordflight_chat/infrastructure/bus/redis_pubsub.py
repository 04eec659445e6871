"""Redis Pub/Sub fan-out of store changes: publish side + subscriber task."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Coroutine

import redis.asyncio as aioredis

from wordflight_chat.infrastructure.bus.serializer import deserialize_event, serialize_event

logger = logging.getLogger(__name__)


class RedisPubSubPublisher:
    """Implements application.ports.bus.EventPublisher."""

    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis

    async def publish(self, channel: str, payload: dict[str, Any]) -> None:
        raw = serialize_event(payload.get("event_type", "unknown"), payload)
        await self._redis.publish(channel, raw)


OnEventCallback = Callable[[str, dict[str, Any]], Coroutine[Any, Any, None]]
ConnectionHook = Callable[[], Awaitable[None]]


class RedisPubSubSubscriber:
    """Background task that listens to a Redis channel and dispatches events.

    A dropped connection is retried after ``reconnect_delay`` seconds;
    ``on_disconnect`` / ``on_connect`` bracket each outage so listeners can
    pause and resync.
    """

    def __init__(
        self,
        redis: aioredis.Redis,
        channel: str,
        callback: OnEventCallback,
        *,
        on_connect: ConnectionHook | None = None,
        on_disconnect: ConnectionHook | None = None,
        reconnect_delay: float = 5.0,
    ) -> None:
        self._redis = redis
        self._channel = channel
        self._callback = callback
        self._on_connect = on_connect
        self._on_disconnect = on_disconnect
        self._reconnect_delay = reconnect_delay
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        self._task = asyncio.create_task(self._run(), name="redis-pubsub-subscriber")
        logger.info("Redis Pub/Sub subscriber started on channel=%s", self._channel)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            logger.info("Redis Pub/Sub subscriber stopped")

    async def _run(self) -> None:
        while True:
            try:
                await self._listen()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception(
                    "Pub/Sub connection lost, retrying in %.0fs", self._reconnect_delay,
                )
                if self._on_disconnect is not None:
                    await self._on_disconnect()
                await asyncio.sleep(self._reconnect_delay)

    async def _listen(self) -> None:
        pubsub = self._redis.pubsub()
        await pubsub.subscribe(self._channel)
        try:
            if self._on_connect is not None:
                await self._on_connect()
            async for message in pubsub.listen():
                if message["type"] != "message":
                    continue
                try:
                    event_type, data = deserialize_event(message["data"])
                    await self._callback(event_type, data)
                except Exception:
                    logger.exception("Error processing pubsub message")
        finally:
            await pubsub.unsubscribe(self._channel)
            await pubsub.aclose()
