"""In-process registry of WebSocket connections and their chat sessions."""
from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import WebSocket

from wordflight_chat.infrastructure.ws.protocol import WsOutbound
from wordflight_chat.services.chat_session import ChatSession

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks one chat session per connected WebSocket."""

    def __init__(self, *, send_timeout: float | None = 5.0) -> None:
        self._sessions: dict[WebSocket, ChatSession] = {}
        self._send_timeout = send_timeout

    def __len__(self) -> int:
        return len(self._sessions)

    async def connect(self, ws: WebSocket, session: ChatSession) -> None:
        await ws.accept()
        self._sessions[ws] = session
        logger.debug("WS connected: %s (total=%d)", session.user_name, len(self._sessions))

    async def disconnect(self, ws: WebSocket) -> None:
        session = self._sessions.pop(ws, None)
        if session is not None:
            await session.close()
            logger.debug("WS disconnected: %s", session.user_name)

    async def send(self, ws: WebSocket, event_type: str, data: dict[str, Any]) -> None:
        """Push one event; a socket that does not drain within the timeout raises."""
        payload = WsOutbound(type=event_type, data=data)
        try:
            await asyncio.wait_for(ws.send_text(payload.model_dump_json()), self._send_timeout)
        except TimeoutError:
            logger.warning("WS send of %s timed out after %ss", event_type, self._send_timeout)
            raise

    async def close_all(self) -> None:
        """Release every session's subscriptions (app shutdown)."""
        for ws in list(self._sessions):
            await self.disconnect(ws)
