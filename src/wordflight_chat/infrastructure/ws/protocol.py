"""WebSocket message envelope models."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class WsInbound(BaseModel):
    """Browser → session."""

    type: str  # select_room | send_message | visibility | focus | blur | ping | ...
    data: dict[str, Any] = {}


class WsOutbound(BaseModel):
    """Session → browser."""

    type: str  # state | rooms | messages | unread | toast | play_sound | notify | error | pong
    data: dict[str, Any] = {}
