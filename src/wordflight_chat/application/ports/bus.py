from __future__ import annotations

from typing import Any, Protocol


class EventPublisher(Protocol):
    """Fans store change notifications out to every process."""

    async def publish(self, channel: str, payload: dict[str, Any]) -> None: ...
