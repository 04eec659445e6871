from __future__ import annotations

from typing import Protocol

from wordflight_chat.application.dto.message import NewMessageDTO
from wordflight_chat.domain.entities.message import Message


class MessageReader(Protocol):
    async def get_by_id(self, message_id: str) -> Message | None: ...

    async def list_messages(
        self,
        room_id: str,
        *,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> list[Message]:
        """The newest ``limit`` messages older than ``cursor``, oldest first."""
        ...


class MessageWriter(Protocol):
    async def create(self, message_id: str, message: NewMessageDTO) -> Message: ...

    async def delete(self, message_id: str) -> Message | None:
        """Delete one message and return it, or None if it was already gone."""
        ...

    async def delete_for_room(self, room_id: str) -> int: ...
