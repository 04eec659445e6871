from __future__ import annotations

from typing import Protocol

from wordflight_chat.application.dto.room import NewRoomDTO
from wordflight_chat.domain.entities.room import Room


class RoomReader(Protocol):
    async def get_by_id(self, room_id: str) -> Room | None: ...

    async def list_rooms(self, *, limit: int | None = None) -> list[Room]:
        """All rooms, oldest first."""
        ...


class RoomWriter(Protocol):
    async def create(self, room_id: str, room: NewRoomDTO) -> Room:
        """Insert a room; the database assigns ``created_at``."""
        ...

    async def delete(self, room_id: str) -> bool: ...
