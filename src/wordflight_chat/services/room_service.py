from __future__ import annotations

import logging

from wordflight_chat.application.dto.room import NewRoomDTO
from wordflight_chat.application.exceptions import NotFoundError, ValidationError
from wordflight_chat.application.ports.store import DocumentStore
from wordflight_chat.domain.entities.room import Room

logger = logging.getLogger(__name__)


async def create_room(
    store: DocumentStore,
    user_name: str,
    name: str,
    description: str | None = None,
) -> Room:
    """Write a new room. Blank names are rejected before anything is written."""
    name = name.strip()
    if not name:
        raise ValidationError("Room name is required")
    return await store.add_room(
        NewRoomDTO(
            name=name,
            description=(description or "").strip(),
            created_by=user_name,
        )
    )


async def delete_room(store: DocumentStore, room_id: str) -> int:
    """Delete a room and all of its messages as one batch."""
    removed = await store.delete_room_cascade(room_id)
    logger.debug("Deleted room %s (%d messages)", room_id, removed)
    return removed


async def list_rooms(store: DocumentStore, limit: int | None = None) -> list[Room]:
    return await store.list_rooms(limit=limit)


async def get_room(store: DocumentStore, room_id: str) -> Room:
    room = await store.get_room(room_id)
    if room is None:
        raise NotFoundError("Room not found")
    return room
