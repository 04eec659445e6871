from __future__ import annotations

from wordflight_chat.application.dto.message import MessagePageDTO, NewMessageDTO
from wordflight_chat.application.exceptions import NotFoundError, ValidationError
from wordflight_chat.application.ports.store import DocumentStore
from wordflight_chat.domain.entities.message import Message
from wordflight_chat.domain.entities.room import Room


async def send_message(
    store: DocumentStore,
    user_name: str,
    room: Room | None,
    text: str,
) -> Message:
    """Write a message to ``room``; the store stamps ``created_at``.

    The caller's view is not updated here: the new message shows up through
    the room's live query like anyone else's.
    """
    if room is None:
        raise ValidationError("No active room")
    text = text.strip()
    if not text:
        raise ValidationError("Message text is required")
    return await store.add_message(
        NewMessageDTO(
            text=text,
            user_name=user_name,
            room_id=room.id,
            room_creator=room.created_by,
        )
    )


async def delete_message(store: DocumentStore, message_id: str) -> None:
    deleted = await store.delete_message(message_id)
    if not deleted:
        raise NotFoundError("Message not found")


async def list_messages(
    store: DocumentStore,
    room_id: str,
    cursor: str | None,
    limit: int,
) -> MessagePageDTO:
    return await store.list_messages(room_id, cursor=cursor, limit=limit)
