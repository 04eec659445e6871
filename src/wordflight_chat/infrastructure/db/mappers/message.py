from __future__ import annotations

from wordflight_chat.domain.entities.message import Message
from wordflight_chat.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        text=model.text,
        user_name=model.user_name,
        room_id=model.room_id,
        created_at=model.created_at,
        room_creator=model.room_creator,
    )
