from __future__ import annotations

from wordflight_chat.domain.entities.room import Room
from wordflight_chat.infrastructure.db.models.room import RoomModel


def model_to_entity(model: RoomModel) -> Room:
    return Room(
        id=model.id,
        name=model.name,
        description=model.description or "",
        created_at=model.created_at,
        created_by=model.created_by,
    )
