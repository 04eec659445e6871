"""Delete-permission display conventions.

Names are free text and nothing here is enforced by the store: any client can
delete any room or message. These checks only decide what the UI offers.
"""
from __future__ import annotations

from wordflight_chat.application.exceptions import ForbiddenError
from wordflight_chat.domain.entities.message import Message
from wordflight_chat.domain.entities.room import Room


def can_delete_room(user_name: str, room: Room) -> bool:
    return room.created_by is not None and room.created_by == user_name


def can_delete_message(user_name: str, message: Message, room_creator: str | None = None) -> bool:
    creator = room_creator if room_creator is not None else message.room_creator
    return message.user_name == user_name or (creator is not None and creator == user_name)


def assert_can_delete_message(
    user_name: str, message: Message, room_creator: str | None = None
) -> None:
    if not can_delete_message(user_name, message, room_creator):
        raise ForbiddenError("Only the author or the room creator can delete this message")
