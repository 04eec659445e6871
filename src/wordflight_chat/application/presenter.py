"""Pure rendering of session state into view models."""
from __future__ import annotations

from wordflight_chat.application.dto.views import MessageView, RoomView, UnreadView
from wordflight_chat.application.policies.permissions import can_delete_message, can_delete_room
from wordflight_chat.application.state.unread_tracker import DEFAULT_TITLE, format_title
from wordflight_chat.domain.entities.message import Message
from wordflight_chat.domain.entities.room import Room


def render_rooms(
    rooms: list[Room],
    active_id: str | None,
    unread: dict[str, int],
    user_name: str,
) -> list[RoomView]:
    return [
        RoomView(
            id=room.id,
            name=room.name,
            description=room.description,
            active=room.id == active_id,
            unread=unread.get(room.id, 0),
            can_delete=can_delete_room(user_name, room),
        )
        for room in rooms
    ]


def render_messages(
    messages: list[Message],
    user_name: str,
    room_creator: str | None = None,
) -> list[MessageView]:
    return [
        MessageView(
            id=m.id,
            text=m.text,
            user_name=m.user_name,
            created_at=m.created_at,
            is_own=m.user_name == user_name,
            can_delete=can_delete_message(user_name, m, room_creator),
        )
        for m in messages
    ]


def render_unread(counts: dict[str, int], base_title: str = DEFAULT_TITLE) -> UnreadView:
    visible_counts = {room_id: n for room_id, n in counts.items() if n > 0}
    total = sum(visible_counts.values())
    return UnreadView(counts=visible_counts, total=total, title=format_title(total, base_title))
