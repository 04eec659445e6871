from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class RoomView:
    id: str
    name: str
    description: str
    active: bool
    unread: int
    can_delete: bool


@dataclass(frozen=True, slots=True)
class MessageView:
    id: str
    text: str
    user_name: str
    created_at: datetime | None
    is_own: bool
    can_delete: bool


@dataclass(frozen=True, slots=True)
class UnreadView:
    counts: dict[str, int]
    total: int
    title: str


@dataclass(frozen=True, slots=True)
class SessionView:
    user_name: str
    current_room_id: str | None
    current_room_name: str | None
    visible: bool
    online: bool
    notifications_enabled: bool
    sound_enabled: bool
    permission: str
    paused: bool
    total_unread: int
    title: str
