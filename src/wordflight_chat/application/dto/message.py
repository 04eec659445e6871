from __future__ import annotations

from dataclasses import dataclass

from wordflight_chat.domain.entities.message import Message


@dataclass(frozen=True, slots=True)
class NewMessageDTO:
    text: str
    user_name: str
    room_id: str
    room_creator: str | None = None


@dataclass(frozen=True, slots=True)
class MessagePageDTO:
    """One page of room history, oldest first."""

    items: list[Message]
    next_cursor: str | None = None
