from __future__ import annotations

from wordflight_chat.domain.entities.message import Message


class MessageFeed:
    """Messages of the active room, replaced wholesale on every push."""

    def __init__(self) -> None:
        self._room_id: str | None = None
        self._messages: list[Message] = []

    @property
    def room_id(self) -> str | None:
        return self._room_id

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def reset(self, room_id: str | None) -> None:
        self._room_id = room_id
        self._messages = []

    def apply(self, room_id: str, messages: list[Message]) -> bool:
        """Replace the list. Pushes for any room but the current one are dropped."""
        if room_id != self._room_id:
            return False
        self._messages = [m for m in messages if m.room_id == room_id]
        return True

    def get(self, message_id: str) -> Message | None:
        for message in self._messages:
            if message.id == message_id:
                return message
        return None
