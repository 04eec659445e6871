from __future__ import annotations

from wordflight_chat.domain.entities.room import Room


class RoomRegistry:
    """Live room list and the active-room selection derived from it."""

    def __init__(self) -> None:
        self._rooms: list[Room] = []
        self._active_id: str | None = None
        # Set by a local create until the new room shows up in a push.
        self._awaiting_echo: str | None = None

    @property
    def rooms(self) -> list[Room]:
        return list(self._rooms)

    @property
    def active_id(self) -> str | None:
        return self._active_id

    @property
    def active_room(self) -> Room | None:
        return self.get(self._active_id) if self._active_id else None

    def get(self, room_id: str) -> Room | None:
        for room in self._rooms:
            if room.id == room_id:
                return room
        return None

    def apply(self, rooms: list[Room]) -> bool:
        """Replace the room list from a push. Returns True if the active room changed."""
        self._rooms = list(rooms)
        ids = {room.id for room in self._rooms}

        if self._awaiting_echo is not None and self._awaiting_echo in ids:
            self._awaiting_echo = None

        if self._active_id is not None and (
            self._active_id in ids or self._active_id == self._awaiting_echo
        ):
            return False

        fallback = self._rooms[0].id if self._rooms else None
        changed = fallback != self._active_id
        self._active_id = fallback
        return changed

    def select(self, room_id: str) -> bool:
        """Make a known room active. Returns False for unknown ids."""
        if self.get(room_id) is None:
            return False
        self._active_id = room_id
        return True

    def activate_created(self, room_id: str) -> None:
        """Make a room active right after this client created it."""
        self._active_id = room_id
        if self.get(room_id) is None:
            self._awaiting_echo = room_id

    def clear_active(self, room_id: str | None = None) -> bool:
        """Drop the selection (only if it is ``room_id`` when given)."""
        if room_id is not None and self._active_id != room_id:
            return False
        if self._awaiting_echo == self._active_id:
            self._awaiting_echo = None
        self._active_id = None
        return True
