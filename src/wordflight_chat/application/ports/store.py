from __future__ import annotations

from typing import Awaitable, Callable, Protocol, TypeVar

from wordflight_chat.application.dto.message import MessagePageDTO, NewMessageDTO
from wordflight_chat.application.dto.room import NewRoomDTO
from wordflight_chat.application.dto.snapshot import QuerySnapshot
from wordflight_chat.domain.entities.message import Message
from wordflight_chat.domain.entities.room import Room

T = TypeVar("T")

SnapshotCallback = Callable[[QuerySnapshot[T]], Awaitable[None]]
ErrorCallback = Callable[[Exception], None]


class Subscription(Protocol):
    """Handle for one live query. Closing it stops every further callback."""

    @property
    def active(self) -> bool: ...

    def close(self) -> None: ...

    async def refresh(self) -> None: ...


class DocumentStore(Protocol):
    async def add_room(self, room: NewRoomDTO) -> Room: ...

    async def add_message(self, message: NewMessageDTO) -> Message: ...

    async def get_room(self, room_id: str) -> Room | None: ...

    async def get_message(self, message_id: str) -> Message | None: ...

    async def delete_message(self, message_id: str) -> bool: ...

    async def delete_room_cascade(self, room_id: str) -> int:
        """Delete the room and every message referencing it in one batch.

        Returns the number of messages removed.
        """
        ...

    async def list_rooms(self, *, limit: int | None = None) -> list[Room]: ...

    async def list_messages(
        self, room_id: str, *, cursor: str | None = None, limit: int = 20
    ) -> MessagePageDTO: ...

    async def listen_rooms(
        self,
        on_snapshot: SnapshotCallback[Room],
        on_error: ErrorCallback | None = None,
    ) -> Subscription: ...

    async def listen_messages(
        self,
        room_id: str,
        on_snapshot: SnapshotCallback[Message],
        on_error: ErrorCallback | None = None,
        *,
        limit: int | None = None,
        newest_first: bool = False,
    ) -> Subscription: ...

    async def enable_network(self) -> None: ...

    async def disable_network(self) -> None: ...
