from __future__ import annotations

from types import TracebackType
from typing import Protocol, Self

from wordflight_chat.application.repositories.message import MessageReader, MessageWriter
from wordflight_chat.application.repositories.room import RoomReader, RoomWriter


class UnitOfWork(Protocol):
    rooms: RoomReader
    rooms_w: RoomWriter
    messages: MessageReader
    messages_w: MessageWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...

    async def __aenter__(self) -> Self: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...
