"""Document store over SQL repositories with push-based live queries.

Writes commit through a unit of work, refresh this process's live queries
straight away, then announce the change on the fan-out channel so other
processes refresh theirs. Events carrying this store's own origin are
ignored on the way back in.

Local fan-out runs inside the writer's coroutine: every affected listener
has been called by the time a write returns. Listeners that push to sockets
must bound their sends (see ConnectionManager.send).
"""
from __future__ import annotations

import logging
import secrets
import string
from contextlib import AbstractAsyncContextManager
from typing import Any, Callable

from wordflight_chat.application.dto.message import MessagePageDTO, NewMessageDTO
from wordflight_chat.application.dto.room import NewRoomDTO
from wordflight_chat.application.ports.bus import EventPublisher
from wordflight_chat.application.ports.store import ErrorCallback, SnapshotCallback
from wordflight_chat.application.uow import UnitOfWork
from wordflight_chat.domain.entities.message import Message
from wordflight_chat.domain.entities.room import Room
from wordflight_chat.domain.value_objects.enums import Collection
from wordflight_chat.infrastructure.db.repositories._cursor import encode_cursor
from wordflight_chat.infrastructure.store.live_query import LiveQuery, LiveQueryHub

logger = logging.getLogger(__name__)

CHANGE_EVENT = "store.changed"

_ID_ALPHABET = string.ascii_letters + string.digits
_ID_LENGTH = 20

UoWFactory = Callable[[], AbstractAsyncContextManager[UnitOfWork]]


def new_document_id() -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


class LiveDocumentStore:
    """Implements application.ports.store.DocumentStore."""

    def __init__(
        self,
        uow_factory: UoWFactory,
        publisher: EventPublisher | None,
        hub: LiveQueryHub | None = None,
        *,
        channel: str = "wordflight.changes",
        rooms_limit: int | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._publisher = publisher
        self._hub = hub or LiveQueryHub()
        self._channel = channel
        self._rooms_limit = rooms_limit
        self.origin = secrets.token_hex(8)

    @property
    def hub(self) -> LiveQueryHub:
        return self._hub

    # -- writes ----------------------------------------------------------------

    async def add_room(self, room: NewRoomDTO) -> Room:
        async with self._uow_factory() as uow:
            created = await uow.rooms_w.create(new_document_id(), room)
            await uow.commit()
        logger.info("Room %s created by %s", created.id, created.created_by)
        await self._changed(Collection.ROOMS, created.id)
        return created

    async def add_message(self, message: NewMessageDTO) -> Message:
        async with self._uow_factory() as uow:
            created = await uow.messages_w.create(new_document_id(), message)
            await uow.commit()
        await self._changed(Collection.MESSAGES, created.room_id)
        return created

    async def delete_message(self, message_id: str) -> bool:
        async with self._uow_factory() as uow:
            deleted = await uow.messages_w.delete(message_id)
            await uow.commit()
        if deleted is None:
            return False
        await self._changed(Collection.MESSAGES, deleted.room_id)
        return True

    async def delete_room_cascade(self, room_id: str) -> int:
        async with self._uow_factory() as uow:
            removed = await uow.messages_w.delete_for_room(room_id)
            await uow.rooms_w.delete(room_id)
            await uow.commit()
        logger.info("Room %s deleted with %d messages", room_id, removed)
        await self._changed(Collection.MESSAGES, room_id)
        await self._changed(Collection.ROOMS, room_id)
        return removed

    # -- reads -----------------------------------------------------------------

    async def get_room(self, room_id: str) -> Room | None:
        async with self._uow_factory() as uow:
            return await uow.rooms.get_by_id(room_id)

    async def get_message(self, message_id: str) -> Message | None:
        async with self._uow_factory() as uow:
            return await uow.messages.get_by_id(message_id)

    async def list_rooms(self, *, limit: int | None = None) -> list[Room]:
        async with self._uow_factory() as uow:
            return await uow.rooms.list_rooms(limit=limit if limit is not None else self._rooms_limit)

    async def list_messages(
        self, room_id: str, *, cursor: str | None = None, limit: int = 20
    ) -> MessagePageDTO:
        async with self._uow_factory() as uow:
            items = await uow.messages.list_messages(room_id, cursor=cursor, limit=limit)
        next_cursor = None
        if len(items) == limit and items:
            oldest = items[0]
            next_cursor = encode_cursor(oldest.created_at, oldest.id)
        return MessagePageDTO(items=items, next_cursor=next_cursor)

    # -- live queries ------------------------------------------------------------

    async def listen_rooms(
        self,
        on_snapshot: SnapshotCallback[Room],
        on_error: ErrorCallback | None = None,
    ) -> LiveQuery[Room]:
        # The live room list is never capped; rooms_limit only bounds listings.
        async def fetch() -> list[Room]:
            async with self._uow_factory() as uow:
                return await uow.rooms.list_rooms()

        return await self._hub.register(Collection.ROOMS, fetch, on_snapshot, on_error)

    async def listen_messages(
        self,
        room_id: str,
        on_snapshot: SnapshotCallback[Message],
        on_error: ErrorCallback | None = None,
        *,
        limit: int | None = None,
        newest_first: bool = False,
    ) -> LiveQuery[Message]:
        async def fetch() -> list[Message]:
            async with self._uow_factory() as uow:
                items = await uow.messages.list_messages(room_id, limit=limit)
            return items[::-1] if newest_first else items

        return await self._hub.register(
            Collection.MESSAGES, fetch, on_snapshot, on_error, room_id=room_id,
        )

    # -- network -----------------------------------------------------------------

    async def enable_network(self) -> None:
        await self._hub.enable_network()

    async def disable_network(self) -> None:
        self._hub.disable_network()

    # -- fan-out -----------------------------------------------------------------

    async def apply_remote_change(self, data: dict[str, Any]) -> None:
        """Handle a change announced by another process."""
        if data.get("origin") == self.origin:
            return
        try:
            collection = Collection(data["collection"])
        except (KeyError, ValueError):
            logger.warning("Ignoring malformed change event: %r", data)
            return
        await self._hub.notify(collection, data.get("room_id"))

    async def _changed(self, collection: Collection, room_id: str | None) -> None:
        await self._hub.notify(collection, room_id)
        if self._publisher is None:
            return
        payload = {
            "event_type": CHANGE_EVENT,
            "origin": self.origin,
            "collection": collection.value,
            "room_id": room_id,
        }
        try:
            await self._publisher.publish(self._channel, payload)
        except Exception:
            # The write is committed; only other processes miss the push.
            logger.exception("Failed to publish change on %s", collection)
