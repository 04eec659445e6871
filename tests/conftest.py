"""Shared test fixtures."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from wordflight_chat.application.dto.message import NewMessageDTO
from wordflight_chat.application.dto.room import NewRoomDTO
from wordflight_chat.domain.entities.message import Message
from wordflight_chat.domain.entities.room import Room
from wordflight_chat.infrastructure.db.repositories._cursor import decode_cursor
from wordflight_chat.infrastructure.store.document_store import LiveDocumentStore

EPOCH = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock shared by the tracker and the fake database."""

    def __init__(self, start: datetime = EPOCH) -> None:
        self._now = start

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float = 1.0) -> datetime:
        self._now += timedelta(seconds=seconds)
        return self._now


@dataclass
class FakeDatabase:
    clock: FakeClock = field(default_factory=FakeClock)
    rooms: dict[str, Room] = field(default_factory=dict)
    messages: dict[str, Message] = field(default_factory=dict)

    def server_timestamp(self) -> datetime:
        return self.clock.advance()


def make_room(
    *,
    room_id: str = "room-general",
    name: str = "general",
    description: str = "",
    created_by: str | None = "Alice",
    created_at: datetime | None = EPOCH,
) -> Room:
    return Room(
        id=room_id,
        name=name,
        description=description,
        created_at=created_at,
        created_by=created_by,
    )


def make_message(
    *,
    message_id: str = "msg-1",
    room_id: str = "room-general",
    user_name: str = "Alice",
    text: str = "hello",
    created_at: datetime | None = EPOCH,
    room_creator: str | None = None,
) -> Message:
    return Message(
        id=message_id,
        text=text,
        user_name=user_name,
        room_id=room_id,
        created_at=created_at,
        room_creator=room_creator,
    )


@dataclass
class FakeRoomReader:
    _db: FakeDatabase

    async def get_by_id(self, room_id: str) -> Room | None:
        return self._db.rooms.get(room_id)

    async def list_rooms(self, *, limit: int | None = None) -> list[Room]:
        rooms = sorted(self._db.rooms.values(), key=lambda r: (r.created_at, r.id))
        return rooms[:limit] if limit is not None else rooms


@dataclass
class FakeRoomWriter:
    _db: FakeDatabase

    async def create(self, room_id: str, room: NewRoomDTO) -> Room:
        created = Room(
            id=room_id,
            name=room.name,
            description=room.description,
            created_at=self._db.server_timestamp(),
            created_by=room.created_by,
        )
        self._db.rooms[room_id] = created
        return created

    async def delete(self, room_id: str) -> bool:
        return self._db.rooms.pop(room_id, None) is not None


@dataclass
class FakeMessageReader:
    _db: FakeDatabase

    async def get_by_id(self, message_id: str) -> Message | None:
        return self._db.messages.get(message_id)

    async def list_messages(
        self, room_id: str, *, cursor: str | None = None, limit: int | None = None,
    ) -> list[Message]:
        items = sorted(
            (m for m in self._db.messages.values() if m.room_id == room_id),
            key=lambda m: (m.created_at, m.id),
        )
        if cursor:
            ts, doc_id = decode_cursor(cursor)
            items = [m for m in items if (m.created_at, m.id) < (ts, doc_id)]
        if limit is not None:
            items = items[-limit:] if limit else []
        return items


@dataclass
class FakeMessageWriter:
    _db: FakeDatabase

    async def create(self, message_id: str, message: NewMessageDTO) -> Message:
        created = Message(
            id=message_id,
            text=message.text,
            user_name=message.user_name,
            room_id=message.room_id,
            created_at=self._db.server_timestamp(),
            room_creator=message.room_creator,
        )
        self._db.messages[message_id] = created
        return created

    async def delete(self, message_id: str) -> Message | None:
        return self._db.messages.pop(message_id, None)

    async def delete_for_room(self, room_id: str) -> int:
        doomed = [m.id for m in self._db.messages.values() if m.room_id == room_id]
        for message_id in doomed:
            del self._db.messages[message_id]
        return len(doomed)


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    db: FakeDatabase = field(default_factory=FakeDatabase)
    rooms: FakeRoomReader | None = None
    rooms_w: FakeRoomWriter | None = None
    messages: FakeMessageReader | None = None
    messages_w: FakeMessageWriter | None = None
    _committed: bool = False
    _rolled_back: bool = False

    def __post_init__(self) -> None:
        self.rooms = FakeRoomReader(self.db)
        self.rooms_w = FakeRoomWriter(self.db)
        self.messages = FakeMessageReader(self.db)
        self.messages_w = FakeMessageWriter(self.db)

    async def __aenter__(self) -> FakeUoW:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is not None:
            await self.rollback()

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        self._rolled_back = True


@dataclass
class RecordingPublisher:
    published: list[tuple[str, dict[str, Any]]] = field(default_factory=list)
    fail: bool = False

    async def publish(self, channel: str, payload: dict[str, Any]) -> None:
        if self.fail:
            raise ConnectionError("redis down")
        self.published.append((channel, payload))


def make_store(
    db: FakeDatabase | None = None,
    publisher: RecordingPublisher | None = None,
    **kwargs: Any,
) -> LiveDocumentStore:
    db = db or FakeDatabase()
    return LiveDocumentStore(lambda: FakeUoW(db), publisher, **kwargs)


class EventLog:
    """Collects events a chat session emits to its socket."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    async def __call__(self, event_type: str, data: dict[str, Any]) -> None:
        self.events.append((event_type, data))

    def of_type(self, event_type: str) -> list[dict[str, Any]]:
        return [data for kind, data in self.events if kind == event_type]

    def last(self, event_type: str) -> dict[str, Any]:
        matching = self.of_type(event_type)
        assert matching, f"no {event_type!r} event emitted"
        return matching[-1]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def db(clock: FakeClock) -> FakeDatabase:
    return FakeDatabase(clock=clock)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def store(db: FakeDatabase, publisher: RecordingPublisher) -> LiveDocumentStore:
    return make_store(db, publisher)
