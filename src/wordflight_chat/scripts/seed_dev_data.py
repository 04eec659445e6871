"""Seed development data: a couple of rooms with a short conversation."""
from __future__ import annotations

import asyncio
import logging

from wordflight_chat.application.dto.message import NewMessageDTO
from wordflight_chat.application.dto.room import NewRoomDTO
from wordflight_chat.infrastructure.db.session import init_models
from wordflight_chat.infrastructure.db.uow import new_uow
from wordflight_chat.infrastructure.store.document_store import LiveDocumentStore
from wordflight_chat.logging_config import setup_logging

logger = logging.getLogger(__name__)

ROOMS = [
    ("general", "Anything goes", "Alice"),
    ("random", "", "Bob"),
]

MESSAGES = [
    ("general", "Alice", "Hi everyone!"),
    ("general", "Bob", "Hey Alice, welcome aboard."),
    ("random", "Bob", "Anyone up for lunch?"),
]


async def seed() -> None:
    await init_models()
    # No publisher: running servers pick the data up on their next refresh.
    store = LiveDocumentStore(new_uow, publisher=None)

    created = {}
    for name, description, creator in ROOMS:
        room = await store.add_room(NewRoomDTO(name=name, description=description, created_by=creator))
        created[name] = room

    for room_name, author, text in MESSAGES:
        room = created[room_name]
        await store.add_message(
            NewMessageDTO(text=text, user_name=author, room_id=room.id, room_creator=room.created_by)
        )

    logger.info("Seeded %d rooms with %d messages", len(created), len(MESSAGES))


def main() -> None:
    setup_logging()
    asyncio.run(seed())


if __name__ == "__main__":
    main()
