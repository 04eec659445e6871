from __future__ import annotations

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from wordflight_chat.application.dto.message import NewMessageDTO
from wordflight_chat.domain.entities.message import Message
from wordflight_chat.infrastructure.db.mappers import message as mapper
from wordflight_chat.infrastructure.db.models.message import MessageModel
from wordflight_chat.infrastructure.db.repositories._cursor import decode_cursor


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, message_id: str) -> Message | None:
        result = await self._session.get(MessageModel, message_id)
        return mapper.model_to_entity(result) if result else None

    async def list_messages(
        self,
        room_id: str,
        *,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(MessageModel.room_id == room_id)
            .order_by(MessageModel.created_at.desc().nullsfirst(), MessageModel.id.desc())
        )
        if cursor:
            ts, mid = decode_cursor(cursor)
            stmt = stmt.where(
                (MessageModel.created_at < ts)
                | ((MessageModel.created_at == ts) & (MessageModel.id < mid))
            )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        newest_first = [mapper.model_to_entity(m) for m in result.scalars().all()]
        return newest_first[::-1]


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, message_id: str, message: NewMessageDTO) -> Message:
        stmt = (
            insert(MessageModel)
            .values(
                id=message_id,
                text=message.text,
                user_name=message.user_name,
                room_id=message.room_id,
                room_creator=message.room_creator,
            )
            .returning(MessageModel)
        )
        result = await self._session.execute(stmt)
        return mapper.model_to_entity(result.scalar_one())

    async def delete(self, message_id: str) -> Message | None:
        stmt = delete(MessageModel).where(MessageModel.id == message_id).returning(MessageModel)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def delete_for_room(self, room_id: str) -> int:
        stmt = delete(MessageModel).where(MessageModel.room_id == room_id)
        result = await self._session.execute(stmt)
        return result.rowcount or 0
