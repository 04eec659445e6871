from __future__ import annotations

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from wordflight_chat.application.dto.room import NewRoomDTO
from wordflight_chat.domain.entities.room import Room
from wordflight_chat.infrastructure.db.mappers import room as mapper
from wordflight_chat.infrastructure.db.models.room import RoomModel


class RoomReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, room_id: str) -> Room | None:
        result = await self._session.get(RoomModel, room_id)
        return mapper.model_to_entity(result) if result else None

    async def list_rooms(self, *, limit: int | None = None) -> list[Room]:
        stmt = select(RoomModel).order_by(
            RoomModel.created_at.asc().nullslast(), RoomModel.id.asc()
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class RoomWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, room_id: str, room: NewRoomDTO) -> Room:
        stmt = (
            insert(RoomModel)
            .values(
                id=room_id,
                name=room.name,
                description=room.description,
                created_by=room.created_by,
            )
            .returning(RoomModel)
        )
        result = await self._session.execute(stmt)
        return mapper.model_to_entity(result.scalar_one())

    async def delete(self, room_id: str) -> bool:
        stmt = delete(RoomModel).where(RoomModel.id == room_id)
        result = await self._session.execute(stmt)
        return bool(result.rowcount)
