from __future__ import annotations

from fastapi import APIRouter, Query

from wordflight_chat.api.deps import StoreDep
from wordflight_chat.api.v1.schemas.room import CreateRoomRequest, DeleteRoomResponse, RoomResponse
from wordflight_chat.config import settings
from wordflight_chat.services import room_service

router = APIRouter(prefix="/api/v1/rooms", tags=["rooms"])


@router.get("", response_model=list[RoomResponse])
async def list_rooms(
    store: StoreDep,
    limit: int = Query(settings.ROOMS_LIMIT, ge=1, le=200),
) -> list[RoomResponse]:
    rooms = await room_service.list_rooms(store, limit)
    return [RoomResponse.model_validate(r, from_attributes=True) for r in rooms]


@router.post("", response_model=RoomResponse, status_code=201)
async def create_room(body: CreateRoomRequest, store: StoreDep) -> RoomResponse:
    room = await room_service.create_room(
        store, body.created_by.strip(), body.name, body.description,
    )
    return RoomResponse.model_validate(room, from_attributes=True)


@router.get("/{room_id}", response_model=RoomResponse)
async def get_room(room_id: str, store: StoreDep) -> RoomResponse:
    room = await room_service.get_room(store, room_id)
    return RoomResponse.model_validate(room, from_attributes=True)


@router.delete("/{room_id}", response_model=DeleteRoomResponse)
async def delete_room(room_id: str, store: StoreDep) -> DeleteRoomResponse:
    await room_service.get_room(store, room_id)
    removed = await room_service.delete_room(store, room_id)
    return DeleteRoomResponse(id=room_id, deleted_messages=removed)
