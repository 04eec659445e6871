from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CreateRoomRequest(BaseModel):
    name: str = Field(max_length=200)
    description: str | None = None
    created_by: str = Field(min_length=1, max_length=100)


class RoomResponse(BaseModel):
    id: str
    name: str
    description: str
    created_at: datetime | None
    created_by: str | None

    model_config = {"from_attributes": True}


class DeleteRoomResponse(BaseModel):
    id: str
    deleted_messages: int
