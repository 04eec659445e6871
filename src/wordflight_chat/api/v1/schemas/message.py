from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SendMessageRequest(BaseModel):
    text: str
    user_name: str = Field(min_length=1, max_length=100)


class MessageResponse(BaseModel):
    id: str
    text: str
    user_name: str
    room_id: str
    created_at: datetime | None
    room_creator: str | None

    model_config = {"from_attributes": True}
