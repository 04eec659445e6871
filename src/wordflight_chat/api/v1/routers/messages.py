from __future__ import annotations

from fastapi import APIRouter, Query, Response

from wordflight_chat.api.deps import StoreDep
from wordflight_chat.api.v1.schemas.common import PaginatedResponse
from wordflight_chat.api.v1.schemas.message import MessageResponse, SendMessageRequest
from wordflight_chat.config import settings
from wordflight_chat.services import message_service, room_service

router = APIRouter(prefix="/api/v1", tags=["messages"])


@router.get("/rooms/{room_id}/messages", response_model=PaginatedResponse[MessageResponse])
async def list_messages(
    room_id: str,
    store: StoreDep,
    cursor: str | None = Query(None),
    limit: int = Query(settings.LOAD_MORE_LIMIT, ge=1, le=200),
) -> PaginatedResponse[MessageResponse]:
    page = await message_service.list_messages(store, room_id, cursor, limit)
    return PaginatedResponse[MessageResponse](
        items=[MessageResponse.model_validate(m, from_attributes=True) for m in page.items],
        next_cursor=page.next_cursor,
    )


@router.post("/rooms/{room_id}/messages", response_model=MessageResponse, status_code=201)
async def send_message(
    room_id: str,
    body: SendMessageRequest,
    store: StoreDep,
) -> MessageResponse:
    room = await room_service.get_room(store, room_id)
    msg = await message_service.send_message(store, body.user_name.strip(), room, body.text)
    return MessageResponse.model_validate(msg, from_attributes=True)


@router.delete("/messages/{message_id}", status_code=204)
async def delete_message(message_id: str, store: StoreDep) -> Response:
    await message_service.delete_message(store, message_id)
    return Response(status_code=204)
