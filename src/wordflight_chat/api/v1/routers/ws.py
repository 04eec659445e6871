from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from wordflight_chat.api.deps import get_store
from wordflight_chat.config import settings
from wordflight_chat.infrastructure.ws.manager import ConnectionManager
from wordflight_chat.infrastructure.ws.protocol import WsInbound, WsOutbound
from wordflight_chat.services.chat_session import ChatSession

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])

manager = ConnectionManager(send_timeout=settings.WS_SEND_TIMEOUT_SECONDS)


def get_manager() -> ConnectionManager:
    return manager


@router.websocket("/ws/chat")
async def ws_chat(
    websocket: WebSocket,
    name: str = Query(""),
    permission: str = Query("default"),
) -> None:
    user_name = name.strip()
    if not user_name:
        await websocket.close(code=4001, reason="Display name required")
        return

    session = ChatSession(
        user_name,
        get_store(websocket),
        partial(manager.send, websocket),
        messages_limit=settings.MESSAGES_LIMIT,
        toast_ttl=settings.TOAST_TTL_SECONDS,
        app_title=settings.APP_TITLE,
        icon=settings.NOTIFICATION_ICON,
    )
    await manager.connect(websocket, session)

    heartbeat_task = asyncio.create_task(
        _heartbeat(websocket), name=f"ws-heartbeat-{user_name}",
    )
    try:
        await session.start(permission)
        await _read_loop(websocket, session)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error for %s", user_name)
    finally:
        heartbeat_task.cancel()
        await manager.disconnect(websocket)


async def _heartbeat(ws: WebSocket) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            await ws.send_text(WsOutbound(type="pong", data={}).model_dump_json())
    except asyncio.CancelledError:
        pass
    except Exception:
        pass


async def _read_loop(ws: WebSocket, session: ChatSession) -> None:
    while True:
        raw = await ws.receive_text()
        try:
            msg = WsInbound.model_validate_json(raw)
        except Exception:
            await _send_error(ws, "invalid_payload")
            continue
        await _dispatch(ws, session, msg)


async def _dispatch(ws: WebSocket, session: ChatSession, msg: WsInbound) -> None:
    data = msg.data

    if msg.type == "ping":
        await ws.send_text(WsOutbound(type="pong", data={}).model_dump_json())

    elif msg.type == "select_room":
        room_id = data.get("room_id")
        if isinstance(room_id, str):
            await session.select_room(room_id)

    elif msg.type == "create_room":
        await session.create_room(str(data.get("name", "")), data.get("description"))

    elif msg.type == "delete_room":
        room_id = data.get("room_id")
        if isinstance(room_id, str):
            await session.delete_room(room_id)

    elif msg.type == "send_message":
        await session.send_message(str(data.get("text", "")))

    elif msg.type == "delete_message":
        message_id = data.get("message_id")
        if isinstance(message_id, str):
            await session.delete_message(message_id)

    elif msg.type == "visibility":
        await session.set_visible(_flag(data, "visible"))

    elif msg.type == "focus":
        await session.focus()

    elif msg.type == "blur":
        await session.blur()

    elif msg.type == "toggle_notifications":
        await session.toggle_notifications()

    elif msg.type == "toggle_sound":
        await session.toggle_sound()

    elif msg.type == "toast_click":
        await session.click_toast()

    elif msg.type == "toast_dismiss":
        await session.dismiss_toast()

    elif msg.type == "permission":
        await session.set_permission(str(data.get("state", "")))

    elif msg.type == "network":
        await session.set_online(_flag(data, "online"))

    else:
        await _send_error(ws, "unknown_type", type=msg.type)


def _flag(data: dict[str, Any], key: str) -> bool:
    return bool(data.get(key, True))


async def _send_error(ws: WebSocket, code: str, **extra: Any) -> None:
    await ws.send_text(WsOutbound(type="error", data={"code": code, **extra}).model_dump_json())
