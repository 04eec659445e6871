"""Chat client state for one connected browser tab.

A session owns a room registry, a message feed and an unread tracker, plus
the live queries that feed them:

* one room-list query for the whole session,
* one "latest message" query per room, driving unread counts and alerts,
* one feed query for the active room, held only while the tab is visible.

User actions write to the store and return; the session's own view changes
only when the resulting push comes back through those queries.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from functools import partial
from typing import Any, Awaitable, Callable

from wordflight_chat.application import presenter
from wordflight_chat.application.dto.notifications import NOTIFICATION_TONE, Alert, Toast
from wordflight_chat.application.dto.snapshot import QuerySnapshot
from wordflight_chat.application.dto.views import SessionView
from wordflight_chat.application.exceptions import ForbiddenError, NotFoundError, ValidationError
from wordflight_chat.application.policies.permissions import assert_can_delete_message
from wordflight_chat.application.ports.clock import Clock
from wordflight_chat.application.ports.store import DocumentStore, Subscription
from wordflight_chat.application.state.message_feed import MessageFeed
from wordflight_chat.application.state.room_registry import RoomRegistry
from wordflight_chat.application.state.subscriptions import SubscriptionScope
from wordflight_chat.application.state.unread_tracker import DEFAULT_ICON, DEFAULT_TITLE, UnreadTracker
from wordflight_chat.domain.entities.message import Message
from wordflight_chat.domain.entities.room import Room
from wordflight_chat.domain.value_objects.enums import NotificationPermission
from wordflight_chat.services import message_service, room_service

logger = logging.getLogger(__name__)

Emit = Callable[[str, dict[str, Any]], Awaitable[None]]


class ChatSession:
    def __init__(
        self,
        user_name: str,
        store: DocumentStore,
        emit: Emit,
        *,
        clock: Clock | None = None,
        messages_limit: int = 25,
        toast_ttl: float = 5.0,
        app_title: str = DEFAULT_TITLE,
        icon: str = DEFAULT_ICON,
    ) -> None:
        self.user_name = user_name
        self._store = store
        self._emit = emit
        self._messages_limit = messages_limit
        self._toast_ttl = toast_ttl
        self._app_title = app_title

        self.registry = RoomRegistry()
        self.feed = MessageFeed()
        self.tracker = UnreadTracker(user_name, clock, icon=icon)

        self._rooms_sub: Subscription | None = None
        self._feed_subs = SubscriptionScope()
        self._latest_subs = SubscriptionScope()

        self.toast: Toast | None = None
        self._toast_task: asyncio.Task[None] | None = None
        self.online = True
        self._closed = False

    # -- lifecycle -------------------------------------------------------------

    async def start(self, permission: str = NotificationPermission.DEFAULT) -> None:
        self.tracker.permission = _parse_permission(permission) or NotificationPermission.DEFAULT
        await self._emit_state()
        self._rooms_sub = await self._store.listen_rooms(self._on_rooms, self._on_rooms_error)
        if self.tracker.permission == NotificationPermission.DEFAULT:
            await self._send("request_permission", {})
        logger.info("Session started for %s", self.user_name)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._toast_task is not None:
            self._toast_task.cancel()
            self._toast_task = None
        if self._rooms_sub is not None:
            self._rooms_sub.close()
            self._rooms_sub = None
        self._feed_subs.release_all()
        self._latest_subs.release_all()
        logger.info("Session closed for %s", self.user_name)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def paused(self) -> bool:
        return not self.tracker.visible

    def view(self) -> SessionView:
        room = self.registry.active_room
        return SessionView(
            user_name=self.user_name,
            current_room_id=self.registry.active_id,
            current_room_name=room.name if room else None,
            visible=self.tracker.visible,
            online=self.online,
            notifications_enabled=self.tracker.notifications_enabled,
            sound_enabled=self.tracker.sound_enabled,
            permission=self.tracker.permission.value,
            paused=self.paused,
            total_unread=self.tracker.total,
            title=self.tracker.title(self._app_title),
        )

    # -- user actions ------------------------------------------------------------

    async def select_room(self, room_id: str) -> None:
        if not self.registry.select(room_id):
            logger.debug("Ignoring selection of unknown room %s", room_id)
            return
        await self._activate()
        await self._emit_sidebar()

    async def create_room(self, name: str, description: str | None = None) -> Room | None:
        try:
            room = await room_service.create_room(self._store, self.user_name, name, description)
        except ValidationError:
            return None
        except Exception:
            logger.exception("Error creating room")
            await self._error("create_room_failed")
            return None

        self.registry.activate_created(room.id)
        await self._activate()
        await self._emit_sidebar()
        return room

    async def delete_room(self, room_id: str) -> None:
        try:
            await room_service.delete_room(self._store, room_id)
        except Exception:
            logger.exception("Error deleting room")
            await self._error("delete_room_failed")
            return

        self.tracker.forget(room_id)
        self._latest_subs.release(room_id)
        if self.registry.clear_active(room_id):
            await self._activate()
        await self._emit_sidebar()

    async def send_message(self, text: str) -> Message | None:
        room = self.registry.active_room
        try:
            message = await message_service.send_message(self._store, self.user_name, room, text)
        except ValidationError:
            return None
        except Exception:
            logger.exception("Error sending message")
            await self._error("send_failed")
            return None

        self.tracker.mark_read(message.room_id)
        await self._emit_sidebar()
        return message

    async def delete_message(self, message_id: str) -> None:
        message = self.feed.get(message_id)
        if message is None:
            return
        room = self.registry.active_room
        try:
            assert_can_delete_message(self.user_name, message, room.created_by if room else None)
            await message_service.delete_message(self._store, message_id)
        except ForbiddenError as exc:
            logger.warning("%s cannot delete message %s: %s", self.user_name, message_id, exc.detail)
            await self._error("forbidden", exc.detail)
        except NotFoundError:
            logger.debug("Message %s already deleted", message_id)
        except Exception:
            logger.exception("Error deleting message")
            await self._error("delete_message_failed")

    async def set_visible(self, visible: bool) -> None:
        self.tracker.set_visible(visible)
        await self._sync_feed()
        await self._emit_state()
        await self._emit_sidebar()

    async def focus(self) -> None:
        await self.set_visible(True)

    async def blur(self) -> None:
        await self.set_visible(False)

    async def toggle_notifications(self) -> None:
        self.tracker.toggle_notifications()
        await self._emit_state()

    async def toggle_sound(self) -> None:
        self.tracker.toggle_sound()
        await self._emit_state()

    async def set_permission(self, permission: str) -> None:
        parsed = _parse_permission(permission)
        if parsed is None:
            return
        self.tracker.permission = parsed
        await self._emit_state()

    async def set_online(self, online: bool) -> None:
        came_back = online and not self.online
        self.online = online
        if came_back:
            await self._resync()
        await self._emit_state()

    async def click_toast(self) -> None:
        toast = self.toast
        if toast is None:
            return
        await self.dismiss_toast()
        await self.select_room(toast.room_id)

    async def dismiss_toast(self) -> None:
        if self._toast_task is not None:
            self._toast_task.cancel()
            self._toast_task = None
        if self.toast is not None:
            self.toast = None
            await self._send("toast_cleared", {})

    # -- store pushes ----------------------------------------------------------------

    async def _on_rooms(self, snapshot: QuerySnapshot[Room]) -> None:
        if self._closed:
            return
        active_changed = self.registry.apply(snapshot.docs)
        await self._sync_room_watches()
        if active_changed:
            await self._activate()
        await self._emit_sidebar()

    def _on_rooms_error(self, exc: Exception) -> None:
        logger.error("Error fetching rooms for %s", self.user_name, exc_info=exc)

    async def _on_latest(self, room_id: str, snapshot: QuerySnapshot[Message]) -> None:
        if self._closed:
            return
        room = self.registry.get(room_id)
        if room is None:
            return
        added = snapshot.added()
        for message in added:
            alert = self.tracker.observe(room, message)
            if alert is not None:
                await self._raise_alert(alert)
        if added:
            await self._emit_sidebar()

    def _on_latest_error(self, exc: Exception) -> None:
        logger.error("Error watching latest messages for %s", self.user_name, exc_info=exc)

    async def _on_feed(self, room_id: str, snapshot: QuerySnapshot[Message]) -> None:
        if self._closed:
            return
        if self.feed.apply(room_id, snapshot.docs):
            await self._emit_messages()

    def _on_feed_error(self, exc: Exception) -> None:
        logger.error("Error fetching messages for %s", self.user_name, exc_info=exc)

    # -- subscriptions ------------------------------------------------------------------

    async def _sync_room_watches(self) -> None:
        room_ids = {room.id for room in self.registry.rooms}
        for gone in self._latest_subs.retain_only(room_ids):
            self.tracker.forget(gone)
        for room_id in room_ids:
            if room_id in self._latest_subs:
                continue
            handle = await self._store.listen_messages(
                room_id,
                partial(self._on_latest, room_id),
                self._on_latest_error,
                limit=1,
                newest_first=True,
            )
            if self._closed or self.registry.get(room_id) is None:
                handle.close()
                continue
            self._latest_subs.hold(room_id, handle)

    async def _activate(self) -> None:
        self.tracker.set_active(self.registry.active_id)
        await self._sync_feed()
        await self._emit_state()

    async def _sync_feed(self) -> None:
        """Hold a feed query for the active room only while the tab is visible."""
        wanted = self.registry.active_id if self.tracker.visible else None
        if wanted is not None and wanted in self._feed_subs and self.feed.room_id == wanted:
            return

        self._feed_subs.release_all()
        self.feed.reset(wanted)
        if wanted is None:
            await self._emit_messages()
            return

        handle = await self._store.listen_messages(
            wanted,
            partial(self._on_feed, wanted),
            self._on_feed_error,
            limit=self._messages_limit,
        )
        if self._closed or self.feed.room_id != wanted:
            handle.close()
            return
        self._feed_subs.hold(wanted, handle)

    async def _resync(self) -> None:
        if self._rooms_sub is not None:
            await self._rooms_sub.refresh()
        await self._latest_subs.refresh_all()
        await self._feed_subs.refresh_all()

    # -- notifications --------------------------------------------------------------------

    async def _raise_alert(self, alert: Alert) -> None:
        self._show_toast(alert.toast)
        await self._send("toast", asdict(alert.toast))
        if alert.play_sound:
            await self._send("play_sound", asdict(NOTIFICATION_TONE))
        if alert.native is not None:
            await self._send("notify", asdict(alert.native))

    def _show_toast(self, toast: Toast) -> None:
        if self._toast_task is not None:
            self._toast_task.cancel()
        self.toast = toast
        self._toast_task = asyncio.create_task(
            self._expire_toast(toast), name=f"toast-{self.user_name}",
        )

    async def _expire_toast(self, toast: Toast) -> None:
        await asyncio.sleep(self._toast_ttl)
        if self.toast is toast:
            self.toast = None
            self._toast_task = None
            await self._send("toast_cleared", {})

    # -- rendering ------------------------------------------------------------------------------

    async def _emit_state(self) -> None:
        await self._send("state", asdict(self.view()))

    async def _emit_sidebar(self) -> None:
        counts = self.tracker.counts
        rooms = presenter.render_rooms(
            self.registry.rooms, self.registry.active_id, counts, self.user_name,
        )
        await self._send(
            "rooms",
            {
                "current_room_id": self.registry.active_id,
                "rooms": [asdict(r) for r in rooms],
            },
        )
        await self._send("unread", asdict(presenter.render_unread(counts, self._app_title)))

    async def _emit_messages(self) -> None:
        room = self.registry.active_room
        messages = presenter.render_messages(
            self.feed.messages, self.user_name, room.created_by if room else None,
        )
        await self._send(
            "messages",
            {"room_id": self.feed.room_id, "messages": [asdict(m) for m in messages]},
        )

    async def _error(self, code: str, detail: str = "") -> None:
        await self._send("error", {"code": code, "detail": detail})

    async def _send(self, event_type: str, data: dict[str, Any]) -> None:
        if self._closed:
            return
        try:
            await self._emit(event_type, data)
        except Exception:
            logger.debug("Dropping %s event for %s", event_type, self.user_name, exc_info=True)


def _parse_permission(raw: str) -> NotificationPermission | None:
    try:
        return NotificationPermission(raw)
    except ValueError:
        return None
