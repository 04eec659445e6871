"""Per-room unread counters, last-seen watermarks and notification gating.

Each room carries a watermark (the instant up to which its messages count as
seen) and a counter. Every transition is driven from outside: visibility
changes, room switches and "message added" pushes. Nothing here runs on its
own.

A message counts as unseen when its author is someone else and its server
timestamp is strictly later than the room's watermark. The watermark comes
from this process's clock while message timestamps come from the database
server, so skew or late delivery can make the counter drift in either
direction. Counters are a hint, not an exact unseen count.
"""
from __future__ import annotations

import logging
from datetime import datetime

from wordflight_chat.application.dto.notifications import Alert, NativeNotification, Toast
from wordflight_chat.application.ports.clock import Clock, SystemClock
from wordflight_chat.domain.entities.message import Message
from wordflight_chat.domain.entities.room import Room
from wordflight_chat.domain.value_objects.enums import NotificationPermission

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "WordFlight"
DEFAULT_ICON = "/WFLogo.png"


def format_title(total: int, base: str = DEFAULT_TITLE) -> str:
    return f"({total}) {base}" if total > 0 else base


class UnreadTracker:
    def __init__(
        self,
        user_name: str,
        clock: Clock | None = None,
        *,
        notifications_enabled: bool = True,
        sound_enabled: bool = True,
        icon: str = DEFAULT_ICON,
    ) -> None:
        self.user_name = user_name
        self._clock = clock or SystemClock()
        self._counts: dict[str, int] = {}
        self._watermarks: dict[str, datetime] = {}
        # Rooms never visited treat everything before the session as seen.
        self._started_at = self._clock.now()

        self.visible = True
        self.active_room_id: str | None = None
        self.notifications_enabled = notifications_enabled
        self.sound_enabled = sound_enabled
        self.permission = NotificationPermission.DEFAULT
        self._icon = icon

    # -- reads ---------------------------------------------------------------

    @property
    def counts(self) -> dict[str, int]:
        return dict(self._counts)

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    def count(self, room_id: str) -> int:
        return self._counts.get(room_id, 0)

    def watermark(self, room_id: str) -> datetime:
        return self._watermarks.get(room_id, self._started_at)

    def in_view(self, room_id: str) -> bool:
        return self.visible and room_id == self.active_room_id

    def title(self, base: str = DEFAULT_TITLE) -> str:
        return format_title(self.total, base)

    # -- transitions ---------------------------------------------------------

    def mark_read(self, room_id: str) -> None:
        self._counts[room_id] = 0
        self._watermarks[room_id] = self._clock.now()

    def set_visible(self, visible: bool) -> None:
        self.visible = visible
        if visible and self.active_room_id:
            self.mark_read(self.active_room_id)

    def set_active(self, room_id: str | None) -> None:
        self.active_room_id = room_id
        if room_id and self.visible:
            self.mark_read(room_id)

    def forget(self, room_id: str) -> None:
        self._counts.pop(room_id, None)
        self._watermarks.pop(room_id, None)

    def toggle_notifications(self) -> bool:
        self.notifications_enabled = not self.notifications_enabled
        return self.notifications_enabled

    def toggle_sound(self) -> bool:
        self.sound_enabled = not self.sound_enabled
        return self.sound_enabled

    def observe(self, room: Room, message: Message) -> Alert | None:
        """Account for a newly added message in ``room``.

        Bumps the room's counter when the message is unseen and the room is not
        in view, and returns the alert to show, if notifications are on.
        """
        if not self._is_unseen(room.id, message):
            return None
        if self.in_view(room.id):
            return None

        self._counts[room.id] = self._counts.get(room.id, 0) + 1
        logger.debug("Unread in %s is now %d", room.id, self._counts[room.id])

        if not self.notifications_enabled:
            return None

        native = None
        if self.permission == NotificationPermission.GRANTED:
            native = NativeNotification(
                title=f"New message in #{room.name}",
                body=f"{message.user_name}: {message.text}",
                icon=self._icon,
                tag=room.id,
            )
        return Alert(
            toast=Toast(room_id=room.id, room_name=room.name, message=message.text),
            play_sound=self.sound_enabled,
            native=native,
        )

    def _is_unseen(self, room_id: str, message: Message) -> bool:
        if message.user_name == self.user_name:
            return False
        if message.created_at is None:
            return False
        return message.created_at > self.watermark(room_id)
