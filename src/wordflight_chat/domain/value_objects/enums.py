from __future__ import annotations

from enum import StrEnum


class Collection(StrEnum):
    ROOMS = "rooms"
    MESSAGES = "messages"


class ChangeType(StrEnum):
    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"


class NotificationPermission(StrEnum):
    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"
