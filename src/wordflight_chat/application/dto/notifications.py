from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Toast:
    room_id: str
    room_name: str
    message: str


@dataclass(frozen=True, slots=True)
class NativeNotification:
    title: str
    body: str
    icon: str
    tag: str


@dataclass(frozen=True, slots=True)
class ToneSpec:
    """Short sine blip the browser synthesizes for new messages."""

    frequency: float = 800.0
    wave: str = "sine"
    peak_gain: float = 0.1
    attack: float = 0.01
    floor_gain: float = 0.001
    duration: float = 0.3


NOTIFICATION_TONE = ToneSpec()


@dataclass(frozen=True, slots=True)
class Alert:
    """What to emit for one unseen message."""

    toast: Toast
    play_sound: bool
    native: NativeNotification | None = None
