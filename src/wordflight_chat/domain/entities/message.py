from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Message:
    id: str
    text: str
    user_name: str
    room_id: str
    created_at: datetime | None
    room_creator: str | None = None
