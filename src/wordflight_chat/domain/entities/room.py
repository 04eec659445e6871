from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Room:
    id: str
    name: str
    description: str
    created_at: datetime | None
    created_by: str | None = None
