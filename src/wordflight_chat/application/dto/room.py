from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NewRoomDTO:
    name: str
    description: str = ""
    created_by: str | None = None
