from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """UTC wall clock; watermarks compare against database server timestamps."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
