"""Cursor helpers for paging back through room history.

Cursor format: base64("<iso-timestamp>|<message id>") of the oldest message
already loaded.
"""
from __future__ import annotations

import base64
import binascii
from datetime import datetime, timezone

from wordflight_chat.application.exceptions import ValidationError


def encode_cursor(ts: datetime | None, doc_id: str) -> str:
    ts_str = (ts or datetime.min.replace(tzinfo=timezone.utc)).isoformat()
    raw = f"{ts_str}|{doc_id}"
    cursor = base64.urlsafe_b64encode(raw.encode()).decode()
    return cursor.rstrip("=")


def decode_cursor(cursor: str) -> tuple[datetime, str]:
    # Restore base64 padding if it was stripped
    cursor += "=" * ((4 - len(cursor) % 4) % 4)
    try:
        raw = base64.urlsafe_b64decode(cursor.encode()).decode()
        ts_str, doc_id = raw.split("|", 1)
        return datetime.fromisoformat(ts_str), doc_id
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise ValidationError("Malformed cursor") from exc
