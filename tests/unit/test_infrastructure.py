from __future__ import annotations

from datetime import datetime, timezone

import pytest

from wordflight_chat.application.exceptions import ValidationError
from wordflight_chat.application.state.subscriptions import SubscriptionScope
from wordflight_chat.domain.value_objects.enums import Collection
from wordflight_chat.infrastructure.bus.serializer import deserialize_event, serialize_event
from wordflight_chat.infrastructure.db.repositories._cursor import decode_cursor, encode_cursor


class _Handle:
    def __init__(self) -> None:
        self.active = True
        self.refreshed = 0

    def close(self) -> None:
        self.active = False

    async def refresh(self) -> None:
        self.refreshed += 1


def test_cursor_roundtrip():
    ts = datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)

    assert decode_cursor(encode_cursor(ts, "abc")) == (ts, "abc")


def test_malformed_cursor_is_a_validation_error():
    with pytest.raises(ValidationError):
        decode_cursor("not-a-cursor!")


def test_serializer_handles_enums_and_datetimes():
    ts = datetime(2024, 5, 1, tzinfo=timezone.utc)

    raw = serialize_event("store.changed", {"collection": Collection.ROOMS, "at": ts})

    assert deserialize_event(raw) == (
        "store.changed",
        {"collection": "rooms", "at": "2024-05-01T00:00:00+00:00"},
    )


def test_scope_replacing_a_key_closes_previous_handle():
    scope = SubscriptionScope()
    first, second = _Handle(), _Handle()

    scope.hold("general", first)
    scope.hold("general", second)

    assert first.active is False
    assert second.active is True
    assert len(scope) == 1


def test_scope_retain_only_returns_dropped_keys():
    scope = SubscriptionScope()
    handles = {key: _Handle() for key in ("a", "b", "c")}
    for key, handle in handles.items():
        scope.hold(key, handle)

    dropped = scope.retain_only({"a"})

    assert sorted(dropped) == ["b", "c"]
    assert list(scope) == ["a"]
    assert not handles["b"].active and not handles["c"].active
    assert scope.release("missing") is False


@pytest.mark.asyncio
async def test_scope_release_all_and_refresh():
    scope = SubscriptionScope()
    a, b = _Handle(), _Handle()
    scope.hold("a", a)
    scope.hold("b", b)

    await scope.refresh_all()
    scope.release_all()

    assert (a.refreshed, b.refreshed) == (1, 1)
    assert "a" not in scope
    assert not a.active and not b.active
