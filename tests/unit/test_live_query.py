from __future__ import annotations

import pytest

from wordflight_chat.application.dto.snapshot import diff_snapshot
from wordflight_chat.domain.value_objects.enums import ChangeType, Collection
from wordflight_chat.infrastructure.store.live_query import LiveQueryHub
from tests.conftest import make_message


def test_first_snapshot_reports_everything_added():
    a, b = make_message(message_id="a"), make_message(message_id="b")

    snapshot = diff_snapshot([], [a, b])

    assert snapshot.docs == [a, b]
    assert snapshot.added() == [a, b]
    assert not snapshot.empty


def test_diff_reports_removed_added_modified():
    a, b = make_message(message_id="a"), make_message(message_id="b")
    b2 = make_message(message_id="b", text="edited")
    c = make_message(message_id="c")

    snapshot = diff_snapshot([a, b], [b2, c])

    assert [(ch.type, ch.doc.id) for ch in snapshot.changes] == [
        (ChangeType.REMOVED, "a"),
        (ChangeType.MODIFIED, "b"),
        (ChangeType.ADDED, "c"),
    ]


class _Source:
    def __init__(self) -> None:
        self.docs: list = []
        self.calls = 0

    async def fetch(self) -> list:
        self.calls += 1
        return list(self.docs)


@pytest.mark.asyncio
async def test_register_delivers_initial_snapshot_even_if_empty():
    hub = LiveQueryHub()
    source = _Source()
    received = []

    async def on_snapshot(snapshot):
        received.append(snapshot)

    await hub.register(Collection.ROOMS, source.fetch, on_snapshot)

    assert len(received) == 1
    assert received[0].empty
    assert len(hub) == 1


@pytest.mark.asyncio
async def test_notify_only_refreshes_matching_queries():
    hub = LiveQueryHub()
    general, random = _Source(), _Source()
    received: dict[str, list] = {"general": [], "random": []}

    async def on_general(snapshot):
        received["general"].append(snapshot)

    async def on_random(snapshot):
        received["random"].append(snapshot)

    await hub.register(Collection.MESSAGES, general.fetch, on_general, room_id="general")
    await hub.register(Collection.MESSAGES, random.fetch, on_random, room_id="random")

    general.docs = [make_message(message_id="m1", room_id="general")]
    await hub.notify(Collection.MESSAGES, "general")
    await hub.notify(Collection.ROOMS)

    assert len(received["general"]) == 2
    assert received["general"][-1].added()[0].id == "m1"
    assert len(received["random"]) == 1


@pytest.mark.asyncio
async def test_unchanged_result_is_not_pushed_again():
    hub = LiveQueryHub()
    source = _Source()
    source.docs = [make_message()]
    received = []

    async def on_snapshot(snapshot):
        received.append(snapshot)

    await hub.register(Collection.MESSAGES, source.fetch, on_snapshot, room_id="room-general")
    await hub.notify(Collection.MESSAGES, "room-general")

    assert source.calls == 2
    assert len(received) == 1


@pytest.mark.asyncio
async def test_closed_query_gets_no_more_callbacks():
    hub = LiveQueryHub()
    source = _Source()
    received = []

    async def on_snapshot(snapshot):
        received.append(snapshot)

    query = await hub.register(Collection.ROOMS, source.fetch, on_snapshot)
    query.close()
    query.close()
    source.docs = [make_message()]
    await hub.notify(Collection.ROOMS)
    await query.refresh()

    assert len(received) == 1
    assert not query.active
    assert len(hub) == 0


@pytest.mark.asyncio
async def test_fetch_error_goes_to_error_callback():
    hub = LiveQueryHub()
    errors = []

    async def failing_fetch():
        raise RuntimeError("boom")

    async def on_snapshot(snapshot):
        raise AssertionError("should not be called")

    await hub.register(Collection.ROOMS, failing_fetch, on_snapshot, errors.append)

    assert len(errors) == 1
    assert str(errors[0]) == "boom"


@pytest.mark.asyncio
async def test_network_toggle_pauses_and_resyncs():
    hub = LiveQueryHub()
    source = _Source()
    received = []

    async def on_snapshot(snapshot):
        received.append(snapshot)

    await hub.register(Collection.ROOMS, source.fetch, on_snapshot)
    hub.disable_network()
    source.docs = [make_message(message_id="late")]
    await hub.notify(Collection.ROOMS)
    assert len(received) == 1
    assert hub.network_enabled is False

    await hub.enable_network()

    assert hub.network_enabled is True
    assert len(received) == 2
    assert received[-1].added()[0].id == "late"
