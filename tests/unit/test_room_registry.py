from __future__ import annotations

from wordflight_chat.application.state.room_registry import RoomRegistry
from tests.conftest import make_room

GENERAL = make_room(room_id="r1", name="general")
RANDOM = make_room(room_id="r2", name="random")


def test_first_push_selects_first_room():
    registry = RoomRegistry()

    assert registry.apply([GENERAL, RANDOM]) is True
    assert registry.active_id == "r1"
    assert registry.active_room == GENERAL


def test_empty_list_has_no_active_room():
    registry = RoomRegistry()

    assert registry.apply([]) is False
    assert registry.active_id is None
    assert registry.active_room is None


def test_active_room_survives_reorder_and_additions():
    registry = RoomRegistry()
    registry.apply([GENERAL, RANDOM])
    registry.select("r2")

    assert registry.apply([GENERAL, RANDOM, make_room(room_id="r3", name="dev")]) is False
    assert registry.active_id == "r2"


def test_deleted_active_room_falls_back_to_first():
    registry = RoomRegistry()
    registry.apply([GENERAL, RANDOM])
    registry.select("r2")

    assert registry.apply([GENERAL]) is True
    assert registry.active_id == "r1"


def test_select_unknown_room_is_ignored():
    registry = RoomRegistry()
    registry.apply([GENERAL])

    assert registry.select("nope") is False
    assert registry.active_id == "r1"


def test_created_room_stays_active_until_echo():
    registry = RoomRegistry()
    registry.apply([GENERAL])

    registry.activate_created("r9")
    # A push that predates the new room must not steal the selection.
    assert registry.apply([GENERAL]) is False
    assert registry.active_id == "r9"

    registry.apply([GENERAL, make_room(room_id="r9", name="new")])
    assert registry.active_room is not None
    assert registry.active_room.name == "new"


def test_clear_active_only_for_matching_room():
    registry = RoomRegistry()
    registry.apply([GENERAL, RANDOM])

    assert registry.clear_active("r2") is False
    assert registry.active_id == "r1"
    assert registry.clear_active("r1") is True
    assert registry.active_id is None
