import pytest

from signaling.rooms import RoomConflictError, RoomTable


def test_form_room_indexes_both_members():
    rooms = RoomTable()
    room = rooms.form_room("a", "b")

    assert room.first == "a"
    assert room.second == "b"
    assert rooms.partner_of("a") == "b"
    assert rooms.partner_of("b") == "a"
    assert rooms.room_of("a") is rooms.room_of("b")
    assert len(rooms) == 1


def test_form_room_rejects_members_already_paired():
    rooms = RoomTable()
    rooms.form_room("a", "b")

    with pytest.raises(RoomConflictError):
        rooms.form_room("c", "b")
    assert "c" not in rooms


def test_form_room_rejects_self_pairing():
    with pytest.raises(ValueError):
        RoomTable().form_room("a", "a")


def test_dissolve_removes_both_entries():
    rooms = RoomTable()
    rooms.form_room("a", "b")

    assert rooms.dissolve("b") == "a"
    assert "a" not in rooms
    assert "b" not in rooms
    assert len(rooms) == 0
    assert rooms.dissolve("a") is None


def test_room_ids_are_unique():
    rooms = RoomTable()
    first = rooms.form_room("a", "b")
    second = rooms.form_room("c", "d")
    assert first.id != second.id
    assert len(rooms) == 2
