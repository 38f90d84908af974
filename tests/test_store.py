from __future__ import annotations

import pytest
from pydantic import ValidationError

from roomplanner.bounds import ClampPolicy
from roomplanner.errors import IndexOutOfRange, InvalidRoomDimension, UnknownTemplateReference
from roomplanner.models import Design, PlacedFurniture, Room, RoomDetails
from roomplanner.store import DesignSession


def _assert_close(actual: float, expected: float, eps: float = 1e-9) -> None:
    assert abs(float(actual) - float(expected)) <= eps


def test_default_session_room():
    s = DesignSession()
    room = s.get_room()
    assert (room.width, room.length, room.height) == (5.0, 5.0, 3.0)
    assert room.floorColor == "#D2B48C"
    assert s.get_placed_furniture() == ()


def test_add_furniture_places_at_room_center(session):
    session.add_furniture("chair-1")
    [item] = session.get_placed_furniture()
    assert (item.x, item.y, item.z) == (2.5, 0.0, 2.5)
    assert item.rotation == 0
    assert item.scale == 1
    assert item.shade == 0
    assert item.color == "#8B4513"
    assert item.furnitureId == "chair-1"


def test_add_furniture_returns_nothing(session):
    assert session.add_furniture("table-1") is None


def test_add_unknown_template_is_rejected(session):
    with pytest.raises(UnknownTemplateReference) as exc:
        session.add_furniture("lamp-9")
    assert exc.value.template_id == "lamp-9"
    assert session.get_placed_furniture() == ()


def test_each_placement_gets_its_own_id(session):
    session.add_furniture("chair-1")
    session.add_furniture("chair-1")
    first, second = session.get_placed_furniture()
    assert first.placementId != second.placementId


def test_update_clamps_negative_x_to_wall(session):
    session.add_furniture("chair-1")
    session.update_furniture(0, {"x": -3})
    assert session.get_placed_furniture()[0].x == 0


def test_update_clamps_past_far_walls(session):
    session.add_furniture("chair-1")
    session.update_furniture(0, {"x": 12, "z": 7.5})
    item = session.get_placement(0)
    assert (item.x, item.z) == (5, 5)


def test_update_merges_other_fields(session):
    session.add_furniture("sofa-1")
    session.update_furniture(0, {"color": "#FF0000", "scale": 1.5, "roughness": 0.3})
    item = session.get_placement(0)
    assert item.color == "#FF0000"
    assert item.scale == 1.5
    assert item.roughness == 0.3
    assert (item.x, item.z) == (2.5, 2.5)


def test_update_out_of_range_leaves_sequence_unchanged(session):
    for template_id in ("chair-1", "table-1", "sofa-1"):
        session.add_furniture(template_id)
    before = session.get_placed_furniture()

    with pytest.raises(IndexOutOfRange):
        session.update_furniture(99, {"x": 1})
    with pytest.raises(IndexOutOfRange):
        session.update_furniture(-1, {"x": 1})

    assert session.get_placed_furniture() == before


def test_invalid_update_is_not_partially_applied(session):
    session.add_furniture("chair-1")
    with pytest.raises(ValueError):
        session.update_furniture(0, {"x": 1.0, "scale": -2})
    with pytest.raises(ValueError):
        session.update_furniture(0, {"x": 1.0, "colour": "#000000"})
    with pytest.raises(ValueError):
        session.update_furniture(0, {"furnitureId": "table-1"})
    assert session.get_placement(0).x == 2.5


def test_remove_reindexes(session):
    for template_id in ("chair-1", "table-1", "sofa-1"):
        session.add_furniture(template_id)
    session.remove_furniture(0)
    remaining = session.get_placed_furniture()
    assert len(remaining) == 2
    assert remaining[0].furnitureId == "table-1"
    assert remaining[1].furnitureId == "sofa-1"


def test_remove_out_of_range(session):
    session.add_furniture("chair-1")
    with pytest.raises(IndexOutOfRange):
        session.remove_furniture(1)
    assert len(session.get_placed_furniture()) == 1


def test_rotate_left_24_times_returns_to_zero(session):
    session.add_furniture("chair-1")
    seen = []
    for _ in range(24):
        seen.append(session.rotate_furniture(0, -15))
    assert seen[0] == 345
    assert all(0 <= angle < 360 for angle in seen)
    assert session.get_placement(0).rotation == 0


def test_rotation_update_is_normalized(session):
    session.add_furniture("chair-1")
    session.update_furniture(0, {"rotation": -90})
    assert session.get_placement(0).rotation == 270
    session.update_furniture(0, {"rotation": 720})
    assert session.get_placement(0).rotation == 0


def test_returned_sequence_is_read_only(session):
    session.add_furniture("chair-1")
    placed = session.get_placed_furniture()
    with pytest.raises(Exception):
        placed[0].x = 4.0
    assert isinstance(placed, tuple)


def test_set_room_rejects_non_positive_dimensions(session):
    before = session.get_room()
    for bad in ({"width": 0}, {"length": -1}, {"height": float("nan")}):
        with pytest.raises(InvalidRoomDimension):
            session.set_room(before.model_copy(update=bad))
    assert session.get_room() is before


def test_clamping_uses_current_room(session):
    session.add_furniture("chair-1")
    session.set_room(session.get_room().model_copy(update={"width": 3, "length": 2}))
    session.update_furniture(0, {"x": 4, "z": 4})
    item = session.get_placement(0)
    assert (item.x, item.z) == (3, 2)


def test_footprint_policy_keeps_item_inside(room, catalog):
    s = DesignSession(room, clamp_policy=ClampPolicy.FOOTPRINT)
    s.load_catalog(catalog)
    s.add_furniture("table-1")  # 1.6 x 0.9
    s.update_furniture(0, {"x": -3, "z": 10})
    item = s.get_placement(0)
    _assert_close(item.x, 0.8)
    _assert_close(item.z, 5 - 0.45)

    s.update_furniture(0, {"rotation": 90})
    s.update_furniture(0, {"x": 0})
    _assert_close(s.get_placement(0).x, 0.45)


def test_footprint_policy_reclamps_on_scale(room, catalog):
    s = DesignSession(room, clamp_policy=ClampPolicy.FOOTPRINT)
    s.load_catalog(catalog)
    s.add_furniture("table-1")
    s.update_furniture(0, {"x": 0})
    _assert_close(s.get_placement(0).x, 0.8)

    s.update_furniture(0, {"scale": 2.0})
    item = s.get_placement(0)
    assert item.scale == 2.0
    _assert_close(item.x, 1.6)
    _assert_close(item.z, 2.5)


def test_footprint_policy_reclamps_on_rotate(room, catalog):
    s = DesignSession(room, clamp_policy=ClampPolicy.FOOTPRINT)
    s.load_catalog(catalog)
    s.add_furniture("table-1")
    s.update_furniture(0, {"z": 0})
    _assert_close(s.get_placement(0).z, 0.45)

    assert s.rotate_furniture(0, 90) == 90
    item = s.get_placement(0)
    _assert_close(item.z, 0.8)
    _assert_close(item.x, 2.5)


def test_center_policy_ignores_footprint_on_rotate(session):
    session.add_furniture("table-1")
    session.update_furniture(0, {"z": 0})
    session.rotate_furniture(0, 90)
    assert session.get_placement(0).z == 0


def test_preview_does_not_commit(session):
    session.add_furniture("chair-1")
    assert session.preview_position(0, -1, 9) == (0, 5)
    assert session.get_placement(0).x == 2.5


def test_observers_are_notified(session):
    events = []
    unsubscribe = session.subscribe(lambda event, s: events.append(event))
    session.add_furniture("chair-1")
    session.update_furniture(0, {"x": 1})
    session.remove_furniture(0)
    session.set_room(session.get_room())
    unsubscribe()
    session.add_furniture("chair-1")
    assert events == ["placements", "placements", "placements", "room"]


def test_resolve_scale_and_mapping(session):
    t = session.resolve_scale((800, 600))
    _assert_close(t.scale, 96)
    _assert_close(session.to_view((0, 0))[0], 160)
    x, z = session.to_room(session.to_view((1.25, 3.75)))
    _assert_close(x, 1.25)
    _assert_close(z, 3.75)


def test_mapping_follows_room_changes(session):
    session.resolve_scale((800, 600))
    session.set_room(session.get_room().model_copy(update={"width": 10, "length": 10}))
    _assert_close(session.view_transform.scale, 48)


def test_scene_mapping_is_identity(session):
    t = session.resolve_scale(None)
    assert t.scale == 1
    assert session.to_view((1.5, 2.0)) == (1.5, 2.0)


def test_serialize_design_snapshot(session):
    session.add_furniture("chair-1")
    session.update_furniture(0, {"x": 1.0})
    design = session.serialize_design("Cozy")

    assert design.id is None
    assert design.name == "Cozy"
    assert design.roomId == "room-1"
    assert design.userId == "user-42"
    assert design.roomDetails == RoomDetails(width=5, length=5, height=3,
                                             wallColor="#FFFFFF", floorColor="#D2B48C")
    assert [f.x for f in design.furniture] == [1.0]
    assert session.current_design is design

    # Later edits do not leak into the snapshot
    session.update_furniture(0, {"x": 4.0})
    assert design.furniture[0].x == 1.0


def test_resave_keeps_identity_and_created_at(session):
    first = session.serialize_design("v1")
    session.bind_design(first.model_copy(update={"id": "d-1"}))
    second = session.serialize_design("v2")
    assert second.id == "d-1"
    assert second.createdAt == first.createdAt
    assert second.updatedAt >= first.updatedAt


def test_load_design_restores_room_and_placements(session):
    design = Design(
        id="d-7",
        name="Bedroom",
        roomId="room-9",
        userId="user-42",
        furniture=[
            PlacedFurniture(furnitureId="sofa-1", x=1, z=2, rotation=90, color="#000000"),
            PlacedFurniture(furnitureId="missing", x=3, z=1, color="#FFFFFF"),
        ],
        roomDetails=RoomDetails(width=4, length=3, height=2.5,
                                wallColor="#EEEEEE", floorColor="#333333"),
    )
    session.load_design(design)

    room = session.get_room()
    assert (room.id, room.width, room.length, room.height) == ("room-9", 4, 3, 2.5)
    assert room.floorColor == "#333333"
    assert [f.furnitureId for f in session.get_placed_furniture()] == ["sofa-1", "missing"]
    assert session.unresolved_placements() == [1]
    assert session.current_design is design


def test_load_design_with_bad_room_is_rejected(session):
    session.add_furniture("chair-1")
    # model_construct skips validation, as a record written before the check would
    details = RoomDetails.model_construct(width=0, length=3, height=2,
                                          wallColor="#FFFFFF", floorColor="#000000")
    design = Design(name="Broken", roomId="r", userId="u", roomDetails=details)
    with pytest.raises(InvalidRoomDimension):
        session.load_design(design)
    assert len(session.get_placed_furniture()) == 1


def test_reset_keeps_room_and_catalog(session):
    session.add_furniture("chair-1")
    session.serialize_design("x")
    session.reset()
    assert session.get_placed_furniture() == ()
    assert session.current_design is None
    assert len(session.catalog) == 3
    assert session.get_room().id == "room-1"


def test_invalid_initial_room():
    with pytest.raises(InvalidRoomDimension):
        DesignSession(Room(width=-1))


def test_room_details_must_be_positive():
    with pytest.raises(ValidationError):
        RoomDetails(width=4, length=-1, height=2.5, wallColor="#FFFFFF", floorColor="#000000")
