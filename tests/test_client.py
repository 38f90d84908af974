from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from roomplanner.client import APIError, DesignClient
from roomplanner.models import Room


def _mock_client(handler) -> DesignClient:
    return DesignClient(base_url="http://test/api", transport=httpx.MockTransport(handler))


def test_products_are_unwrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/products/"
        return httpx.Response(200, json={"success": True, "count": 1, "data": [
            {"id": "bed-1", "name": "Bed", "category": "bed", "width": 1.6,
             "length": 2.0, "height": 0.5, "defaultColor": "#FFFFFF"},
        ]})

    [bed] = asyncio.run(_mock_client(handler).get_products())
    assert bed.id == "bed-1"
    assert bed.category == "bed"


def test_failure_envelope_raises():
    def handler(request):
        return httpx.Response(404, json={"success": False, "message": "Design not found"})

    with pytest.raises(APIError) as exc:
        asyncio.run(_mock_client(handler).get_design("missing"))
    assert str(exc.value) == "Design not found"
    assert exc.value.status_code == 404


def test_unsuccessful_body_with_200_raises():
    def handler(request):
        return httpx.Response(200, json={"success": False, "message": "Server Error"})

    with pytest.raises(APIError):
        asyncio.run(_mock_client(handler).get_room("r"))


def test_non_json_response_raises():
    def handler(request):
        return httpx.Response(502, text="Bad Gateway")

    with pytest.raises(APIError) as exc:
        asyncio.run(_mock_client(handler).get_products())
    assert exc.value.status_code == 502


def test_transport_errors_are_wrapped():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(APIError, match="request error"):
        asyncio.run(_mock_client(handler).get_products())


def test_save_design_picks_create_or_update(session):
    calls = []
    stored = {}

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        calls.append((request.method, request.url.path, body))
        # Answer with the whole stored design, as the service does
        stored.update({"id": "d-1", **body})
        return httpx.Response(200, json={"success": True, "data": dict(stored)})

    client = _mock_client(handler)
    session.add_furniture("chair-1")

    saved = asyncio.run(client.save_session(session, "Draft"))
    assert saved.id == "d-1"
    assert session.current_design.id == "d-1"

    resaved = asyncio.run(client.save_session(session, "Draft 2"))
    assert resaved.name == "Draft 2"
    assert resaved.userId == "user-42"

    assert [(method, path) for method, path, _ in calls] == [
        ("POST", "/api/designs/"),
        ("PUT", "/api/designs/d-1"),
    ]
    assert calls[0][2]["roomId"] == "room-1"
    assert calls[0][2]["furniture"][0]["x"] == 2.5
    assert "id" not in calls[1][2]
    assert "userId" not in calls[1][2]


def test_deleting_bound_design_unbinds_session(api, session):
    from roomplanner.main import app

    client = DesignClient(base_url="http://test/api", transport=httpx.ASGITransport(app=app))
    session.add_furniture("chair-1")

    async def scenario():
        first = await client.save_session(session, "v1")
        await client.delete_design(first.id, session)
        unbound = session.current_design
        second = await client.save_session(session, "v2")
        designs = await client.get_user_designs("user-42")
        return first, unbound, second, designs

    first, unbound, second, designs = asyncio.run(scenario())

    assert unbound is None
    assert second.id != first.id
    assert [d.id for d in designs] == [second.id]


def test_deleting_other_design_keeps_binding(session):
    def handler(request):
        return httpx.Response(200, json={"success": True, "message": "Design deleted"})

    session.bind_design(session.serialize_design("Kept").model_copy(update={"id": "d-keep"}))
    asyncio.run(_mock_client(handler).delete_design("d-other", session))
    assert session.current_design.id == "d-keep"


def test_round_trip_through_service(api, session):
    from roomplanner.main import app

    client = DesignClient(base_url="http://test/api", transport=httpx.ASGITransport(app=app))

    async def scenario():
        room = await client.create_room(Room(name="Den", width=4, length=3, height=2.5,
                                             userId="user-42"))
        session.set_room(room)
        session.add_furniture("table-1")
        session.update_furniture(0, {"x": 0.5, "rotation": -15})
        saved = await client.save_session(session, "Den layout")

        fresh = type(session)()
        fresh.load_catalog(session.catalog)
        await client.open_design(fresh, saved.id)
        designs = await client.get_user_designs("user-42")
        return room, saved, fresh, designs

    room, saved, fresh, designs = asyncio.run(scenario())

    assert fresh.get_room().id == room.id
    assert (fresh.get_room().width, fresh.get_room().length) == (4, 3)
    [table] = fresh.get_placed_furniture()
    assert (table.x, table.z, table.rotation) == (0.5, 1.5, 345)
    assert table.placementId == session.get_placement(0).placementId
    assert [d.id for d in designs] == [saved.id]
