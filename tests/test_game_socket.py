import pytest

from labyrinth import socketio
from labyrinth.services import rooms


def _extract(event_name, received):
    return [p["args"][0] for p in received if p["name"] == event_name]


def test_join_game_sends_maze_state(socket_client):
    socket_client.emit("join_game", {"room": "m1", "seed": 3, "width": 12, "height": 10})
    rec = socket_client.get_received()
    states = _extract("maze_state", rec)
    assert len(states) == 1
    state = states[0]
    assert state["room"] == "m1"
    assert state["maze"]["width"] == 12 and state["maze"]["height"] == 10
    assert state["maze"]["seed"] == 3
    assert set(state["spawn"]) == {"x", "y", "z"}
    assert any(s["members"] == 1 for s in _extract("status", rec))
    assert rooms.get_room("m1") is not None


def test_second_player_gets_the_same_maze(test_app, socket_client):
    socket_client.emit("join_game", {"room": "shared", "seed": 21})
    first = _extract("maze_state", socket_client.get_received())[0]
    other = socketio.test_client(test_app, flask_test_client=test_app.test_client())
    try:
        other.emit("join_game", {"room": "shared", "seed": 999, "width": 40})
        second = _extract("maze_state", other.get_received())[0]
    finally:
        other.disconnect()
    assert second["maze"] == first["maze"]


@pytest.mark.parametrize(
    "payload,field,code",
    [
        ({"room": ""}, "room", "empty"),
        ({}, "room", "required"),
        ({"room": "x", "width": "big"}, "width", "type"),
        ({"room": "x", "width": True}, "width", "type"),
        ({"room": "x", "height": 1000}, "height", "max"),
        ({"room": "x", "pattern": "spiral"}, "pattern", "choices"),
    ],
)
def test_join_game_rejects_bad_payloads(socket_client, payload, field, code):
    socket_client.emit("join_game", payload)
    errors = _extract("error", socket_client.get_received())
    assert errors and errors[0]["field"] == field and errors[0]["code"] == code
    assert rooms.rooms_snapshot() == []


def test_leaving_last_member_closes_room(socket_client):
    socket_client.emit("join_game", {"room": "solo", "seed": 1})
    socket_client.get_received()
    socket_client.emit("leave_game", {"room": "solo"})
    assert rooms.get_room("solo") is None


def test_disconnect_releases_membership(socket_client):
    socket_client.emit("join_game", {"room": "dc", "seed": 1})
    socket_client.disconnect()
    assert rooms.get_room("dc") is None


def test_regenerate_maze(socket_client):
    socket_client.emit("regenerate_maze", {"room": "missing"})
    errors = _extract("error", socket_client.get_received())
    assert errors[0]["code"] == "not_found"

    socket_client.emit("join_game", {"room": "regen", "seed": 4, "width": 13, "height": 13})
    socket_client.get_received()
    socket_client.emit("regenerate_maze", {"room": "regen"})
    states = _extract("maze_state", socket_client.get_received())
    assert states and states[0]["room"] == "regen"
    assert states[0]["maze"]["width"] == 13
