"""Room registry and the authoritative tick loop.

Each room owns exactly one Maze. All access to a room's maze goes through the
room lock so the tick loop, socket handlers and HTTP endpoints never interleave
mutations. The loop runs as a Socket.IO background task at TICK_RATE Hz and
emits ``maze_updated`` to a room whenever its maze changed on that tick.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Dict, List, Optional, Set, Tuple

from ..logging_utils import get_logger
from ..maze import Maze, MazeConfig
from ..settings import resolve_maze_config

TICK_RATE = 30  # Hz

_log = get_logger("rooms")

_rooms: Dict[str, "MazeRoom"] = {}
_registry_lock = threading.Lock()
_loop_started = False


class MazeRoom:
    def __init__(self, code: str, config: MazeConfig):
        self.code = code
        self.lock = threading.Lock()
        self.members: Set[str] = set()
        self.created = time.time()
        self.maze = Maze(config)
        self.maze.generate()

    def add_member(self, sid: str) -> int:
        self.members.add(sid)
        return len(self.members)

    def remove_member(self, sid: str) -> int:
        self.members.discard(sid)
        return len(self.members)

    def update(self, delta_ms: float) -> Optional[Dict[str, Any]]:
        """Advance the maze; the broadcast payload when a shift moved walls, else None."""
        with self.lock:
            if not self.maze.update(delta_ms):
                return None
            return self._payload(self.maze.last_changes)

    def shift_now(self) -> List[Tuple[int, int, bool]]:
        with self.lock:
            return self.maze.shift_now()

    def regenerate(self) -> Dict[str, Any]:
        with self.lock:
            return self.maze.regenerate()

    def spawn_position(self) -> Dict[str, float]:
        with self.lock:
            return self.maze.spawn_position()

    def to_json(self) -> Dict[str, Any]:
        with self.lock:
            return self.maze.to_json()

    def payload(self, changes: Optional[List[Tuple[int, int, bool]]] = None) -> Dict[str, Any]:
        """Broadcast body: room code, full maze, optional cell diff."""
        with self.lock:
            return self._payload(changes)

    def _payload(self, changes: Optional[List[Tuple[int, int, bool]]]) -> Dict[str, Any]:
        body = {"room": self.code, "maze": self.maze.to_json()}
        if changes is not None:
            body["changes"] = [[x, y, wall] for x, y, wall in changes]
        return body

    def summary(self) -> Dict[str, Any]:
        with self.lock:
            m = self.maze
            return {
                "room": self.code,
                "member_count": len(self.members),
                "created": self.created,
                "width": m.width,
                "height": m.height,
                "pattern": m.pattern.value if m.pattern else None,
                "seed": m.seed,
                "state": m.state.value,
                "shift_in": round(m.scheduler.remaining, 3) if m.scheduler else None,
            }

    def metrics(self) -> Dict[str, Any]:
        with self.lock:
            return dict(self.maze.metrics)

    def discard(self) -> None:
        with self.lock:
            self.maze.discard()


def get_room(code: str) -> Optional[MazeRoom]:
    return _rooms.get(code)


def get_or_create_room(code: str, **overrides) -> MazeRoom:
    """Return the room for ``code``, generating its maze on first use.

    Overrides only apply when the room is created; an existing room keeps the
    maze it already has. Raises MazeConfigError for invalid overrides.
    """
    with _registry_lock:
        room = _rooms.get(code)
        if room is not None:
            return room
        config = resolve_maze_config(overrides)
        room = MazeRoom(code, config)
        _rooms[code] = room
    _log.info(event="room_created", room=code, width=config.width, height=config.height, seed=room.maze.seed)
    return room


def close_room(code: str) -> bool:
    with _registry_lock:
        room = _rooms.pop(code, None)
    if room is None:
        return False
    room.discard()
    _log.info(event="room_closed", room=code)
    return True


def rooms_snapshot() -> List[Dict[str, Any]]:
    with _registry_lock:
        rooms = list(_rooms.values())
    return sorted((r.summary() for r in rooms), key=lambda s: s["room"])


def tick_rooms(delta_ms: float) -> List[Tuple[str, Dict[str, Any]]]:
    """Advance every room; returns (code, payload) for rooms whose maze changed."""
    with _registry_lock:
        rooms = list(_rooms.values())
    updates = []
    for room in rooms:
        try:
            payload = room.update(delta_ms)
        except Exception as exc:  # one bad room must not stall the others
            _log.error(event="room_tick_failed", room=room.code, error=repr(exc))
            continue
        if payload is not None:
            updates.append((room.code, payload))
    return updates


def run_tick_loop(socketio, rate: int = TICK_RATE, stop: Optional[threading.Event] = None) -> None:
    interval = 1.0 / rate
    last = time.monotonic()
    _log.info(event="tick_loop_started", rate=rate)
    while stop is None or not stop.is_set():
        socketio.sleep(interval)
        now = time.monotonic()
        delta_ms = (now - last) * 1000.0
        last = now
        for code, payload in tick_rooms(delta_ms):
            socketio.emit("maze_updated", payload, to=code)


def start_tick_loop(socketio) -> bool:
    """Start the background tick loop once per process."""
    global _loop_started
    with _registry_lock:
        if _loop_started:
            return False
        _loop_started = True
    socketio.start_background_task(run_tick_loop, socketio)
    return True


def reset_rooms() -> None:
    """Discard every room (test isolation and shutdown)."""
    with _registry_lock:
        rooms = list(_rooms.values())
        _rooms.clear()
    for room in rooms:
        room.discard()


__all__ = [
    "TICK_RATE",
    "MazeRoom",
    "get_room",
    "get_or_create_room",
    "close_room",
    "rooms_snapshot",
    "tick_rooms",
    "run_tick_loop",
    "start_tick_loop",
    "reset_rooms",
]
