"""Socket.IO maze room handlers.

Events:
    - join_game: Join a maze room; payload { room, width?, height?, pattern?, seed? }
      (the optional fields only apply when the join creates the room)
    - leave_game: Leave a maze room; payload { room }
    - regenerate_maze: Replace the room's maze; payload { room }

Emits:
    - maze_state: Full maze for the joining client, or for the whole room after
      a regeneration; { room, maze, spawn? }
    - status: Room membership updates (join/leave)
    - error: { message, field, code } for invalid payloads
The tick loop (services.rooms) emits maze_updated to rooms whose maze shifted.
"""

from flask import request
from flask_socketio import emit, join_room, leave_room

from labyrinth import socketio

from ..logging_utils import get_logger
from ..maze import MazeConfigError
from ..services import rooms
from .validation import JOIN_GAME, LEAVE_GAME, REGENERATE_MAZE, validate

_log = get_logger("ws")


def _emit_invalid(event: str, result: dict) -> None:
    emit('error', {'message': f"Invalid {event}: {result['error']}", 'field': result['field'], 'code': result['code']})


@socketio.on('join_game')
def handle_join_game(data):
    ok, result = validate(data or {}, JOIN_GAME)
    if not ok:
        _emit_invalid('join_game', result)
        return
    code = result.pop('room')
    try:
        room = rooms.get_or_create_room(code, **result)
    except MazeConfigError as exc:
        emit('error', {'message': f'Invalid join_game: {exc.message}', 'field': exc.field, 'code': 'config'})
        return
    join_room(code)
    members = room.add_member(request.sid)
    emit('maze_state', {'room': code, 'maze': room.to_json(), 'spawn': room.spawn_position()})
    emit('status', {'msg': 'A player has joined the maze.', 'members': members}, to=code)
    _log.info(event="join_game", room=code, sid=request.sid, members=members)


@socketio.on('leave_game')
def handle_leave_game(data):
    ok, result = validate(data or {}, LEAVE_GAME)
    if not ok:
        _emit_invalid('leave_game', result)
        return
    code = result['room']
    leave_room(code)
    room = rooms.get_room(code)
    remaining = room.remove_member(request.sid) if room else 0
    if room and remaining == 0:
        rooms.close_room(code)
    else:
        emit('status', {'msg': 'A player has left the maze.', 'members': remaining}, to=code)
    _log.info(event="leave_game", room=code, sid=request.sid, remaining=remaining)


@socketio.on('regenerate_maze')
def handle_regenerate_maze(data):
    ok, result = validate(data or {}, REGENERATE_MAZE)
    if not ok:
        _emit_invalid('regenerate_maze', result)
        return
    code = result['room']
    room = rooms.get_room(code)
    if room is None:
        emit('error', {'message': f'Unknown room {code}', 'field': 'room', 'code': 'not_found'})
        return
    room.regenerate()
    emit('maze_state', room.payload(), to=code)
    _log.info(event="regenerate_maze", room=code)


@socketio.on('disconnect')
def handle_disconnect(*_args):
    sid = request.sid
    for summary in rooms.rooms_snapshot():
        room = rooms.get_room(summary['room'])
        if room and sid in room.members and room.remove_member(sid) == 0:
            rooms.close_room(room.code)
