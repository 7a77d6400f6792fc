"""Maze HTTP API.

Endpoints:
    GET  /api/maze/preview                  one-off maze (not attached to a room)
         query: seed, width, height, pattern, format=json|ascii
    GET  /api/maze/rooms                    summary of live rooms
    GET  /api/maze/rooms/<code>             full maze for a room
    GET  /api/maze/rooms/<code>/metrics     generation and shift counters
    POST /api/maze/rooms/<code>/shift       force a shift now
    POST /api/maze/rooms/<code>/regenerate  replace the room's maze

Bad parameters answer 400 {error}; unknown rooms answer 404 {error}.
"""
from flask import Blueprint, Response, jsonify, request

from labyrinth import socketio

from ..maze import Maze, MazeConfigError
from ..services import rooms
from ..settings import MAX_DIMENSION, resolve_maze_config

bp_maze = Blueprint('maze', __name__, url_prefix='/api/maze')


def _int_arg(name, lo=None, hi=None):
    raw = request.args.get(name)
    if raw is None or raw == '':
        return None
    try:
        value = int(raw)
    except ValueError:
        raise MazeConfigError(name, 'must be an integer')
    if lo is not None and value < lo:
        raise MazeConfigError(name, f'must be >= {lo}')
    if hi is not None and value > hi:
        raise MazeConfigError(name, f'must be <= {hi}')
    return value


def _room_or_404(code):
    room = rooms.get_room(code)
    if room is None:
        return None, (jsonify({'error': f'unknown room {code}'}), 404)
    return room, None


@bp_maze.errorhandler(MazeConfigError)
def _bad_config(exc):
    return jsonify({'error': str(exc), 'field': exc.field}), 400


@bp_maze.route('/preview', methods=['GET'])
def preview():
    overrides = {
        'seed': _int_arg('seed', lo=0),
        'width': _int_arg('width', lo=1, hi=MAX_DIMENSION),
        'height': _int_arg('height', lo=1, hi=MAX_DIMENSION),
        'pattern': (request.args.get('pattern') or '').strip().lower() or None,
    }
    maze = Maze(resolve_maze_config(overrides))
    data = maze.generate()
    if request.args.get('format') == 'ascii':
        return Response(maze.to_ascii() + '\n', mimetype='text/plain')
    return jsonify(data)


@bp_maze.route('/rooms', methods=['GET'])
def list_rooms():
    return jsonify({'rooms': rooms.rooms_snapshot()})


@bp_maze.route('/rooms/<code>', methods=['GET'])
def room_detail(code):
    room, err = _room_or_404(code)
    if err:
        return err
    return jsonify(room.payload())


@bp_maze.route('/rooms/<code>/metrics', methods=['GET'])
def room_metrics(code):
    room, err = _room_or_404(code)
    if err:
        return err
    return jsonify({'room': code, 'metrics': room.metrics()})


@bp_maze.route('/rooms/<code>/shift', methods=['POST'])
def room_shift(code):
    room, err = _room_or_404(code)
    if err:
        return err
    changes = room.shift_now()
    payload = room.payload(changes)
    if changes:
        socketio.emit('maze_updated', payload, to=code)
    return jsonify(payload)


@bp_maze.route('/rooms/<code>/regenerate', methods=['POST'])
def room_regenerate(code):
    room, err = _room_or_404(code)
    if err:
        return err
    room.regenerate()
    payload = room.payload()
    socketio.emit('maze_state', payload, to=code)
    return jsonify(payload)
