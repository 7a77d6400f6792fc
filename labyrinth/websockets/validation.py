"""Lightweight websocket payload validation utilities.

Minimal schema-like checking with clear, consistent error responses. Returns
(ok, value_or_error) tuples; the caller decides whether to emit an error event.

Schema Mini-Language (Python dict):
{
  'field_name': ('type', required: bool, extras: dict)
}
Supported types: 'str', 'int'
Extras:
  str: min_len, max_len, allow_empty, choices (normalized to lower case)
  int: min, max

Example:
 ok, data_or_err = validate({'room': 'A1', 'width': 25}, JOIN_GAME)

If invalid: (False, {'field': 'width', 'error': 'too large', 'code': 'max'})
If valid: (True, normalized_data)
"""
from __future__ import annotations

from typing import Any, Dict, Tuple

from ..maze.config import PATTERN_NAMES
from ..settings import MAX_DIMENSION

PRIMITIVES = {
    'str': str,
    'int': int,
}


def _fail(field: str, message: str, code: str) -> Tuple[bool, Dict[str, Any]]:
    return False, {'field': field, 'error': message, 'code': code}


def validate(payload: Any, schema: Dict[str, tuple]) -> Tuple[bool, Dict[str, Any]]:
    if not isinstance(payload, dict):
        return _fail('__root__', 'payload must be an object', 'type')
    out = {}
    for name, spec in schema.items():
        type_name, required = spec[0], spec[1]
        extras = spec[2] if len(spec) > 2 else {}
        if type_name not in PRIMITIVES:
            return _fail('__schema__', f'unsupported type {type_name}', 'schema')
        if name not in payload or payload[name] is None:
            if required:
                return _fail(name, 'missing required field', 'required')
            continue
        value = payload[name]
        # bool is an int subclass; reject it explicitly
        if not isinstance(value, PRIMITIVES[type_name]) or isinstance(value, bool):
            return _fail(name, f'expected {type_name}', 'type')
        if type_name == 'str':
            s = value if extras.get('allow_empty') else value.strip()
            if not extras.get('allow_empty') and len(s) == 0:
                return _fail(name, 'must not be empty', 'empty')
            if 'max_len' in extras and len(s) > extras['max_len']:
                return _fail(name, 'too long', 'max_len')
            if 'min_len' in extras and len(s) < extras['min_len']:
                return _fail(name, 'too short', 'min_len')
            if 'choices' in extras:
                s = s.lower()
                if s not in extras['choices']:
                    return _fail(name, 'unknown value', 'choices')
            out[name] = s
        elif type_name == 'int':
            if 'min' in extras and value < extras['min']:
                return _fail(name, 'too small', 'min')
            if 'max' in extras and value > extras['max']:
                return _fail(name, 'too large', 'max')
            out[name] = value
    return True, out


# Predefined schemas used by handlers
ROOM_ONLY = {
    'room': ('str', True, {'min_len': 1, 'max_len': 64})
}
JOIN_GAME = {
    'room': ('str', True, {'min_len': 1, 'max_len': 64}),
    'width': ('int', False, {'min': 1, 'max': MAX_DIMENSION}),
    'height': ('int', False, {'min': 1, 'max': MAX_DIMENSION}),
    'pattern': ('str', False, {'choices': PATTERN_NAMES}),
    'seed': ('int', False, {'min': 0}),
}
LEAVE_GAME = ROOM_ONLY
REGENERATE_MAZE = ROOM_ONLY
