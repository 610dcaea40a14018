"""Lightweight payload validation for world events and JSON bodies.

Minimal schema-like checking with consistent error responses, shared by the
Socket.IO handlers and the HTTP world API.

Schema Mini-Language (Python dict):
{
  'field_name': ('type', required: bool, extras: dict)
}
Supported types: 'str', 'int', 'seed'
Extras:
  min / max (int bounds), max_len (str)

'seed' accepts an int or a non-empty string; conversion to a world seed is
left to ``coerce_seed``.

Example:
 ok, data_or_err = validate({'cx': 1, 'cy': 'a'}, UPDATE_WINDOW)
 -> (False, {'field': 'cy', 'error': 'expected int', 'code': 'type'})
"""
from __future__ import annotations

from typing import Any, Dict, Tuple

# bool is an int subclass; a JSON true must not pass as a coordinate
PRIMITIVES = {
    'str': (str,),
    'int': (int,),
    'seed': (int, str),
}

COORD_LIMIT = 1_000_000


def _fail(field: str, message: str, code: str) -> Tuple[bool, Dict[str, Any]]:
    return False, {'field': field, 'error': message, 'code': code}


def validate(payload: Any, schema: Dict[str, tuple]) -> Tuple[bool, Dict[str, Any]]:
    if not isinstance(payload, dict):
        return _fail('__root__', 'payload must be an object', 'type')
    out = {}
    for name, field_spec in schema.items():
        type_name, required = field_spec[0], field_spec[1]
        extras = field_spec[2] if len(field_spec) > 2 else {}
        if type_name not in PRIMITIVES:
            return _fail('__schema__', f'unsupported type {type_name}', 'schema')
        if name not in payload or payload[name] is None:
            if required:
                return _fail(name, 'missing required field', 'required')
            continue
        value = payload[name]
        if isinstance(value, bool) or not isinstance(value, PRIMITIVES[type_name]):
            return _fail(name, f'expected {type_name}', 'type')
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return _fail(name, 'must not be empty', 'empty')
            if 'max_len' in extras and len(value) > extras['max_len']:
                return _fail(name, 'too long', 'max_len')
        elif type_name == 'int':
            if 'min' in extras and value < extras['min']:
                return _fail(name, 'too small', 'min')
            if 'max' in extras and value > extras['max']:
                return _fail(name, 'too large', 'max')
        out[name] = value
    return True, out


def error_payload(event: str, result: Dict[str, Any]) -> Dict[str, Any]:
    return {'message': f"Invalid {event}: {result['error']}", 'field': result['field'], 'code': result['code']}


# Predefined schemas used by handlers
UPDATE_WINDOW = {
    'cx': ('int', True, {'min': -COORD_LIMIT, 'max': COORD_LIMIT}),
    'cy': ('int', True, {'min': -COORD_LIMIT, 'max': COORD_LIMIT}),
}
TILE_QUERY = {
    'x': ('int', True),
    'y': ('int', True),
}
SET_SEED = {
    'seed': ('seed', False, {'max_len': 128}),
}
