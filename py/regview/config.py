"""Loading register definitions from JSON documents.

The document maps register ids to definitions, optionally nested under a
top-level ``registers`` key::

    {"registers": {"CTRL": {"title": "Control", "isReadOnly": false, "width": 16,
        "fields": [{"name": "EN", "type": "checkbox", "bit": 0},
                   {"name": "MODE", "type": "select", "bits": [7, 6, 5],
                    "options": {"0": "Off", "1": "Slow", "2": "Fast"}},
                   {"name": "REV", "type": "display", "bits": "15:12"}]}}}

``bits`` is MSB-first, either a list or a ``"high:low"`` range. A field with
neither ``bit`` nor ``bits`` is accepted here and reported when used.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Mapping

from .bits import bit_range
from .fields import (
    FIELD_CLASSES,
    FieldDefinitionError,
    FieldKind,
    RegisterDefinition,
    RegisterDefinitionError,
    RegisterRegistry,
    SelectField,
)
from .formatting import DEFAULT_WIDTH

logger = logging.getLogger(__name__)


def _parse_index(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise FieldDefinitionError(f'{what}: expected a bit index, got {value!r}')
    if isinstance(value, int):
        index = value
    elif isinstance(value, str):
        try:
            index = int(value.strip(), 0)
        except ValueError:
            raise FieldDefinitionError(f'{what}: invalid bit index {value!r}') from None
    else:
        raise FieldDefinitionError(f'{what}: expected a bit index, got {type(value).__name__}')
    if index < 0:
        raise FieldDefinitionError(f'{what}: bit index must be non-negative, got {index}')
    return index


def _parse_bits(value: Any, what: str) -> tuple[int, ...]:
    if isinstance(value, str):
        parts = value.split(':')
        if len(parts) != 2:
            raise FieldDefinitionError(f"{what}: bit range must look like 'high:low', got {value!r}")
        high = _parse_index(parts[0], what)
        low = _parse_index(parts[1], what)
        if high < low:
            raise FieldDefinitionError(f'{what}: high bit ({high}) must be >= low bit ({low})')
        return bit_range(high, low)

    if isinstance(value, (list, tuple)):
        return tuple(_parse_index(v, what) for v in value)

    raise FieldDefinitionError(f'{what}: bits must be a list or a "high:low" string, got {type(value).__name__}')


def _parse_options(value: Any, what: str) -> dict[int, str]:
    options: dict[int, str] = {}

    if isinstance(value, Mapping):
        for key, label in value.items():
            options[_parse_index(key, f'{what} option')] = str(label)
    elif isinstance(value, (list, tuple)):
        for item in value:
            if isinstance(item, Mapping):
                if 'value' not in item:
                    raise FieldDefinitionError(f'{what}: option is missing "value"')
                opt = _parse_index(item['value'], f'{what} option')
                options[opt] = str(item.get('label', opt))
            else:
                opt = _parse_index(item, f'{what} option')
                options[opt] = str(opt)
    else:
        raise FieldDefinitionError(f'{what}: options must be a mapping or a list')

    return options


def field_from_dict(doc: Mapping[str, Any], register_id: str = '?'):
    if not isinstance(doc, Mapping):
        raise FieldDefinitionError(f"Register '{register_id}': field must be an object")

    name = doc.get('name')
    what = f"Register '{register_id}' field '{name}'"

    try:
        kind = FieldKind(doc.get('type'))
    except ValueError:
        raise FieldDefinitionError(f"{what}: unknown field type {doc.get('type')!r}") from None

    kwargs: dict[str, Any] = {
        'name': name,
        'description': doc.get('description'),
    }

    if doc.get('bit') is not None:
        kwargs['bit'] = _parse_index(doc['bit'], what)
    if doc.get('bits') is not None:
        kwargs['bits'] = _parse_bits(doc['bits'], what)

    cls = FIELD_CLASSES[kind]
    if cls is SelectField:
        kwargs['options'] = _parse_options(doc.get('options', {}), what)
    elif 'options' in doc:
        logger.warning(f'{what}: options are ignored for {kind.value} fields')

    if 'bit' not in kwargs and 'bits' not in kwargs:
        logger.warning(f'{what}: neither bit nor bits defined')

    return cls(**kwargs)


def register_from_dict(register_id: str, doc: Mapping[str, Any]) -> RegisterDefinition:
    if not isinstance(doc, Mapping):
        raise RegisterDefinitionError(f"Register '{register_id}': definition must be an object")

    fields = doc.get('fields', [])
    if not isinstance(fields, (list, tuple)):
        raise RegisterDefinitionError(f"Register '{register_id}': fields must be a list")

    return RegisterDefinition(
        id=register_id,
        fields=tuple(field_from_dict(f, register_id) for f in fields),
        is_read_only=bool(doc.get('isReadOnly', False)),
        width=doc.get('width', DEFAULT_WIDTH),
        title=doc.get('title'),
        description=doc.get('description'),
    )


def registry_from_dict(doc: Mapping[str, Any]) -> RegisterRegistry:
    if not isinstance(doc, Mapping):
        raise RegisterDefinitionError('Register document must be an object')

    registers = doc.get('registers', doc)
    if not isinstance(registers, Mapping):
        raise RegisterDefinitionError('"registers" must be an object')

    return RegisterRegistry([register_from_dict(rid, rdoc) for rid, rdoc in registers.items()])


def load_registry(path: str | os.PathLike) -> RegisterRegistry:
    with open(path, encoding='utf-8') as f:
        try:
            doc = json.load(f)
        except json.JSONDecodeError as e:
            raise RegisterDefinitionError(f'{path}: invalid JSON: {e}') from e

    registry = registry_from_dict(doc)
    logger.debug(f'Loaded {len(registry)} registers from {path}')
    return registry
