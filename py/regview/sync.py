"""Keeps a register's hex text and its field views in step.

``decode`` goes from hex text to field states, ``encode`` from field
control states to hex text and ``clear`` resets the field views. None of
them raise on per-field problems; those are returned as diagnostics and
logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from .bits import get_bit, get_multibit_value, set_bit, set_multibit_value
from .diagnostics import Diagnostic, DiagnosticSink
from .fields import (
    CheckboxField,
    DisplayField,
    FieldDefinition,
    RegisterRegistry,
    ReservedField,
    SelectField,
)
from .formatting import dec_to_binary, dec_to_hex, group_nibbles, hex_digits, hex_to_dec, sanitize_hex

logger = logging.getLogger(__name__)

UNKNOWN_MARKER = '?'


@dataclass(frozen=True)
class CheckboxState:
    checked: bool


@dataclass(frozen=True)
class SelectState:
    value: int


@dataclass(frozen=True)
class LabelState:
    text: str
    alert: bool = False


@dataclass(frozen=True)
class UnknownState:
    marker: str = UNKNOWN_MARKER


FieldState = CheckboxState | SelectState | LabelState | UnknownState


@dataclass
class DecodeResult:
    register_id: str
    sanitized_hex: str
    value: int
    hex_text: str
    binary_text: str
    fields: dict[str, FieldState] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class EncodeResult:
    register_id: str
    value: int
    hex_text: str
    binary_text: str
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class ClearResult:
    register_id: str
    fields: dict[str, FieldState] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)


def hex_label(value: int, width: int) -> str:
    """0x-prefixed hex sized to a field of ``width`` bits."""
    return f'0x{dec_to_hex(value, hex_digits(width))}'


def binary_text(value: int, width: int) -> str:
    return group_nibbles(dec_to_binary(value, width))


def _parse_option(state) -> int | None:
    if isinstance(state, SelectState):
        state = state.value
    if isinstance(state, bool):
        return None
    if isinstance(state, int):
        return state if state >= 0 else None
    if isinstance(state, str):
        try:
            value = int(state.strip(), 10)
        except ValueError:
            return None
        return value if value >= 0 else None
    return None


_TRUE_WORDS = frozenset({'1', 'true', 'yes', 'on', 'y'})
_FALSE_WORDS = frozenset({'0', 'false', 'no', 'off', 'n'})


def parse_flag(state) -> bool | None:
    """Checkbox control state as a bool, None if it is not one.

    Accepts a CheckboxState, a bool, the ints 0 and 1, or a word such as
    "true", "off" or "1".
    """
    if isinstance(state, CheckboxState):
        return state.checked
    if isinstance(state, bool):
        return state
    if isinstance(state, int):
        return bool(state) if state in (0, 1) else None
    if isinstance(state, str):
        word = state.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return None


class RegisterSynchronizer:
    """Runs decode/encode/clear passes against an injected registry."""

    def __init__(self, registry: RegisterRegistry) -> None:
        self.registry = registry

    def decode(self, register_id: str, raw_hex: str) -> DecodeResult:
        reg = self.registry[register_id]
        sink = DiagnosticSink(register_id, logger)

        digits = reg.hex_digits
        sanitized = sanitize_hex(raw_hex or '', digits)

        value = None
        if sanitized:
            value = hex_to_dec(sanitized.rjust(digits, '0'))
        if value is None:
            value = 0
        # A partial top nibble can hold more than width bits
        value &= (1 << reg.width) - 1

        states = {f.name: self._render_field(f, value, sink) for f in reg.fields}

        logger.debug(f'Decoded {register_id} {raw_hex!r} -> 0x{dec_to_hex(value, digits)}')

        return DecodeResult(
            register_id=register_id,
            sanitized_hex=sanitized,
            value=value,
            hex_text=dec_to_hex(value, digits),
            binary_text=binary_text(value, reg.width),
            fields=states,
            diagnostics=sink.items,
        )

    def encode(self, register_id: str, controls: Mapping[str, object]) -> EncodeResult | None:
        """Build the register value from field control states.

        ``controls`` maps field name to a flag (checkbox, see ``parse_flag``) or an option value
        (select, int or decimal text). States returned by ``decode`` are
        accepted as well. Returns None for a read-only register.
        """
        reg = self.registry[register_id]
        if reg.is_read_only:
            logger.debug(f'Register {register_id} is read-only, not encoding')
            return None

        sink = DiagnosticSink(register_id, logger)
        value = 0

        for f in reg.fields:
            if isinstance(f, (DisplayField, ReservedField)):
                continue

            if not f.is_configured:
                sink.error(f.name, 'field has neither bit nor bits defined')
                continue

            if f.name not in controls:
                sink.warning(f.name, 'no control state, field skipped')
                continue

            state = controls[f.name]

            if isinstance(f, CheckboxField):
                checked = parse_flag(state)
                if checked is None:
                    sink.warning(f.name, f'invalid checkbox state {state!r}, field skipped')
                    continue
                if checked:
                    value = set_bit(value, f.bit)
            elif isinstance(f, SelectField):
                selected = _parse_option(state)
                if selected is None:
                    sink.warning(f.name, f'invalid option value {state!r}, field skipped')
                    continue
                if f.options and selected not in f.options:
                    sink.warning(f.name, f'value {selected} is not a declared option')
                value = set_multibit_value(value, f.indices, selected)
            else:
                raise TypeError(f'Unsupported field type {type(f).__name__}')

        return EncodeResult(
            register_id=register_id,
            value=value,
            hex_text=dec_to_hex(value, reg.hex_digits),
            binary_text=binary_text(value, reg.width),
            diagnostics=sink.items,
        )

    def clear(self, register_id: str) -> ClearResult:
        reg = self.registry[register_id]
        sink = DiagnosticSink(register_id, logger)
        states = {f.name: self._reset_field(f, sink) for f in reg.fields}
        return ClearResult(register_id=register_id, fields=states, diagnostics=sink.items)

    def _render_field(self, f: FieldDefinition, value: int, sink: DiagnosticSink) -> FieldState:
        if not f.is_configured:
            sink.error(f.name, 'field has neither bit nor bits defined')
            return UnknownState()

        if isinstance(f, CheckboxField):
            return CheckboxState(get_bit(value, f.bit) == 1)

        if isinstance(f, SelectField):
            fv = get_multibit_value(value, f.indices)
            if fv in f.options:
                return SelectState(fv)
            sink.warning(f.name, f'value {fv} not found in options, using {f.default_option}')
            return SelectState(f.default_option)

        if isinstance(f, DisplayField):
            if f.is_single_bit:
                return LabelState('True' if get_bit(value, f.bit) else 'False')
            return LabelState(hex_label(get_multibit_value(value, f.indices), f.width))

        if isinstance(f, ReservedField):
            fv = get_multibit_value(value, f.indices)
            if fv == 0:
                return LabelState('')
            text = '1' if f.is_single_bit else hex_label(fv, f.width)
            return LabelState(text, alert=True)

        raise TypeError(f'Unsupported field type {type(f).__name__}')

    def _reset_field(self, f: FieldDefinition, sink: DiagnosticSink) -> FieldState:
        if not f.is_configured:
            sink.error(f.name, 'field has neither bit nor bits defined')
            return UnknownState()

        if isinstance(f, CheckboxField):
            return CheckboxState(False)

        if isinstance(f, SelectField):
            return SelectState(f.default_option)

        if isinstance(f, DisplayField):
            if f.is_single_bit:
                return LabelState('False')
            return LabelState(hex_label(0, f.width))

        if isinstance(f, ReservedField):
            return LabelState('')

        raise TypeError(f'Unsupported field type {type(f).__name__}')
