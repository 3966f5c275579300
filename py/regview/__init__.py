"""regview: view and edit register values as hex text or typed bit-fields."""

from __future__ import annotations

from .bits import (
    clear_bit,
    get_bit,
    get_multibit_value,
    set_bit,
    set_multibit_value,
    update_bit,
)
from .config import load_registry, registry_from_dict
from .diagnostics import Diagnostic, Severity
from .fields import (
    CheckboxField,
    DisplayField,
    FieldDefinitionError,
    FieldKind,
    RegisterDefinition,
    RegisterDefinitionError,
    RegisterRegistry,
    ReservedField,
    SelectField,
    UnknownRegisterError,
)
from .formatting import bin_to_dec, dec_to_binary, dec_to_hex, group_nibbles, hex_to_dec
from .sync import (
    CheckboxState,
    ClearResult,
    DecodeResult,
    EncodeResult,
    LabelState,
    RegisterSynchronizer,
    SelectState,
    UnknownState,
)

__all__ = [
    'get_bit', 'set_bit', 'clear_bit', 'update_bit', 'get_multibit_value', 'set_multibit_value',
    'dec_to_hex', 'dec_to_binary', 'hex_to_dec', 'bin_to_dec', 'group_nibbles',
    'FieldKind', 'CheckboxField', 'SelectField', 'DisplayField', 'ReservedField',
    'RegisterDefinition', 'RegisterRegistry',
    'RegisterDefinitionError', 'FieldDefinitionError', 'UnknownRegisterError',
    'Diagnostic', 'Severity',
    'RegisterSynchronizer', 'DecodeResult', 'EncodeResult', 'ClearResult',
    'CheckboxState', 'SelectState', 'LabelState', 'UnknownState',
    'load_registry', 'registry_from_dict',
]
