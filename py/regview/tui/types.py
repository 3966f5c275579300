"""Leaf-level data types and formatting helpers for regview-tui."""

from __future__ import annotations

from dataclasses import dataclass

from regview.fields import FieldDefinition, RegisterDefinition, SelectField


@dataclass
class RegisterNodeData:
    reg: RegisterDefinition


@dataclass
class FieldNodeData:
    reg: RegisterDefinition
    field: FieldDefinition


def select_options(field: SelectField) -> list[tuple[str, int]]:
    """(prompt, value) pairs for a Select widget, always containing the default."""
    options = [(f'{value}: {label}', value) for value, label in sorted(field.options.items())]
    if field.default_option not in field.options:
        options.insert(0, (f'{field.default_option}', field.default_option))
    return options


def editor_id(index: int) -> str:
    return f'register-{index}'


def control_id(index: int) -> str:
    return f'field-{index}'


# Field colors for bit diagram
FIELD_COLORS = [
    'cyan',
    'magenta',
    'green',
    'yellow',
    'blue',
    'red',
    'bright_cyan',
    'bright_magenta',
]
