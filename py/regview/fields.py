"""Register and field definitions.

Field kinds are separate classes so that the synchronizer dispatches on
type. A field may lack both ``bit`` and ``bits``; such a field is kept so
that it can be reported and rendered as unknown at runtime instead of
failing the whole register.
"""

from __future__ import annotations

import collections.abc
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterator, Mapping, Sequence

from .formatting import DEFAULT_WIDTH, hex_digits

__all__ = [
    'RegisterDefinitionError', 'FieldDefinitionError', 'UnknownRegisterError',
    'FieldKind', 'CheckboxField', 'SelectField', 'DisplayField', 'ReservedField',
    'FieldDefinition', 'RegisterDefinition', 'RegisterRegistry',
]


class RegisterDefinitionError(ValueError):
    """Raised when a register definition is structurally invalid."""
    pass


class FieldDefinitionError(RegisterDefinitionError):
    """Raised when a field definition is structurally invalid."""
    pass


class UnknownRegisterError(KeyError):
    """Raised when a register id is not in the registry."""
    pass


class FieldKind(Enum):
    Checkbox = 'checkbox'
    Select = 'select'
    Display = 'display'
    Reserved = 'reserved'


@dataclass(frozen=True)
class _Field:
    kind: ClassVar[FieldKind]

    name: str
    bit: int | None = None
    bits: tuple[int, ...] | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not isinstance(self.name, str):
            raise FieldDefinitionError('Field name must be a non-empty string')
        if self.bit is not None and self.bits is not None:
            raise FieldDefinitionError(f"Field '{self.name}': give either bit or bits, not both")
        if self.bits is not None:
            object.__setattr__(self, 'bits', tuple(self.bits))
            if not self.bits:
                raise FieldDefinitionError(f"Field '{self.name}': bits must not be empty")

    @property
    def is_configured(self) -> bool:
        return self.bit is not None or self.bits is not None

    @property
    def is_single_bit(self) -> bool:
        return self.bit is not None

    @property
    def indices(self) -> tuple[int, ...]:
        """MSB-first bit indices, empty for an unconfigured field."""
        if self.bit is not None:
            return (self.bit,)
        return self.bits or ()

    @property
    def width(self) -> int:
        return len(self.indices)

    @property
    def bit_label(self) -> str:
        if self.bit is not None:
            return str(self.bit)
        if self.bits is not None:
            return ','.join(str(b) for b in self.bits)
        return '?'


@dataclass(frozen=True)
class CheckboxField(_Field):
    kind: ClassVar[FieldKind] = FieldKind.Checkbox

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.bits is not None:
            if len(self.bits) != 1:
                raise FieldDefinitionError(f"Field '{self.name}': checkbox must be a single bit")
            object.__setattr__(self, 'bit', self.bits[0])
            object.__setattr__(self, 'bits', None)


@dataclass(frozen=True)
class SelectField(_Field):
    kind: ClassVar[FieldKind] = FieldKind.Select

    # Compared but not hashed, so the field stays hashable
    options: Mapping[int, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, 'options', dict(self.options))

    @property
    def default_option(self) -> int:
        return 0


@dataclass(frozen=True)
class DisplayField(_Field):
    kind: ClassVar[FieldKind] = FieldKind.Display


@dataclass(frozen=True)
class ReservedField(_Field):
    kind: ClassVar[FieldKind] = FieldKind.Reserved


FieldDefinition = CheckboxField | SelectField | DisplayField | ReservedField

FIELD_CLASSES: dict[FieldKind, type] = {
    FieldKind.Checkbox: CheckboxField,
    FieldKind.Select: SelectField,
    FieldKind.Display: DisplayField,
    FieldKind.Reserved: ReservedField,
}


@dataclass(frozen=True)
class RegisterDefinition:
    id: str
    fields: tuple[FieldDefinition, ...] = ()
    is_read_only: bool = False
    width: int = DEFAULT_WIDTH
    title: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.id or not isinstance(self.id, str):
            raise RegisterDefinitionError('Register id must be a non-empty string')
        if not isinstance(self.width, int) or self.width <= 0:
            raise RegisterDefinitionError(f"Register '{self.id}': width must be a positive integer, got {self.width!r}")
        object.__setattr__(self, 'fields', tuple(self.fields))

        seen: set[str] = set()
        for f in self.fields:
            if f.name in seen:
                raise FieldDefinitionError(f"Register '{self.id}': duplicate field name '{f.name}'")
            seen.add(f.name)

    @property
    def hex_digits(self) -> int:
        return hex_digits(self.width)

    def get_field(self, name: str) -> FieldDefinition:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)


class RegisterRegistry(collections.abc.Mapping):
    """Read-only mapping from register id to RegisterDefinition."""

    def __init__(self, registers: Sequence[RegisterDefinition] = ()) -> None:
        self._registers: dict[str, RegisterDefinition] = {}
        for reg in registers:
            if reg.id in self._registers:
                raise RegisterDefinitionError(f"Duplicate register id '{reg.id}'")
            self._registers[reg.id] = reg

    def __getitem__(self, register_id: str) -> RegisterDefinition:
        try:
            return self._registers[register_id]
        except KeyError:
            raise UnknownRegisterError(register_id) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._registers)

    def __len__(self) -> int:
        return len(self._registers)

    def __repr__(self) -> str:
        return f'RegisterRegistry({list(self._registers)!r})'
