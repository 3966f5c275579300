"""Command-line interface for regview."""

from __future__ import annotations

import argparse
import logging
import sys

import tabulate

from .config import load_registry
from .fields import CheckboxField, FieldDefinition, RegisterDefinition, RegisterDefinitionError, SelectField
from .sync import CheckboxState, LabelState, RegisterSynchronizer, SelectState, UnknownState
from .sync import parse_flag as _parse_flag_state

tabulate.PRESERVE_WHITESPACE = True


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='regview',
        description='Decode and encode register values using field definitions',
    )
    parser.add_argument('-c', '--config', metavar='FILE', required=True,
                        help='JSON file with register definitions')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    list_parser = subparsers.add_parser('list', help='List registers and fields')
    list_parser.add_argument('--descriptions', '-d', action='store_true', help='Show descriptions')

    decode_parser = subparsers.add_parser('decode', help='Show field values for a hex value')
    decode_parser.add_argument('register', help='Register id')
    decode_parser.add_argument('value', help='Hex value, e.g. 1A2B')

    encode_parser = subparsers.add_parser('encode', help='Build a value from field values')
    encode_parser.add_argument('register', help='Register id')
    encode_parser.add_argument('assignments', nargs='*', metavar='FIELD=VALUE',
                               help='Field values; unnamed checkboxes are off, selects use 0')

    return parser.parse_args(argv)


def parse_flag(text: str) -> bool:
    flag = _parse_flag_state(text)
    if flag is None:
        raise ValueError(f'invalid boolean {text!r}')
    return flag


def parse_assignments(reg: RegisterDefinition, assignments: list[str]) -> dict[str, object]:
    """Turn FIELD=VALUE strings into encode() control states."""
    controls: dict[str, object] = {}
    for f in reg.fields:
        if isinstance(f, CheckboxField):
            controls[f.name] = False
        elif isinstance(f, SelectField):
            controls[f.name] = f.default_option

    for item in assignments:
        name, sep, text = item.partition('=')
        if not sep:
            raise ValueError(f'expected FIELD=VALUE, got {item!r}')
        try:
            f = reg.get_field(name)
        except KeyError:
            raise ValueError(f'register {reg.id} has no field {name!r}') from None

        if isinstance(f, CheckboxField):
            controls[name] = parse_flag(text)
        elif isinstance(f, SelectField):
            controls[name] = int(text.strip(), 0)
        else:
            raise ValueError(f'field {name!r} is {f.kind.value} and cannot be set')

    return controls


def describe_state(f: FieldDefinition, state) -> str:
    if isinstance(state, CheckboxState):
        return 'True' if state.checked else 'False'
    if isinstance(state, SelectState):
        label = f.options.get(state.value) if isinstance(f, SelectField) else None
        return f'{state.value} ({label})' if label is not None else str(state.value)
    if isinstance(state, LabelState):
        return f'{state.text} (!)' if state.alert else state.text
    if isinstance(state, UnknownState):
        return state.marker
    return str(state)


def cmd_list(registry, args) -> None:
    table = []
    for reg in registry.values():
        flags = 'ro' if reg.is_read_only else 'rw'
        row = [reg.id, '', f'{reg.width}', flags]
        if args.descriptions:
            row.append(reg.description or reg.title or '')
        table.append(row)

        for f in reg.fields:
            row = ['    ' + f.name, f.bit_label, f.kind.value, '']
            if args.descriptions:
                row.append(f.description or '')
            table.append(row)

    headers = ['Name', 'Bits', 'Width/Type', 'Access']
    if args.descriptions:
        headers.append('Description')
    print(tabulate.tabulate(table, headers))


def cmd_decode(sync: RegisterSynchronizer, args) -> None:
    reg = sync.registry[args.register]
    result = sync.decode(args.register, args.value)

    print(f'{reg.id}: 0x{result.hex_text}  ({result.value})')
    print(f'  {result.binary_text}')
    print()

    table = []
    for f in reg.fields:
        table.append((f.name, f.bit_label, f.kind.value, describe_state(f, result.fields[f.name])))
    print(tabulate.tabulate(table, ['Field', 'Bits', 'Type', 'Value']))


def cmd_encode(sync: RegisterSynchronizer, args) -> None:
    reg = sync.registry[args.register]
    controls = parse_assignments(reg, args.assignments)
    result = sync.encode(args.register, controls)
    if result is None:
        print(f'Error: register {reg.id} is read-only', file=sys.stderr)
        sys.exit(1)

    print(f'0x{result.hex_text}')
    print(result.binary_text)


def main(argv: list[str] | None = None):
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s: %(message)s',
    )

    try:
        registry = load_registry(args.config)
    except (OSError, RegisterDefinitionError) as e:
        print(f'Error: {e}', file=sys.stderr)
        sys.exit(1)

    sync = RegisterSynchronizer(registry)

    try:
        if args.command == 'list':
            cmd_list(registry, args)
        elif args.command == 'decode':
            cmd_decode(sync, args)
        elif args.command == 'encode':
            cmd_encode(sync, args)
    except KeyError as e:
        print(f'Error: unknown register {e.args[0]!r}', file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f'Error: {e}', file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
