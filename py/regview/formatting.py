"""Conversions between register integers and their hex/binary text."""

from __future__ import annotations

import re

DEFAULT_WIDTH = 16

_NON_HEX_RE = re.compile(r'[^0-9A-F]')
_HEX_RE = re.compile(r'[0-9A-Fa-f]+')
_BIN_RE = re.compile(r'[01]+')


def hex_digits(width: int) -> int:
    """Number of hex characters needed to show ``width`` bits."""
    return (width + 3) // 4


def _is_number(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def dec_to_hex(value: int | None, digits: int = hex_digits(DEFAULT_WIDTH)) -> str:
    """Uppercase hex, zero padded to ``digits``.

    A value that is not a number (such as the ``None`` returned by a failed
    parse) renders as ``digits`` zeros instead of raising.
    """
    if not _is_number(value):
        return '0' * digits
    return f'{value:0{digits}X}'


def dec_to_binary(value: int | None, digits: int = DEFAULT_WIDTH) -> str:
    if not _is_number(value):
        return '0' * digits
    return f'{value:0{digits}b}'


def _parse(text: str | None, pattern: re.Pattern, base: int) -> int | None:
    if text is None:
        return None
    text = text.strip()
    if not pattern.fullmatch(text):
        return None
    return int(text, base)


def hex_to_dec(text: str | None) -> int | None:
    """Parse hex text. Returns None when the text is empty or invalid."""
    return _parse(text, _HEX_RE, 16)


def bin_to_dec(text: str | None) -> int | None:
    """Parse binary text. Returns None when the text is empty or invalid."""
    return _parse(text, _BIN_RE, 2)


def group_nibbles(text: str, sep: str = ' ') -> str:
    """Insert ``sep`` every four characters, left to right."""
    return sep.join(text[i:i + 4] for i in range(0, len(text), 4))


def sanitize_hex(raw: str, digits: int) -> str:
    """Uppercase, drop anything that is not a hex digit and truncate."""
    return _NON_HEX_RE.sub('', raw.upper())[:digits]
