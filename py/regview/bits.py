"""Bit-level get/set primitives for register values.

Bit 0 is the LSB. Multi-bit fields are described by a bit list ordered
MSB-first: the first index in the list holds the field's most significant
bit. Indices need not be contiguous.
"""

from __future__ import annotations

from typing import Sequence


def get_bit(value: int, bit: int) -> int:
    return (value >> bit) & 1


def set_bit(value: int, bit: int) -> int:
    return value | (1 << bit)


def clear_bit(value: int, bit: int) -> int:
    return value & ~(1 << bit)


def update_bit(value: int, bit: int, flag) -> int:
    return set_bit(value, bit) if flag else clear_bit(value, bit)


def get_multibit_value(value: int, bits: Sequence[int]) -> int:
    """Extract the field value stored at the MSB-first bit list ``bits``."""
    result = 0
    for bit in bits:
        result = (result << 1) | get_bit(value, bit)
    return result


def set_multibit_value(value: int, bits: Sequence[int], field_value: int) -> int:
    """Store ``field_value`` at the MSB-first bit list ``bits``.

    Bit ``i`` of ``field_value`` goes to ``bits[-1 - i]``, so the last index
    receives the LSB. Bits of ``field_value`` above ``len(bits)`` are dropped.
    """
    n = len(bits)
    for i in range(n):
        value = update_bit(value, bits[n - 1 - i], (field_value >> i) & 1)
    return value


def bit_range(high: int, low: int) -> tuple[int, ...]:
    """MSB-first bit list for the contiguous range high:low."""
    return tuple(range(high, low - 1, -1))
