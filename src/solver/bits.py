"""Bit helpers for 9-bit digit masks (bit ``d - 1`` stands for digit ``d``)."""

from __future__ import annotations

from typing import Iterator

FULL_MASK = (1 << 9) - 1


def digit_bit(digit: int) -> int:
    return 1 << (digit - 1)


def set_bit(mask: int, digit: int) -> int:
    return mask | digit_bit(digit)


def clear_bit(mask: int, digit: int) -> int:
    return mask & ~digit_bit(digit)


def has_bit(mask: int, digit: int) -> bool:
    return bool(mask & digit_bit(digit))


def iter_digits(mask: int) -> Iterator[int]:
    """Yield the digits present in ``mask`` in ascending order."""

    digit = 1
    while mask:
        if mask & 1:
            yield digit
        mask >>= 1
        digit += 1


def popcount(mask: int) -> int:
    return bin(mask).count("1")


__all__ = [
    "FULL_MASK",
    "clear_bit",
    "digit_bit",
    "iter_digits",
    "popcount",
    "set_bit",
    "has_bit",
]
