"""Helpers for wiping sensitive buffers and comparing secrets without early exits."""

from __future__ import annotations

import hmac

__all__ = [
    "secure_zero",
    "constant_time_compare",
    "constant_time_select_bytes",
    "constant_time_byte_eq",
    "constant_time_eq",
    "constant_time_less_or_eq",
]


def secure_zero(data: bytearray | memoryview | None) -> None:
    """Overwrite a mutable buffer with zeros in place."""
    if data is None or len(data) == 0:
        return
    data[:] = bytes(len(data))


def constant_time_compare(a: bytes, b: bytes) -> bool:
    """Return True when both byte strings are equal, in constant time."""
    return hmac.compare_digest(bytes(a), bytes(b))


def constant_time_select_bytes(v: int, x: bytes, y: bytes) -> bytes:
    """Return ``x`` when ``v`` is 1 and ``y`` when ``v`` is 0, without branching on ``v``."""
    if len(x) != len(y):
        raise ValueError("constant_time_select_bytes: slices must have equal length")
    if v not in (0, 1):
        raise ValueError("constant_time_select_bytes: v must be 0 or 1")
    mask = -int(v) & 0xFF
    inverse = ~mask & 0xFF
    return bytes((a & mask) | (b & inverse) for a, b in zip(x, y))


def constant_time_byte_eq(a: int, b: int) -> int:
    """Return 1 when the two bytes are equal, 0 otherwise."""
    diff = (a ^ b) & 0xFF
    return ((diff - 1) >> 8) & 1


def constant_time_eq(x: int, y: int) -> int:
    """Return 1 when the two 32-bit integers are equal, 0 otherwise."""
    diff = (x ^ y) & 0xFFFFFFFF
    return ((diff - 1) >> 32) & 1


def constant_time_less_or_eq(x: int, y: int) -> int:
    """Return 1 when ``x <= y``; both must be non-negative and below 2**31."""
    return ((x - y - 1) >> 63) & 1