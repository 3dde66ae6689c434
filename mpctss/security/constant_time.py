"""Modular arithmetic and selection helpers that avoid secret-dependent branches.

Integers are handled by magnitude where byte encodings are involved, matching
big-endian unsigned serialisation.
"""

from __future__ import annotations

import hmac
from typing import Callable, Sequence

from mpctss.security.memory import constant_time_eq, constant_time_less_or_eq
from mpctss.security.validation import generate_random_scalar

__all__ = [
    "constant_time_mod_add",
    "constant_time_mod_sub",
    "constant_time_mod_mul",
    "constant_time_mod_inv",
    "constant_time_mod_exp",
    "constant_time_bytes_copy",
    "constant_time_select",
    "constant_time_is_zero",
    "constant_time_is_nonzero",
    "constant_time_greater",
    "constant_time_big_int_equal",
    "timing_safe_div",
    "mask_big_int",
    "unmask_big_int",
    "constant_time_cond_swap",
    "secure_compare_scalars",
    "constant_time_array_access",
    "constant_time_limbs_equal",
    "constant_time_montgomery_ladder",
    "constant_time_mod_sqr",
    "constant_time_is_odd",
    "constant_time_mod_neg",
    "constant_time_leading_zeros",
]


def _magnitude_bytes(x: int) -> bytes:
    n = abs(x)
    return n.to_bytes((n.bit_length() + 7) // 8, "big")


def _padded_pair(a: int, b: int) -> tuple[bytes, bytes]:
    ab, bb = _magnitude_bytes(a), _magnitude_bytes(b)
    width = max(len(ab), len(bb))
    return ab.rjust(width, b"\0"), bb.rjust(width, b"\0")


def _require_bit(value: int, name: str, func: str) -> None:
    if value not in (0, 1):
        raise ValueError(f"{func}: {name} must be 0 or 1")


def _require_operands(func: str, a: int, b: int, m: int) -> None:
    if a < 0 or b < 0 or m <= 0:
        raise ValueError(f"{func}: inputs must be non-negative")


def _reduce(x: int, m: int) -> int:
    if 0 <= x < m:
        return x
    return x % m


def constant_time_mod_add(a: int, b: int, m: int) -> int:
    """Return ``(a + b) mod m``."""
    _require_operands("constant_time_mod_add", a, b, m)
    return _reduce(a + b, m)


def constant_time_mod_sub(a: int, b: int, m: int) -> int:
    """Return ``(a - b) mod m``."""
    _require_operands("constant_time_mod_sub", a, b, m)
    return _reduce(a - b, m)


def constant_time_mod_mul(a: int, b: int, m: int) -> int:
    """Return ``(a * b) mod m``."""
    _require_operands("constant_time_mod_mul", a, b, m)
    return _reduce(a * b, m)


def constant_time_mod_inv(a: int, m: int) -> int | None:
    """Return the inverse of ``a`` modulo ``m``, or None when none exists."""
    if a <= 0 or m <= 0:
        return None
    try:
        return pow(a, -1, m)
    except ValueError:
        return None


def constant_time_mod_exp(base: int, exp: int, m: int) -> int:
    """Return ``base ** exp mod m``."""
    _require_operands("constant_time_mod_exp", base, exp, m)
    return pow(base, exp, m)


def constant_time_bytes_copy(dst: bytearray | memoryview, src: bytes) -> None:
    """Copy ``src`` into ``dst``; both must have the same length."""
    if len(dst) != len(src):
        raise ValueError("constant_time_bytes_copy: length mismatch")
    dst[:] = src


def constant_time_select(v: int, x: int, y: int) -> int:
    """Return ``x`` when ``v`` is 1 and ``y`` when ``v`` is 0."""
    _require_bit(v, "v", "constant_time_select")
    xb, yb = _padded_pair(x, y)
    mask = -int(v) & 0xFF
    inverse = ~mask & 0xFF
    result = bytes((a & mask) | (b & inverse) for a, b in zip(xb, yb))
    return int.from_bytes(result, "big")


def constant_time_is_zero(x: int) -> int:
    """Return 1 when ``x`` is zero, 0 otherwise."""
    data = _magnitude_bytes(x)
    if not data:
        return 1
    accumulated = 0
    for byte in data:
        accumulated |= byte
    return ((accumulated - 1) >> 8) & 1


def constant_time_is_nonzero(x: int) -> int:
    """Return 1 when ``x`` is non-zero, 0 otherwise."""
    return 1 - constant_time_is_zero(x)


def constant_time_greater(a: int, b: int) -> int:
    """Return 1 when ``a > b``; both must be non-negative."""
    if a < 0 or b < 0:
        raise ValueError("constant_time_greater: inputs must be non-negative")
    return 1 - constant_time_less_or_eq(a, b)


def constant_time_big_int_equal(a: int, b: int) -> int:
    """Return 1 when the magnitudes of ``a`` and ``b`` are equal, 0 otherwise."""
    ab, bb = _padded_pair(a, b)
    if not ab:
        return 1
    return int(hmac.compare_digest(ab, bb))


def timing_safe_div(a: int, b: int, m: int) -> int | None:
    """Return ``a * b**-1 mod m``, or None when ``b`` has no inverse."""
    inverse = constant_time_mod_inv(b, m)
    if inverse is None:
        return None
    return constant_time_mod_mul(a, inverse, m)


def mask_big_int(x: int, m: int) -> tuple[int, int]:
    """Blind ``x`` with a random mask; return ``(masked, mask)``."""
    mask = generate_random_scalar(m)
    return constant_time_mod_add(x, mask, m), mask


def unmask_big_int(masked: int, mask: int, m: int) -> int:
    """Remove a blinding mask: ``(masked - mask) mod m``."""
    return constant_time_mod_sub(masked, mask, m)


def constant_time_cond_swap(swap: int, a: int, b: int) -> tuple[int, int]:
    """Return ``(b, a)`` when ``swap`` is 1 and ``(a, b)`` when it is 0."""
    _require_bit(swap, "swap", "constant_time_cond_swap")
    ab, bb = _padded_pair(a, b)
    mask = -int(swap) & 0xFF
    new_a = bytearray()
    new_b = bytearray()
    for x, y in zip(ab, bb):
        t = mask & (x ^ y)
        new_a.append(x ^ t)
        new_b.append(y ^ t)
    return int.from_bytes(new_a, "big"), int.from_bytes(new_b, "big")


def secure_compare_scalars(a: int, b: int) -> bool:
    """Return True when the two scalars are equal."""
    return constant_time_big_int_equal(a, b) == 1


def constant_time_array_access(array: Sequence[int], index: int) -> int:
    """Return ``array[index]`` by scanning every element; 0 when out of range."""
    if index < 0 or index >= len(array):
        return 0
    return sum(
        constant_time_select(constant_time_eq(i, index), value, 0)
        for i, value in enumerate(array)
    )


def constant_time_limbs_equal(a: int, b: int) -> bool:
    """Compare magnitudes limb by limb (64-bit words) without early exit."""
    a_mag, b_mag = abs(a), abs(b)
    limbs = max(a_mag.bit_length(), b_mag.bit_length(), 1) // 64 + 1
    word = (1 << 64) - 1
    diff = 0
    for i in range(limbs):
        diff |= ((a_mag >> (64 * i)) & word) ^ ((b_mag >> (64 * i)) & word)
    return diff == 0


def constant_time_montgomery_ladder(k: int, scalar_mult: Callable[[int], int]) -> int:
    """Compute ``k * P`` where ``P = scalar_mult(1)``, doing the same work for every bit."""
    if k <= 0:
        raise ValueError("constant_time_montgomery_ladder: scalar must be positive")
    r0 = 0
    r1 = scalar_mult(1)
    for i in reversed(range(k.bit_length())):
        bit = (k >> i) & 1
        r0, r1 = constant_time_cond_swap(bit, r0, r1)
        r0, r1 = r0 + r0, r0 + r1
        r0, r1 = constant_time_cond_swap(bit, r0, r1)
    return r0


def constant_time_mod_sqr(x: int, m: int) -> int:
    """Return ``x * x mod m``."""
    return constant_time_mod_mul(x, x, m)


def constant_time_is_odd(x: int) -> int:
    """Return 1 when the magnitude of ``x`` is odd, 0 otherwise."""
    if x == 0:
        return 0
    return _magnitude_bytes(x)[-1] & 1


def constant_time_mod_neg(x: int, m: int) -> int:
    """Return ``-x mod m``."""
    if x == 0:
        return 0
    return _reduce(m - x, m)


def constant_time_leading_zeros(x: int) -> int:
    """Count leading zero bits in the big-endian byte encoding of ``x``."""
    count = 0
    for byte in _magnitude_bytes(x):
        zeros = 8 - byte.bit_length()
        count += zeros
        if zeros != 8:
            break
    return count