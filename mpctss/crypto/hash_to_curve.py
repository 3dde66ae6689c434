"""Deterministic mapping of byte strings to curve points (expand_message_xmd based)."""

from __future__ import annotations

import hashlib

from mpctss.crypto.curve.base import Curve, Point

__all__ = [
    "HashError",
    "NilCurveError",
    "InvalidLengthError",
    "InvalidHashError",
    "HashToCurveFailedError",
    "hash_to_curve_rfc9380",
    "hash_to_field",
    "expand_message_xmd",
    "mod_sqrt",
    "derive_independent_generators",
]

DEFAULT_DST = b"MPC-TSS-V1-HASH-TO-CURVE"

_FIELD_ELEMENT_BYTES = 48
_HASH_BYTES = 32
_BLOCK_BYTES = 64
_MAX_ATTEMPTS = 256


class HashError(ValueError):
    """Base class for hashing failures."""

    default_message = "hash error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class NilCurveError(HashError):
    """No curve was given."""

    default_message = "curve cannot be nil"


class InvalidLengthError(HashError):
    """A requested length was not positive or too large."""

    default_message = "length must be positive"


class InvalidHashError(HashError):
    """A hash did not verify."""

    default_message = "hash verification failed"


class HashToCurveFailedError(HashError):
    """No curve point was found for the input."""

    default_message = "hash-to-curve failed to find valid point"


def hash_to_curve_rfc9380(data: bytes, dst: bytes | None, curve: Curve | None) -> Point:
    """Map ``data`` to a point on ``curve`` under the domain separation tag ``dst``."""
    if curve is None:
        raise NilCurveError()
    if not dst:
        dst = DEFAULT_DST
    u = hash_to_field(data, dst, 2, curve.order())
    return _try_and_increment(u[0], 0, curve.params.b, curve.params.p, curve)


def hash_to_field(msg: bytes, dst: bytes, count: int, modulus: int) -> list[int]:
    """Derive ``count`` integers reduced modulo ``modulus`` from ``msg``."""
    uniform = expand_message_xmd(msg, dst, count * _FIELD_ELEMENT_BYTES)
    return [
        int.from_bytes(uniform[offset : offset + _FIELD_ELEMENT_BYTES], "big") % modulus
        for offset in range(0, count * _FIELD_ELEMENT_BYTES, _FIELD_ELEMENT_BYTES)
    ]


def expand_message_xmd(msg: bytes, dst: bytes, length: int) -> bytes:
    """Expand ``msg`` to ``length`` uniform bytes with SHA-256."""
    if length < 0:
        raise InvalidLengthError()
    msg, dst = bytes(msg), bytes(dst)
    ell = (length + _HASH_BYTES - 1) // _HASH_BYTES
    dst_prime = dst + bytes([len(dst) & 0xFF])
    msg_prime = (
        bytes(_BLOCK_BYTES)
        + msg
        + bytes([(length >> 8) & 0xFF, length & 0xFF, 0])
        + dst_prime
    )
    b0 = hashlib.sha256(msg_prime).digest()
    bi = hashlib.sha256(b0 + b"\x01" + dst_prime).digest()
    blocks = [bi]
    for i in range(2, ell + 1):
        mixed = bytes(x ^ y for x, y in zip(b0, bi))
        bi = hashlib.sha256(mixed + bytes([i & 0xFF]) + dst_prime).digest()
        blocks.append(bi)
    return b"".join(blocks)[:length]


def _try_and_increment(seed: int, a: int, b: int, p: int, curve: Curve) -> Point:
    x = seed % p
    for _ in range(_MAX_ATTEMPTS):
        y2 = pow(x, 3, p)
        if a:
            y2 += a * x
        y2 = (y2 + b) % p
        y = mod_sqrt(y2, p)
        if y is not None:
            point = Point(x, y, curve)
            if curve.is_on_curve(point):
                return point
        x = (x + 1) % p
    raise HashToCurveFailedError()


def mod_sqrt(n: int, p: int) -> int | None:
    """Return a square root of ``n`` modulo the odd prime ``p``, or None if there is none."""
    if n == 0:
        return 0
    n %= p
    if pow(n, (p - 1) // 2, p) != 1:
        return None
    if p % 4 == 3:
        return pow(n, (p + 1) // 4, p)
    return _tonelli_shanks(n, p)


def _tonelli_shanks(n: int, p: int) -> int:
    q, s = p - 1, 0
    while q % 2 == 0:
        q //= 2
        s += 1

    z = 2
    while pow(z, (p - 1) // 2, p) != p - 1:
        z += 1

    m = s
    c = pow(z, q, p)
    t = pow(n, q, p)
    r = pow(n, (q + 1) // 2, p)
    while True:
        if t == 0:
            return 0
        if t == 1:
            return r
        i = 1
        temp = t * t % p
        while temp != 1 and i < m:
            temp = temp * temp % p
            i += 1
        b = pow(c, 1 << (m - i - 1), p)
        m = i
        c = b * b % p
        t = t * c % p
        r = r * b % p


def derive_independent_generators(curve: Curve, count: int) -> list[Point]:
    """Derive ``count`` curve points, each under its own domain separation tag."""
    if count <= 0:
        raise InvalidLengthError()
    generators = []
    for i in range(count):
        index = (i & 0xFFFFFFFF).to_bytes(4, "big")
        dst = b"MPC-TSS-GENERATOR-" + index
        msg = curve.name().encode("utf-8") + index
        generators.append(hash_to_curve_rfc9380(msg, dst, curve))
    return generators