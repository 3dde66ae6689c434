"""The Ed25519 twisted Edwards curve with affine coordinates and EdDSA helpers."""

from __future__ import annotations

import hashlib

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from mpctss.crypto.curve.base import (
    Curve,
    CurveError,
    CurveParams,
    InvalidEncodingError,
    InvalidPointError,
    Point,
)

__all__ = ["Ed25519Curve"]

_P = 0x7FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFED
_N = 0x1000000000000000000000000000000014DEF9DEA2F79CD65812631A5CF5D3ED
_D = 0x52036CEE2B6FFE738CC740797779E89800700A4D4141D8AB75EB4DCA135978A3
_GX = 0x216936D3CD6E53FEC0A4E231FDD6DC5C692CC7609525A7B2C9562D608F25D51A
_GY = 0x6666666666666666666666666666666666666666666666666666666666666658

_SQRT_M1 = pow(2, (_P - 1) // 4, _P)
_Y_MASK = (1 << 255) - 1

_PARAMS = CurveParams(
    name="Ed25519",
    p=_P,
    n=_N,
    b=_D,
    gx=_GX,
    gy=_GY,
    bit_size=255,
)


def _recover_x(y: int, odd: bool) -> int | None:
    """Solve ``-x^2 + y^2 = 1 + d*x^2*y^2`` for ``x`` with the requested parity."""
    y2 = y * y % _P
    numerator = (y2 - 1) % _P
    denominator = (_D * y2 + 1) % _P
    try:
        inverse = pow(denominator, -1, _P)
    except ValueError:
        return None
    x2 = numerator * inverse % _P
    x = pow(x2, (_P + 3) // 8, _P)
    if x * x % _P != x2:
        x = x * _SQRT_M1 % _P
        if x * x % _P != x2:
            return None
    if (x & 1) != int(odd):
        x = (_P - x) % _P
    return x


def _scalar_bytes(value: int) -> bytes:
    """Big-endian 32-byte encoding of the magnitude, keeping the low 32 bytes."""
    return (abs(value) % (1 << 256)).to_bytes(32, "big")


class Ed25519Curve(Curve):
    """The Edwards curve ``-x^2 + y^2 = 1 + d*x^2*y^2`` over GF(2^255 - 19)."""

    def __init__(self) -> None:
        super().__init__(_PARAMS)

    def _coords(self, p: Point | None) -> tuple[int, int]:
        if p is None or not self.is_on_curve(p):
            raise InvalidPointError()
        return p.x % _P, p.y % _P

    @staticmethod
    def _add_affine(a: tuple[int, int], b: tuple[int, int]) -> tuple[int, int]:
        x1, y1 = a
        x2, y2 = b
        t = _D * x1 * x2 * y1 * y2 % _P
        x3 = (x1 * y2 + y1 * x2) * pow((1 + t) % _P, -1, _P) % _P
        y3 = (y1 * y2 + x1 * x2) * pow((1 - t) % _P, -1, _P) % _P
        return x3, y3

    def _multiply(self, pt: tuple[int, int], k: int) -> tuple[int, int]:
        result = (0, 1)
        addend = pt
        while k:
            if k & 1:
                result = self._add_affine(result, addend)
            addend = self._add_affine(addend, addend)
            k >>= 1
        return result

    def _wrap(self, affine: tuple[int, int]) -> Point:
        return Point(affine[0], affine[1], self)

    def scalar_base_mult(self, k: int | None) -> Point:
        """Return ``k * G`` with ``k`` reduced modulo the group order."""
        self._require_positive(k)
        k = self._reduce_nonzero(k)
        return self._wrap(self._multiply((_GX, _GY), k))

    def scalar_mult(self, p: Point | None, k: int | None) -> Point:
        """Return ``k * p`` with ``k`` reduced modulo the group order."""
        if p is None:
            raise InvalidPointError()
        self._require_positive(k)
        k = self._reduce_nonzero(k)
        return self._wrap(self._multiply(self._coords(p), k))

    def add(self, p1: Point | None, p2: Point | None) -> Point:
        """Return ``p1 + p2``."""
        a = self._coords(p1)
        b = self._coords(p2)
        return self._wrap(self._add_affine(a, b))

    def double(self, p: Point | None) -> Point:
        """Return ``2 * p``."""
        a = self._coords(p)
        return self._wrap(self._add_affine(a, a))

    def negate(self, p: Point | None) -> Point:
        """Return ``(-x, y)``."""
        x, y = self._coords(p)
        return Point((_P - x) % _P, y, self)

    def is_on_curve(self, p: Point | None) -> bool:
        """Return True when ``p`` satisfies the Edwards equation modulo the field prime."""
        if p is None or p.x is None or p.y is None:
            return False
        x2 = p.x * p.x % _P
        y2 = p.y * p.y % _P
        left = (y2 - x2) % _P
        right = (_D * x2 * y2 + 1) % _P
        return left == right

    def marshal(self, p: Point) -> bytes:
        """Return the 32-byte compressed encoding: little-endian ``y`` with the sign of ``x``."""
        x, y = self._coords(p)
        return (y | ((x & 1) << 255)).to_bytes(32, "little")

    def unmarshal(self, data: bytes) -> Point:
        """Decode a 32-byte compressed encoding."""
        data = bytes(data)
        if len(data) != 32:
            raise InvalidEncodingError()
        raw = int.from_bytes(data, "little")
        odd = bool(raw >> 255)
        y = (raw & _Y_MASK) % _P
        x = _recover_x(y, odd)
        if x is None:
            raise InvalidEncodingError()
        return Point(x, y, self)

    def sign_eddsa(self, private_scalar: int, message: bytes) -> bytes:
        """Sign ``message`` with a key whose seed is the SHA-512 prefix of the scalar's bytes."""
        digest = hashlib.sha512(_scalar_bytes(private_scalar)).digest()
        key = Ed25519PrivateKey.from_private_bytes(digest[:32])
        return key.sign(bytes(message))

    def verify_eddsa(self, public_key: Point | None, message: bytes, signature: bytes) -> bool:
        """Return True when ``signature`` is a valid Ed25519 signature of ``message``."""
        if len(signature) != 64:
            return False
        try:
            encoded = self.marshal(public_key)
            key = Ed25519PublicKey.from_public_bytes(encoded)
            key.verify(bytes(signature), bytes(message))
        except (CurveError, InvalidSignature, ValueError):
            return False
        return True