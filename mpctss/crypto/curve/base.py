"""Core elliptic-curve types: points, scalars, parameters and the curve interface."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

__all__ = [
    "CurveError",
    "UnsupportedCurveError",
    "InvalidPointError",
    "InvalidScalarError",
    "PointAtInfinityError",
    "InvalidEncodingError",
    "ScalarZeroError",
    "InvalidCurveError",
    "CurveType",
    "CurveParams",
    "Point",
    "Scalar",
    "Curve",
]


class CurveError(ValueError):
    """Base class for elliptic-curve failures."""

    default_message = "curve error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class UnsupportedCurveError(CurveError):
    """An unsupported curve or operation was requested."""

    default_message = "unsupported curve type"


class InvalidPointError(CurveError):
    """A point is missing or not on the curve."""

    default_message = "invalid point: not on curve"


class InvalidScalarError(CurveError):
    """A scalar is missing or out of range."""

    default_message = "invalid scalar value"


class PointAtInfinityError(CurveError):
    """The operation is undefined for the point at infinity."""

    default_message = "point at infinity"


class InvalidEncodingError(CurveError):
    """A point encoding could not be decoded."""

    default_message = "invalid point encoding"


class ScalarZeroError(CurveError):
    """A scalar reduced to zero where zero is not allowed."""

    default_message = "scalar is zero"


class InvalidCurveError(CurveError):
    """Curve parameters are invalid."""

    default_message = "invalid curve parameters"


class CurveType(enum.IntEnum):
    """Supported elliptic curves."""

    SECP256K1 = 0
    P256 = 1
    ED25519 = 2


@dataclass(frozen=True)
class CurveParams:
    """Domain parameters of a curve.

    ``b`` holds the Weierstrass ``b`` coefficient, or ``d`` for Edwards curves.
    """

    name: str
    p: int
    n: int
    b: int
    gx: int
    gy: int
    bit_size: int


@dataclass(frozen=True)
class Point:
    """An affine curve point; both coordinates ``None`` is the point at infinity."""

    x: int | None
    y: int | None
    curve: Curve | None = field(default=None, compare=False, repr=False)

    def is_infinity(self) -> bool:
        """Return True for the point at infinity."""
        return self.x is None and self.y is None

    def to_bytes(self) -> bytes:
        """Return the curve's compressed encoding, or empty bytes when no curve is attached."""
        if self.curve is None:
            return b""
        return self.curve.marshal(self)


@dataclass(frozen=True)
class Scalar:
    """An element of the scalar field of a curve."""

    value: int
    curve: Curve | None = field(default=None, compare=False, repr=False)

    def to_bytes(self) -> bytes:
        """Return the minimal big-endian encoding of the value."""
        return self.value.to_bytes((self.value.bit_length() + 7) // 8, "big")


class Curve(ABC):
    """Group operations on an elliptic curve and arithmetic in its scalar field."""

    def __init__(self, params: CurveParams) -> None:
        self.params = params

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.params.name}>"

    def _require_positive(self, k: int | None) -> None:
        if k is None or k <= 0:
            raise InvalidScalarError()

    def _reduce_nonzero(self, k: int) -> int:
        k %= self.params.n
        if k == 0:
            raise ScalarZeroError()
        return k

    def scalar_base_mult(self, k: int | None) -> Point:
        """Return ``k * G``."""
        return self.scalar_mult(self.generator(), k)

    @abstractmethod
    def scalar_mult(self, p: Point | None, k: int | None) -> Point:
        """Return ``k * p``."""

    @abstractmethod
    def add(self, p1: Point | None, p2: Point | None) -> Point:
        """Return ``p1 + p2``."""

    def double(self, p: Point | None) -> Point:
        """Return ``2 * p``."""
        return self.add(p, p)

    @abstractmethod
    def negate(self, p: Point | None) -> Point:
        """Return ``-p``."""

    @abstractmethod
    def is_on_curve(self, p: Point | None) -> bool:
        """Return True when ``p`` satisfies the curve equation."""

    @abstractmethod
    def marshal(self, p: Point) -> bytes:
        """Encode a point to bytes."""

    @abstractmethod
    def unmarshal(self, data: bytes) -> Point:
        """Decode bytes to a point."""

    def new_scalar(self, value: int | None) -> Scalar:
        """Return ``value`` reduced into the scalar field."""
        if value is None:
            raise InvalidScalarError()
        return Scalar(value % self.params.n, self)

    def _pair(self, s1: Scalar | None, s2: Scalar | None) -> tuple[int, int]:
        if s1 is None or s2 is None:
            raise InvalidScalarError()
        return s1.value, s2.value

    def scalar_add(self, s1: Scalar | None, s2: Scalar | None) -> Scalar:
        """Return ``s1 + s2 mod n``."""
        a, b = self._pair(s1, s2)
        return Scalar((a + b) % self.params.n, self)

    def scalar_sub(self, s1: Scalar | None, s2: Scalar | None) -> Scalar:
        """Return ``s1 - s2 mod n``."""
        a, b = self._pair(s1, s2)
        return Scalar((a - b) % self.params.n, self)

    def scalar_mul(self, s1: Scalar | None, s2: Scalar | None) -> Scalar:
        """Return ``s1 * s2 mod n``."""
        a, b = self._pair(s1, s2)
        return Scalar((a * b) % self.params.n, self)

    def scalar_inv(self, s: Scalar | None) -> Scalar:
        """Return ``s**-1 mod n``."""
        if s is None:
            raise InvalidScalarError()
        if s.value == 0:
            raise ScalarZeroError()
        try:
            inverse = pow(s.value, -1, self.params.n)
        except ValueError as exc:
            raise InvalidScalarError() from exc
        return Scalar(inverse, self)

    def generator(self) -> Point:
        """Return the base point."""
        return Point(self.params.gx, self.params.gy, self)

    def order(self) -> int:
        """Return the order of the base point."""
        return self.params.n

    def name(self) -> str:
        """Return the curve name."""
        return self.params.name