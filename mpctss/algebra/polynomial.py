"""Polynomials over a prime field and Lagrange interpolation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from mpctss.crypto.rand import generate_random_scalar

__all__ = [
    "AlgebraError",
    "EmptyCoefficientsError",
    "InvalidModulusError",
    "InvalidDegreeError",
    "NilPolynomialError",
    "NilScalarError",
    "ModulusMismatchError",
    "PointValueMismatchError",
    "EmptyPointsError",
    "DuplicatePointsError",
    "NilSecretError",
    "InsufficientSharesError",
    "TooManySharesError",
    "NilShareError",
    "NilPointError",
    "InvalidShareError",
    "ShareIndexMismatchError",
    "Polynomial",
    "interpolate",
]


class AlgebraError(ValueError):
    """Base class for field-arithmetic and secret-sharing failures."""

    default_message = "algebra error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class EmptyCoefficientsError(AlgebraError):
    """No coefficients were given."""

    default_message = "coefficients cannot be empty"


class InvalidModulusError(AlgebraError):
    """The modulus is missing or not positive."""

    default_message = "modulus must be positive"


class InvalidDegreeError(AlgebraError):
    """A negative degree was requested."""

    default_message = "degree must be non-negative"


class NilPolynomialError(AlgebraError):
    """No polynomial was given."""

    default_message = "polynomial cannot be nil"


class NilScalarError(AlgebraError):
    """No scalar was given."""

    default_message = "scalar cannot be nil"


class ModulusMismatchError(AlgebraError):
    """Two polynomials have different moduli."""

    default_message = "polynomials must have the same modulus"


class PointValueMismatchError(AlgebraError):
    """Points and values differ in length."""

    default_message = "points and values must have the same length"


class EmptyPointsError(AlgebraError):
    """No interpolation points were given."""

    default_message = "points cannot be empty"


class DuplicatePointsError(AlgebraError):
    """Interpolation points are not distinct."""

    default_message = "interpolation points must be unique"


class NilSecretError(AlgebraError):
    """No secret was given."""

    default_message = "secret cannot be nil"


class InsufficientSharesError(AlgebraError):
    """Fewer shares than the threshold were given."""

    default_message = "insufficient shares for reconstruction"


class TooManySharesError(AlgebraError):
    """More shares than exist were given."""

    default_message = "too many shares provided"


class NilShareError(AlgebraError):
    """No share was given."""

    default_message = "share cannot be nil"


class NilPointError(AlgebraError):
    """No evaluation point was given."""

    default_message = "point cannot be nil"


class InvalidShareError(AlgebraError):
    """A share is invalid."""

    default_message = "invalid share"


class ShareIndexMismatchError(AlgebraError):
    """Shares with different indices were combined."""

    default_message = "share indices must match"


def _check_modulus(modulus: int | None) -> int:
    if modulus is None or modulus <= 0:
        raise InvalidModulusError()
    return modulus


@dataclass(frozen=True)
class Polynomial:
    """``f(x) = c0 + c1*x + c2*x^2 + ...`` with coefficients reduced modulo ``modulus``."""

    coefficients: tuple[int, ...]
    modulus: int

    def __init__(self, coefficients: Iterable[int | None], modulus: int | None) -> None:
        coefficients = list(coefficients)
        if not coefficients:
            raise EmptyCoefficientsError()
        modulus = _check_modulus(modulus)
        normalized = tuple(0 if c is None else c % modulus for c in coefficients)
        object.__setattr__(self, "coefficients", normalized)
        object.__setattr__(self, "modulus", modulus)

    @classmethod
    def random(cls, degree: int, constant_term: int | None, modulus: int | None) -> Polynomial:
        """Return a polynomial of ``degree`` with random coefficients.

        The constant term is ``constant_term`` when given, random otherwise.
        """
        if degree < 0:
            raise InvalidDegreeError()
        modulus = _check_modulus(modulus)
        constant = (
            generate_random_scalar(modulus) if constant_term is None else constant_term % modulus
        )
        rest = [generate_random_scalar(modulus) for _ in range(degree)]
        return cls([constant, *rest], modulus)

    def degree(self) -> int:
        """Return the index of the highest non-zero coefficient, or 0 for the zero polynomial."""
        for i in reversed(range(len(self.coefficients))):
            if self.coefficients[i]:
                return i
        return 0

    def evaluate(self, x: int | None) -> int:
        """Return ``f(x) mod modulus`` by Horner's rule; None evaluates to 0."""
        if x is None:
            return 0
        x %= self.modulus
        result = 0
        for coefficient in reversed(self.coefficients):
            result = (result * x + coefficient) % self.modulus
        return result

    def evaluate_many(self, points: Iterable[int | None]) -> list[int]:
        """Evaluate at each point in turn."""
        return [self.evaluate(x) for x in points]

    def _combine(self, other: Polynomial | None, sign: int) -> Polynomial:
        if other is None:
            raise NilPolynomialError()
        if self.modulus != other.modulus:
            raise ModulusMismatchError()
        size = max(len(self.coefficients), len(other.coefficients))
        a = self.coefficients + (0,) * (size - len(self.coefficients))
        b = other.coefficients + (0,) * (size - len(other.coefficients))
        return Polynomial([x + sign * y for x, y in zip(a, b)], self.modulus)

    def add(self, other: Polynomial | None) -> Polynomial:
        """Return ``f + g``."""
        return self._combine(other, 1)

    def sub(self, other: Polynomial | None) -> Polynomial:
        """Return ``f - g``."""
        return self._combine(other, -1)

    def scalar_mul(self, k: int | None) -> Polynomial:
        """Return ``k * f``."""
        if k is None:
            raise NilScalarError()
        return Polynomial([c * k for c in self.coefficients], self.modulus)

    def is_zero(self) -> bool:
        """Return True when every coefficient is zero."""
        return not any(self.coefficients)

    def __str__(self) -> str:
        if self.is_zero():
            return "0"
        terms = []
        for i in reversed(range(len(self.coefficients))):
            c = self.coefficients[i]
            if not c:
                continue
            if i == 0:
                terms.append(str(c))
            elif i == 1:
                terms.append(f"{c}x")
            else:
                terms.append(f"{c}x^{i}")
        return " + ".join(terms)


def _multiply_by_linear(poly: list[int], a: int, scalar: int, modulus: int) -> list[int]:
    """Return ``poly * (x - a) * scalar``."""
    result = [0] * (len(poly) + 1)
    for i, c in enumerate(poly):
        result[i + 1] = (result[i + 1] + c * scalar) % modulus
        result[i] = (result[i] - c * a * scalar) % modulus
    return result


def _lagrange_basis(i: int, points: Sequence[int], modulus: int) -> list[int]:
    """Coefficients of ``L_i(x) = prod_{j != i} (x - x_j) / (x_i - x_j)``."""
    basis = [1]
    for j, xj in enumerate(points):
        if j == i:
            continue
        try:
            inverse = pow((points[i] - xj) % modulus, -1, modulus)
        except ValueError:
            continue
        basis = _multiply_by_linear(basis, xj, inverse, modulus)
    return basis


def interpolate(
    points: Sequence[int], values: Sequence[int], modulus: int | None
) -> Polynomial:
    """Return the polynomial through ``(points[i], values[i])`` by Lagrange interpolation."""
    if len(points) != len(values):
        raise PointValueMismatchError()
    if not points:
        raise EmptyPointsError()
    modulus = _check_modulus(modulus)
    result = [0] * len(points)
    for i, y in enumerate(values):
        for j, b in enumerate(_lagrange_basis(i, points, modulus)):
            result[j] = (result[j] + b * y) % modulus
    return Polynomial(result, modulus)