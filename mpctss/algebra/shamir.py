"""Shamir (t, n) threshold secret sharing and Feldman share verification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from mpctss.algebra.polynomial import (
    DuplicatePointsError,
    InsufficientSharesError,
    InvalidModulusError,
    InvalidShareError,
    NilPointError,
    NilScalarError,
    NilSecretError,
    NilShareError,
    Polynomial,
    ShareIndexMismatchError,
    TooManySharesError,
    interpolate,
)
from mpctss.security.validation import validate_threshold

__all__ = [
    "Share",
    "ShamirSecretSharing",
    "verify_share",
    "add_shares",
    "scalar_mul_share",
]


@dataclass(frozen=True)
class Share:
    """A point ``(index, f(index))`` on the sharing polynomial."""

    index: int
    value: int


@dataclass(frozen=True)
class ShamirSecretSharing:
    """Splits secrets into ``num_shares`` shares, any ``threshold`` of which recover it."""

    threshold: int
    num_shares: int
    modulus: int

    def __post_init__(self) -> None:
        validate_threshold(self.threshold, self.num_shares)
        if self.modulus is None or self.modulus <= 0:
            raise InvalidModulusError()

    def split(self, secret: int | None) -> tuple[list[Share], Polynomial]:
        """Return shares ``(i, f(i))`` for ``i = 1..n`` and the random polynomial used."""
        if secret is None:
            raise NilSecretError()
        polynomial = Polynomial.random(self.threshold - 1, secret % self.modulus, self.modulus)
        shares = [Share(i, polynomial.evaluate(i)) for i in range(1, self.num_shares + 1)]
        return shares, polynomial

    def _select(self, shares: Sequence[Share | None]) -> list[Share]:
        selected = list(shares[: self.threshold])
        if any(share is None for share in selected):
            raise NilShareError()
        return selected

    def combine(self, shares: Sequence[Share | None]) -> int:
        """Recover the secret from the first ``threshold`` of the given shares."""
        if len(shares) < self.threshold:
            raise InsufficientSharesError()
        if len(shares) > self.num_shares:
            raise TooManySharesError()
        selected = self._select(shares)
        points = [share.index for share in selected]
        if len(set(points)) != len(points):
            raise DuplicatePointsError()
        polynomial = interpolate(points, [share.value for share in selected], self.modulus)
        return polynomial.coefficients[0]

    def combine_at_point(self, shares: Sequence[Share | None], x: int | None) -> int:
        """Evaluate the shared polynomial at ``x`` from the first ``threshold`` shares."""
        if len(shares) < self.threshold:
            raise InsufficientSharesError()
        if x is None:
            raise NilPointError()
        selected = self._select(shares)
        m = self.modulus
        result = 0
        for i, si in enumerate(selected):
            basis = 1
            for j, sj in enumerate(selected):
                if i == j:
                    continue
                try:
                    inverse = pow((si.index - sj.index) % m, -1, m)
                except ValueError as exc:
                    raise InvalidShareError() from exc
                basis = basis * ((x - sj.index) % m) * inverse % m
            result = (result + si.value * basis) % m
        return result

    def refresh_shares(self, old_shares: Sequence[Share | None]) -> list[Share]:
        """Return fresh shares of the same secret under a new random polynomial."""
        secret = self.combine(old_shares)
        new_shares, _ = self.split(secret)
        return new_shares


def verify_share(
    share: Share | None,
    commitments: Sequence[int],
    modulus: int,
    generator: int,
    prime: int,
) -> bool:
    """Feldman check: ``g^value == prod commitments[i]^(index^i)`` modulo ``prime``."""
    if share is None or not commitments:
        return False
    expected = 1
    index_power = 1
    for commitment in commitments:
        expected = expected * pow(commitment, index_power, prime) % prime
        index_power = index_power * share.index % modulus
    return expected == pow(generator, share.value, prime)


def add_shares(share1: Share | None, share2: Share | None, modulus: int) -> Share:
    """Add two shares at the same index; the result shares the sum of the secrets."""
    if share1 is None or share2 is None:
        raise NilShareError()
    if share1.index != share2.index:
        raise ShareIndexMismatchError()
    return Share(share1.index, (share1.value + share2.value) % modulus)


def scalar_mul_share(share: Share | None, scalar: int | None, modulus: int) -> Share:
    """Multiply a share by ``scalar``; the result shares the scaled secret."""
    if share is None:
        raise NilShareError()
    if scalar is None:
        raise NilScalarError()
    return Share(share.index, share.value * scalar % modulus)