"""Cryptographically secure random values: bytes, scalars, integers, primes and shuffles."""

from __future__ import annotations

import secrets
from typing import MutableSequence

__all__ = [
    "RandomError",
    "InvalidLengthError",
    "InvalidMaxError",
    "InvalidRangeError",
    "InvalidBitSizeError",
    "generate_random_bytes",
    "generate_random_scalar",
    "generate_random_int",
    "generate_nonce",
    "generate_random_prime",
    "shuffle",
]


class RandomError(ValueError):
    """Base class for random-generation failures."""

    default_message = "random generation error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidLengthError(RandomError):
    """A requested length was not positive."""

    default_message = "invalid length: must be positive"


class InvalidMaxError(RandomError):
    """An upper bound was missing or not positive."""

    default_message = "max must be positive"


class InvalidRangeError(RandomError):
    """A range's lower bound was not below its upper bound."""

    default_message = "invalid range: min must be less than max"


class InvalidBitSizeError(RandomError):
    """A prime bit size was below two."""

    default_message = "bit size must be at least 2"


_SMALL_PRIMES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53)


def _is_probable_prime(n: int, rounds: int = 32) -> bool:
    if n < 2:
        return False
    for q in _SMALL_PRIMES:
        if n % q == 0:
            return n == q
    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1
    for _ in range(rounds):
        a = 2 + secrets.randbelow(n - 3)
        x = pow(a, d, n)
        if x in (1, n - 1):
            continue
        for _ in range(s - 1):
            x = x * x % n
            if x == n - 1:
                break
        else:
            return False
    return True


def generate_random_bytes(n: int) -> bytes:
    """Return ``n`` random bytes."""
    if n <= 0:
        raise InvalidLengthError()
    return secrets.token_bytes(n)


def generate_random_scalar(maximum: int | None) -> int:
    """Return a uniformly random integer in ``[1, maximum)``."""
    if maximum is None:
        raise InvalidMaxError("max cannot be nil")
    if maximum <= 0:
        raise InvalidMaxError()
    if maximum == 1:
        raise InvalidMaxError("max must be greater than 1 to yield a non-zero scalar")
    value = secrets.randbelow(maximum)
    while value == 0:
        value = secrets.randbelow(maximum)
    return value


def generate_random_int(minimum: int, maximum: int) -> int:
    """Return a uniformly random integer in ``[minimum, maximum)``."""
    if minimum >= maximum:
        raise InvalidRangeError()
    return minimum + secrets.randbelow(maximum - minimum)


def generate_nonce(length: int) -> bytes:
    """Return a random nonce of ``length`` bytes."""
    return generate_random_bytes(length)


def generate_random_prime(bits: int) -> int:
    """Return a random prime of exactly ``bits`` bits with its two top bits set."""
    if bits < 2:
        raise InvalidBitSizeError()
    top = (1 << (bits - 1)) | (1 << (bits - 2))
    while True:
        candidate = secrets.randbits(bits) | top | 1
        if _is_probable_prime(candidate):
            return candidate


def shuffle(items: MutableSequence) -> None:
    """Shuffle ``items`` in place with a Fisher-Yates pass driven by secure randomness."""
    for i in reversed(range(1, len(items))):
        j = generate_random_int(0, i + 1)
        items[i], items[j] = items[j], items[i]