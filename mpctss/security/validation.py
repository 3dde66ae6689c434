"""Parameter validation and secure random scalar generation."""

from __future__ import annotations

import secrets

__all__ = [
    "ValidationError",
    "InvalidThresholdError",
    "InvalidPartyIDError",
    "InvalidPartyCountError",
    "InvalidRangeError",
    "validate_threshold",
    "validate_party_id",
    "validate_scalar_in_range",
    "validate_nonzero_scalar",
    "sanitize_input",
    "generate_random_scalar",
]


class ValidationError(ValueError):
    """Base class for validation failures."""


class InvalidThresholdError(ValidationError):
    """Threshold parameters do not satisfy 1 <= t <= n."""

    def __init__(self, message: str = "invalid threshold: must satisfy 1 <= t <= n") -> None:
        super().__init__(message)


class InvalidPartyIDError(ValidationError):
    """Party ID lies outside [0, n)."""

    def __init__(self, message: str = "invalid party ID: must be in range [0, n)") -> None:
        super().__init__(message)


class InvalidPartyCountError(ValidationError):
    """Fewer than two parties were given."""

    def __init__(self, message: str = "invalid party count: must be >= 2") -> None:
        super().__init__(message)


class InvalidRangeError(ValidationError):
    """A value lies outside its expected range."""

    def __init__(self, message: str = "value out of valid range") -> None:
        super().__init__(message)


def validate_threshold(threshold: int, parties: int) -> int:
    """Check that ``1 <= threshold <= parties`` and ``parties >= 2``; return the threshold."""
    if parties < 2:
        raise InvalidPartyCountError()
    if threshold < 1 or threshold > parties:
        raise InvalidThresholdError()
    return threshold


def validate_party_id(party_id: int, parties: int) -> int:
    """Check that ``party_id`` lies in ``[0, parties)``; return the party ID."""
    if parties < 2:
        raise InvalidPartyCountError()
    if party_id < 0 or party_id >= parties:
        raise InvalidPartyIDError()
    return party_id


def validate_scalar_in_range(value: int | None, maximum: int | None) -> int:
    """Check that ``value`` lies in ``[1, maximum)``; return the value."""
    if value is None or maximum is None:
        raise ValidationError("nil value provided")
    if value <= 0:
        raise ValidationError("scalar must be positive")
    if value >= maximum:
        raise InvalidRangeError()
    return value


def validate_nonzero_scalar(value: int | None) -> int:
    """Check that ``value`` is present and non-zero; return the value."""
    if value is None:
        raise ValidationError("nil scalar")
    if value == 0:
        raise ValidationError("scalar is zero")
    return value


def sanitize_input(text: str, max_length: int) -> str:
    """Reject text longer than ``max_length`` bytes or containing null bytes."""
    if len(text.encode("utf-8")) > max_length:
        raise ValidationError("input exceeds maximum length")
    if "\0" in text:
        raise ValidationError("input contains null bytes")
    return text


def generate_random_scalar(maximum: int | None) -> int:
    """Return a uniformly random integer in ``[1, maximum)``."""
    if maximum is None or maximum <= 0:
        raise ValidationError("max must be positive")
    if maximum == 1:
        raise ValidationError("max must be greater than 1 to yield a non-zero scalar")
    value = secrets.randbelow(maximum)
    while value == 0:
        value = secrets.randbelow(maximum)
    return value