"""Commitment schemes: Pedersen commitments on curves and HMAC-based hash commitments."""

from __future__ import annotations

import hmac
import time
from dataclasses import dataclass

from mpctss.crypto.curve.base import Curve, CurveError, Point
from mpctss.crypto.hash_to_curve import hash_to_curve_rfc9380
from mpctss.crypto.hashing import hmac_sha256
from mpctss.crypto.rand import generate_nonce, generate_random_scalar

__all__ = [
    "CommitmentError",
    "NilCurveError",
    "NilValueError",
    "NilScalarError",
    "EmptyValueError",
    "EmptyValuesError",
    "NilCommitmentError",
    "CurveMismatchError",
    "InvalidOpeningError",
    "InvalidCommitmentError",
    "Commitment",
    "PedersenCommitment",
    "GeneratorPair",
    "HashCommitment",
    "verify_hash_commitment",
    "batch_hash_commit",
    "add_commitments",
    "scalar_mul_commitment",
    "commit_to_curve_point",
    "verify_commitment_to_curve_point",
]

PEDERSEN_DST = b"MPC-TSS-PEDERSEN-H-V1"
PEDERSEN_MSG_PREFIX = b"PEDERSEN_GENERATOR_H_"
HASH_COMMIT_DOMAIN_TAG = b"MPC-TSS-HASH-COMMIT-V1"

_NONCE_BYTES = 32
_TIMESTAMP_BYTES = 8
_FRESHNESS_WINDOW_MS = 3_600_000


class CommitmentError(ValueError):
    """Base class for commitment failures."""

    default_message = "commitment error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class NilCurveError(CommitmentError):
    """No curve was given."""

    default_message = "curve cannot be nil"


class NilValueError(CommitmentError):
    """No value was given."""

    default_message = "value cannot be nil"


class NilScalarError(CommitmentError):
    """No scalar was given."""

    default_message = "scalar cannot be nil"


class EmptyValueError(CommitmentError):
    """An empty value was given."""

    default_message = "value cannot be empty"


class EmptyValuesError(CommitmentError):
    """An empty collection of values was given."""

    default_message = "values cannot be empty"


class NilCommitmentError(CommitmentError):
    """No commitment was given."""

    default_message = "commitment cannot be nil"


class CurveMismatchError(CommitmentError):
    """Commitments on different curves were combined."""

    default_message = "commitments must use the same curve"


class InvalidOpeningError(CommitmentError):
    """A commitment opening did not verify."""

    default_message = "commitment opening verification failed"


class InvalidCommitmentError(CommitmentError):
    """A commitment is malformed."""

    default_message = "invalid commitment"


@dataclass(frozen=True)
class Commitment:
    """A commitment point on a curve."""

    c: Point
    curve: Curve


@dataclass(frozen=True)
class PedersenCommitment(Commitment):
    """A Pedersen commitment ``C = value*G + blinding*H`` together with its opening."""

    value: int | None = None
    blinding: int | None = None

    @property
    def commitment(self) -> Commitment:
        """The public commitment, without the opening."""
        return Commitment(self.c, self.curve)

    def verify(self, generators: GeneratorPair | None) -> bool:
        """Return True when the stored opening reproduces the commitment point."""
        if generators is None or self.value is None or self.blinding is None:
            return False
        try:
            expected = generators.commit(self.value, self.blinding)
        except (CommitmentError, CurveError):
            return False
        return self.c == expected.c

    def to_bytes(self) -> bytes:
        """Return the encoding of the commitment point, or empty bytes when there is none."""
        if self.c is None:
            return b""
        if self.c.curve is not None:
            return self.c.to_bytes()
        return self.curve.marshal(self.c)


@dataclass(frozen=True)
class GeneratorPair:
    """The base point of ``g`` and an independent generator ``h`` for Pedersen commitments."""

    g: Curve
    h: Point

    @classmethod
    def for_curve(cls, curve: Curve | None) -> GeneratorPair:
        """Derive ``H`` deterministically from the curve name by hashing to the curve."""
        if curve is None:
            raise NilCurveError()
        msg = PEDERSEN_MSG_PREFIX + curve.name().encode("utf-8")
        return cls(curve, hash_to_curve_rfc9380(msg, PEDERSEN_DST, curve))

    def commit(self, value: int | None, blinding: int | None = None) -> PedersenCommitment:
        """Commit to ``value``; a random blinding factor is drawn when none is given."""
        if value is None:
            raise NilValueError()
        order = self.g.order()
        if blinding is None:
            blinding = generate_random_scalar(order)
        v = value % order
        r = blinding % order
        point = self.g.add(self.g.scalar_base_mult(v), self.g.scalar_mult(self.h, r))
        return PedersenCommitment(c=point, curve=self.g, value=v, blinding=r)

    def batch_commit(self, values: list[int]) -> list[PedersenCommitment]:
        """Commit to each value with its own random blinding factor."""
        if not values:
            raise EmptyValuesError()
        return [self.commit(value) for value in values]


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


def _timestamp_is_fresh(timestamp: int) -> bool:
    diff = _now_millis() - timestamp
    return 0 <= diff <= _FRESHNESS_WINDOW_MS


def _encode_timestamp(timestamp: int) -> bytes:
    return (timestamp & 0xFFFFFFFFFFFFFFFF).to_bytes(_TIMESTAMP_BYTES, "big")


def _decode_timestamp(data: bytes) -> int:
    return int.from_bytes(data, "big", signed=True)


def _compute_hash_commitment(value: bytes, nonce: bytes, timestamp: int, context: bytes) -> bytes:
    data = bytes(value) + _encode_timestamp(timestamp) + bytes(context) + HASH_COMMIT_DOMAIN_TAG
    return hmac_sha256(nonce, data)


@dataclass(frozen=True)
class HashCommitment:
    """An HMAC-SHA256 commitment with a secret nonce, timestamp and context."""

    commitment_hash: bytes
    nonce: bytes
    value: bytes
    timestamp: int
    context: bytes

    @classmethod
    def create(cls, value: bytes, context: bytes | None = None) -> HashCommitment:
        """Commit to ``value`` under ``context`` with a fresh 32-byte nonce."""
        if not value:
            raise EmptyValueError()
        value = bytes(value)
        context = bytes(context or b"")
        nonce = generate_nonce(_NONCE_BYTES)
        timestamp = _now_millis()
        digest = _compute_hash_commitment(value, nonce, timestamp, context)
        return cls(digest, nonce, value, timestamp, context)

    @property
    def commitment_value(self) -> bytes:
        """The commitment hash, safe to publish."""
        return self.commitment_hash

    def reveal(self) -> tuple[bytes, bytes, int, bytes]:
        """Return the opening ``(value, nonce, timestamp, context)``."""
        return self.value, self.nonce, self.timestamp, self.context

    def verify(self) -> bool:
        """Return True when the opening reproduces the commitment hash."""
        expected = _compute_hash_commitment(self.value, self.nonce, self.timestamp, self.context)
        return hmac.compare_digest(bytes(self.commitment_hash), expected)


def verify_hash_commitment(
    commitment_hash: bytes,
    value: bytes,
    nonce: bytes,
    timestamp: int,
    context: bytes | None,
) -> bool:
    """Verify an opening, also requiring the timestamp to lie within the past hour."""
    if not commitment_hash or not value or not nonce:
        return False
    if not _timestamp_is_fresh(timestamp):
        return False
    expected = _compute_hash_commitment(value, nonce, timestamp, bytes(context or b""))
    return hmac.compare_digest(bytes(commitment_hash), expected)


def batch_hash_commit(values: list[bytes], context: bytes | None = None) -> list[HashCommitment]:
    """Create a hash commitment for each value under the same context."""
    if not values:
        raise EmptyValuesError()
    return [HashCommitment.create(value, context) for value in values]


def _require_opening(commitment: PedersenCommitment) -> tuple[int, int]:
    if commitment.value is None or commitment.blinding is None:
        raise InvalidCommitmentError()
    return commitment.value, commitment.blinding


def add_commitments(
    c1: PedersenCommitment | None, c2: PedersenCommitment | None
) -> PedersenCommitment:
    """Add two commitments: the result commits to the sums of values and blindings."""
    if c1 is None or c2 is None:
        raise NilCommitmentError()
    if c1.curve.name() != c2.curve.name():
        raise CurveMismatchError()
    v1, r1 = _require_opening(c1)
    v2, r2 = _require_opening(c2)
    order = c1.curve.order()
    return PedersenCommitment(
        c=c1.curve.add(c1.c, c2.c),
        curve=c1.curve,
        value=(v1 + v2) % order,
        blinding=(r1 + r2) % order,
    )


def scalar_mul_commitment(
    commitment: PedersenCommitment | None, scalar: int | None
) -> PedersenCommitment:
    """Multiply a commitment by ``scalar``, scaling its value and blinding."""
    if commitment is None:
        raise NilCommitmentError()
    if scalar is None:
        raise NilScalarError()
    value, blinding = _require_opening(commitment)
    order = commitment.curve.order()
    return PedersenCommitment(
        c=commitment.curve.scalar_mult(commitment.c, scalar),
        curve=commitment.curve,
        value=value * scalar % order,
        blinding=blinding * scalar % order,
    )


def commit_to_curve_point(
    point: Point | None, curve: Curve, context: bytes | None = None
) -> tuple[PedersenCommitment, bytes]:
    """Hash-commit to a point; return a wrapper of the point and ``nonce || timestamp``."""
    if point is None:
        raise NilValueError()
    hashed = HashCommitment.create(point.to_bytes(), context)
    wrapper = PedersenCommitment(c=point, curve=curve, value=None, blinding=None)
    return wrapper, hashed.nonce + _encode_timestamp(hashed.timestamp)


def verify_commitment_to_curve_point(
    commitment_bytes: bytes,
    point: Point | None,
    decommit: bytes,
    curve: Curve,
    context: bytes | None = None,
) -> bool:
    """Check a point against its commitment hash and ``nonce || timestamp`` decommitment."""
    if point is None or not commitment_bytes or len(decommit) < _TIMESTAMP_BYTES:
        return False
    decommit = bytes(decommit)
    nonce = decommit[:-_TIMESTAMP_BYTES]
    timestamp = _decode_timestamp(decommit[-_TIMESTAMP_BYTES:])
    expected = _compute_hash_commitment(point.to_bytes(), nonce, timestamp, bytes(context or b""))
    return hmac.compare_digest(bytes(commitment_bytes), expected)