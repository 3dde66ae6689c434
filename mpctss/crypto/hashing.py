"""Hash helpers: digests, HMAC, HKDF, commitments, Fiat-Shamir challenges and Merkle roots."""

from __future__ import annotations

import enum
import hashlib
import hmac

from mpctss.crypto.curve.base import Curve, Point
from mpctss.crypto.hash_to_curve import (
    InvalidLengthError,
    NilCurveError,
    hash_to_curve_rfc9380,
)

__all__ = [
    "HashFunction",
    "hash_data",
    "hash_to_scalar",
    "hash_to_curve",
    "hmac_sha256",
    "verify_hmac",
    "hkdf",
    "derive_key",
    "hash_commit",
    "verify_hash_commit",
    "combine_hashes",
    "hash_points",
    "fiat_shamir_challenge",
    "deterministic_nonce",
    "merkle_root",
    "blake3_hash",
]

_SHA256_SIZE = 32
_HKDF_MAX = 255 * _SHA256_SIZE


class HashFunction(enum.IntEnum):
    """Available digest functions."""

    SHA256 = 0
    SHA512 = 1


def hash_data(data: bytes, hash_func: HashFunction | int = HashFunction.SHA256) -> bytes:
    """Digest ``data`` with SHA-512 when requested, SHA-256 otherwise."""
    if hash_func == HashFunction.SHA512:
        return hashlib.sha512(bytes(data)).digest()
    return hashlib.sha256(bytes(data)).digest()


def hash_to_scalar(
    data: bytes, modulus: int, hash_func: HashFunction | int = HashFunction.SHA256
) -> int:
    """Hash ``data`` and reduce the digest modulo ``modulus``."""
    return int.from_bytes(hash_data(data, hash_func), "big") % modulus


def hash_to_curve(data: bytes, curve: Curve | None) -> Point:
    """Map ``data`` to a point on ``curve`` with the default domain tag."""
    if curve is None:
        raise NilCurveError()
    return hash_to_curve_rfc9380(data, None, curve)


def hmac_sha256(key: bytes, data: bytes) -> bytes:
    """Return HMAC-SHA256 of ``data`` under ``key``."""
    return hmac.new(bytes(key), bytes(data), hashlib.sha256).digest()


def verify_hmac(key: bytes, data: bytes, expected_mac: bytes) -> bool:
    """Check an HMAC-SHA256 tag in constant time."""
    return hmac.compare_digest(hmac_sha256(key, data), bytes(expected_mac))


def hkdf(secret: bytes, salt: bytes | None, info: bytes | None, length: int) -> bytes:
    """Derive ``length`` bytes with HKDF-SHA256."""
    if length <= 0:
        raise InvalidLengthError()
    if length > _HKDF_MAX:
        raise InvalidLengthError("hkdf: entropy limit reached")
    prk = hmac_sha256(salt or bytes(_SHA256_SIZE), secret)
    info = bytes(info or b"")
    output = b""
    block = b""
    counter = 1
    while len(output) < length:
        block = hmac_sha256(prk, block + info + bytes([counter]))
        output += block
        counter += 1
    return output[:length]


def derive_key(master_key: bytes, context: str, key_id: int, length: int) -> bytes:
    """Derive a key bound to ``context`` and ``key_id`` from ``master_key``."""
    info = (
        b"mpc-tss-v1|"
        + context.encode("utf-8")
        + b"|"
        + (key_id & 0xFFFFFFFF).to_bytes(4, "big")
    )
    return hkdf(master_key, None, info, length)


def hash_commit(value: bytes, nonce: bytes) -> bytes:
    """Return ``SHA-256(value || nonce)``."""
    return hashlib.sha256(bytes(value) + bytes(nonce)).digest()


def verify_hash_commit(commitment: bytes, value: bytes, nonce: bytes) -> bool:
    """Check a hash commitment in constant time."""
    return hmac.compare_digest(bytes(commitment), hash_commit(value, nonce))


def combine_hashes(*args: bytes) -> bytes:
    """Return SHA-256 over the concatenation of the arguments."""
    h = hashlib.sha256()
    for item in args:
        h.update(bytes(item))
    return h.digest()


def hash_points(*args: Point | None) -> bytes:
    """Return SHA-256 over the encodings of the given points, skipping None."""
    h = hashlib.sha256()
    for point in args:
        if point is not None:
            h.update(point.to_bytes())
    return h.digest()


def fiat_shamir_challenge(transcript: bytes, modulus: int) -> int:
    """Derive a non-zero challenge from a transcript."""
    challenge = int.from_bytes(hash_data(transcript), "big") % modulus
    return challenge or 1


def deterministic_nonce(private_key: bytes, message_hash: bytes, modulus: int) -> int:
    """Derive a non-zero nonce from a private key and message hash via HMAC-SHA256."""
    v = hmac_sha256(message_hash, private_key)
    k = int.from_bytes(v, "big") % modulus
    while k == 0:
        v = hmac_sha256(v, b"\x01")
        k = int.from_bytes(v, "big") % modulus
    return k


def merkle_root(leaves: list[bytes]) -> bytes:
    """Return the Merkle root, promoting an unpaired last node unchanged."""
    if not leaves:
        return hash_data(b"")
    level = list(leaves)
    while len(level) > 1:
        paired = [combine_hashes(a, b) for a, b in zip(level[::2], level[1::2])]
        if len(level) % 2:
            paired.append(level[-1])
        level = paired
    return level[0]


def blake3_hash(data: bytes) -> bytes:
    """Fast-hash entry point; currently SHA-256."""
    return hash_data(data, HashFunction.SHA256)