"""Short Weierstrass curves (secp256k1 and NIST P-256) in affine coordinates."""

from __future__ import annotations

import hashlib
import hmac
from typing import Iterator, Optional, Tuple

from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from mpctss.crypto.curve.base import (
    Curve,
    CurveParams,
    InvalidEncodingError,
    InvalidPointError,
    InvalidScalarError,
    Point,
    PointAtInfinityError,
)

__all__ = ["WeierstrassCurve", "Secp256k1Curve", "P256Curve"]

_Affine = Optional[Tuple[int, int]]


class WeierstrassCurve(Curve):
    """A curve ``y^2 = x^3 + a*x + b`` over a prime field."""

    accepts_uncompressed = False

    def __init__(self, params: CurveParams, a: int) -> None:
        super().__init__(params)
        self.a = a % params.p

    @property
    def _coord_len(self) -> int:
        return (self.params.bit_size + 7) // 8

    def _wrap(self, affine: _Affine) -> Point:
        if affine is None:
            return Point(None, None, self)
        return Point(affine[0], affine[1], self)

    def _add_affine(self, p1: _Affine, p2: _Affine) -> _Affine:
        if p1 is None:
            return p2
        if p2 is None:
            return p1
        p = self.params.p
        x1, y1 = p1
        x2, y2 = p2
        if x1 == x2:
            if (y1 + y2) % p == 0:
                return None
            return self._double_affine(p1)
        lam = (y2 - y1) * pow(x2 - x1, -1, p) % p
        x3 = (lam * lam - x1 - x2) % p
        return x3, (lam * (x1 - x3) - y1) % p

    def _double_affine(self, pt: _Affine) -> _Affine:
        if pt is None:
            return None
        p = self.params.p
        x, y = pt
        if y == 0:
            return None
        lam = (3 * x * x + self.a) * pow(2 * y, -1, p) % p
        x3 = (lam * lam - 2 * x) % p
        return x3, (lam * (x - x3) - y) % p

    def _multiply(self, pt: _Affine, k: int) -> _Affine:
        result: _Affine = None
        addend = pt
        while k:
            if k & 1:
                result = self._add_affine(result, addend)
            addend = self._double_affine(addend)
            k >>= 1
        return result

    def _lift_x(self, x: int, odd: bool) -> _Affine:
        p = self.params.p
        if not 0 <= x < p:
            return None
        rhs = (pow(x, 3, p) + self.a * x + self.params.b) % p
        y = pow(rhs, (p + 1) // 4, p)
        if y * y % p != rhs:
            return None
        if (y & 1) != int(odd):
            y = (p - y) % p
        return x, y

    def _require_on_curve(self, *points: Point | None) -> None:
        for pt in points:
            if pt is None or not self.is_on_curve(pt):
                raise InvalidPointError()

    def scalar_base_mult(self, k: int | None) -> Point:
        """Return ``k * G`` with ``k`` reduced modulo the group order."""
        self._require_positive(k)
        k = self._reduce_nonzero(k)
        return self._wrap(self._multiply((self.params.gx, self.params.gy), k))

    def scalar_mult(self, p: Point | None, k: int | None) -> Point:
        """Return ``k * p`` with ``k`` reduced modulo the group order."""
        if p is None:
            raise InvalidPointError()
        self._require_positive(k)
        self._require_on_curve(p)
        k = self._reduce_nonzero(k)
        return self._wrap(self._multiply((p.x, p.y), k))

    def add(self, p1: Point | None, p2: Point | None) -> Point:
        """Return ``p1 + p2``; both points must be on the curve."""
        self._require_on_curve(p1, p2)
        return self._wrap(self._add_affine((p1.x, p1.y), (p2.x, p2.y)))

    def double(self, p: Point | None) -> Point:
        """Return ``2 * p``."""
        self._require_on_curve(p)
        return self._wrap(self._double_affine((p.x, p.y)))

    def negate(self, p: Point | None) -> Point:
        """Return ``(x, -y mod p)``."""
        self._require_on_curve(p)
        return Point(p.x, (self.params.p - p.y) % self.params.p, self)

    def is_on_curve(self, p: Point | None) -> bool:
        """Return True when ``p`` has in-range coordinates satisfying the equation."""
        if p is None or p.x is None or p.y is None:
            return False
        q = self.params.p
        x, y = p.x, p.y
        if not (0 <= x < q and 0 <= y < q):
            return False
        return (y * y - (x * x * x + self.a * x + self.params.b)) % q == 0

    def marshal(self, p: Point) -> bytes:
        """Return the SEC1 compressed encoding of ``p``."""
        if p is None or (p.x is None) != (p.y is None):
            raise InvalidPointError()
        if p.is_infinity():
            raise PointAtInfinityError()
        size = self._coord_len
        if not (0 <= p.x < 1 << (8 * size)) or p.y < 0:
            raise InvalidPointError()
        return bytes([2 | (p.y & 1)]) + p.x.to_bytes(size, "big")

    def unmarshal(self, data: bytes) -> Point:
        """Decode a SEC1 encoding into a point on this curve."""
        data = bytes(data)
        size = self._coord_len
        if len(data) not in (size + 1, 2 * size + 1):
            raise InvalidEncodingError()
        prefix = data[0]
        if len(data) == size + 1 and prefix in (2, 3):
            affine = self._lift_x(int.from_bytes(data[1:], "big"), prefix == 3)
            if affine is None:
                raise InvalidEncodingError()
            point = self._wrap(affine)
        elif len(data) == 2 * size + 1 and prefix == 4 and self.accepts_uncompressed:
            point = Point(
                int.from_bytes(data[1 : size + 1], "big"),
                int.from_bytes(data[size + 1 :], "big"),
                self,
            )
            if not self.is_on_curve(point):
                raise InvalidEncodingError()
        else:
            raise InvalidEncodingError()
        if not self.is_on_curve(point):
            raise InvalidPointError()
        return point


_SECP256K1 = CurveParams(
    name="secp256k1",
    p=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F,
    n=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141,
    b=7,
    gx=0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
    gy=0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
    bit_size=256,
)

_P256 = CurveParams(
    name="P-256",
    p=0xFFFFFFFF00000001000000000000000000000000FFFFFFFFFFFFFFFFFFFFFFFF,
    n=0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551,
    b=0x5AC635D8AA3A93E7B3EBBD55769886BC651D06B0CC53B0F63BCE3C3E27D2604B,
    gx=0x6B17D1F2E12C4247F8BCE6E563A440F277037D812DEB33A0F4A13945D898C296,
    gy=0x4FE342E2FE1A7F9B8EE7EB4A7C0F9E162BCE33576B315ECECBB6406837BF51F5,
    bit_size=256,
)


def _hmac(key: bytes, msg: bytes) -> bytes:
    return hmac.new(key, msg, hashlib.sha256).digest()


def _rfc6979_nonces(d: int, message_hash: bytes, n: int) -> Iterator[int]:
    """Yield deterministic nonce candidates (RFC 6979, HMAC-SHA256)."""
    x = d.to_bytes(32, "big")
    h1 = (int.from_bytes(message_hash, "big") % n).to_bytes(32, "big")
    v = b"\x01" * 32
    k = b"\x00" * 32
    k = _hmac(k, v + b"\x00" + x + h1)
    v = _hmac(k, v)
    k = _hmac(k, v + b"\x01" + x + h1)
    v = _hmac(k, v)
    while True:
        v = _hmac(k, v)
        candidate = int.from_bytes(v, "big")
        if 1 <= candidate < n:
            yield candidate
        k = _hmac(k, v + b"\x00")
        v = _hmac(k, v)


class Secp256k1Curve(WeierstrassCurve):
    """The secp256k1 curve, with ECDSA signing, verification and key recovery."""

    accepts_uncompressed = True

    def __init__(self) -> None:
        super().__init__(_SECP256K1, 0)

    def sign_ecdsa(self, private_key: int, message_hash: bytes) -> bytes:
        """Sign a 32-byte hash with an RFC 6979 nonce; return a low-S DER signature."""
        message_hash = bytes(message_hash)
        if len(message_hash) != 32:
            raise InvalidEncodingError()
        n = self.params.n
        d = private_key % n
        if d == 0:
            raise InvalidScalarError()
        e = int.from_bytes(message_hash, "big") % n
        g = (self.params.gx, self.params.gy)
        for k in _rfc6979_nonces(d, message_hash, n):
            r_point = self._multiply(g, k)
            if r_point is None:
                continue
            r = r_point[0] % n
            if r == 0:
                continue
            s = pow(k, -1, n) * (e + r * d) % n
            if s == 0:
                continue
            if s > n >> 1:
                s = n - s
            return encode_dss_signature(r, s)
        raise InvalidScalarError()

    def verify_ecdsa(self, public_key: Point | None, message_hash: bytes, signature: bytes) -> bool:
        """Return True when the DER ``signature`` is valid for ``message_hash`` and ``public_key``."""
        if len(message_hash) != 32 or not self.is_on_curve(public_key):
            return False
        try:
            r, s = decode_dss_signature(bytes(signature))
        except (ValueError, TypeError):
            return False
        n = self.params.n
        if not (1 <= r < n and 1 <= s < n):
            return False
        e = int.from_bytes(bytes(message_hash), "big") % n
        w = pow(s, -1, n)
        total = self._add_affine(
            self._multiply((self.params.gx, self.params.gy), e * w % n),
            self._multiply((public_key.x, public_key.y), r * w % n),
        )
        return total is not None and total[0] % n == r

    def recover_public_key(self, message_hash: bytes, r: int, s: int, recovery_id: int) -> Point:
        """Recover the signer's public key from ``(r, s)`` and a recovery id in 0..3."""
        message_hash = bytes(message_hash)
        if len(message_hash) != 32 or recovery_id not in range(4):
            raise InvalidEncodingError()
        n = self.params.n
        if not (1 <= r < n and 1 <= s < n):
            raise InvalidScalarError()
        x = r + (recovery_id >> 1) * n
        big_r = self._lift_x(x, bool(recovery_id & 1))
        if big_r is None:
            raise InvalidPointError()
        e = int.from_bytes(message_hash, "big") % n
        r_inv = pow(r, -1, n)
        combined = self._add_affine(
            self._multiply(big_r, s * r_inv % n),
            self._multiply((self.params.gx, self.params.gy), (-e) * r_inv % n),
        )
        if combined is None:
            raise InvalidPointError()
        return self._wrap(combined)


class P256Curve(WeierstrassCurve):
    """The NIST P-256 curve."""

    def __init__(self) -> None:
        super().__init__(_P256, _P256.p - 3)