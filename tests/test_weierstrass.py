import hashlib

import pytest

from mpctss.crypto.curve.base import (
    CurveError,
    InvalidEncodingError,
    InvalidPointError,
    InvalidScalarError,
    Point,
    PointAtInfinityError,
    ScalarZeroError,
)
from mpctss.crypto.curve.weierstrass import P256Curve, Secp256k1Curve
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature


@pytest.fixture
def secp():
    return Secp256k1Curve()


def test_generator_on_curve():
    for curve in (Secp256k1Curve(), P256Curve()):
        assert curve.is_on_curve(curve.generator())


def test_order_minus_one_is_negated_generator():
    for curve in (Secp256k1Curve(), P256Curve()):
        g = curve.generator()
        assert curve.scalar_base_mult(curve.order() - 1) == curve.negate(g)


def test_scalar_reduced_mod_order():
    for curve in (Secp256k1Curve(), P256Curve()):
        assert curve.scalar_base_mult(curve.order() + 1) == curve.generator()


def test_scalar_errors():
    for curve in (Secp256k1Curve(), P256Curve()):
        g = curve.generator()
        with pytest.raises(InvalidScalarError):
            curve.scalar_mult(g, 0)
        with pytest.raises(InvalidScalarError):
            curve.scalar_mult(g, None)
        with pytest.raises(ScalarZeroError):
            curve.scalar_mult(g, curve.order())
        with pytest.raises(InvalidPointError):
            curve.scalar_mult(None, 3)
        with pytest.raises(InvalidPointError):
            curve.scalar_mult(Point(1, 1, curve), 3)


def test_base_mult_scalar_errors():
    for curve in (Secp256k1Curve(), P256Curve()):
        with pytest.raises(InvalidScalarError):
            curve.scalar_base_mult(0)
        with pytest.raises(InvalidScalarError):
            curve.scalar_base_mult(None)
        with pytest.raises(ScalarZeroError):
            curve.scalar_base_mult(curve.order())


def test_off_curve_point_rejected():
    for curve in (Secp256k1Curve(), P256Curve()):
        assert curve.is_on_curve(Point(1, 1, curve)) is False
        with pytest.raises(InvalidPointError):
            curve.add(curve.generator(), Point(1, 1, curve))


def test_addition_matches_multiplication():
    for curve in (Secp256k1Curve(), P256Curve()):
        two = curve.scalar_base_mult(2)
        three = curve.scalar_base_mult(3)
        assert curve.add(two, three) == curve.scalar_base_mult(5)
        assert curve.add(three, two) == curve.add(two, three)


def test_point_plus_negation_is_infinity():
    for curve in (Secp256k1Curve(), P256Curve()):
        p = curve.scalar_base_mult(42)
        assert curve.add(p, curve.negate(p)).is_infinity()


def test_scalar_mult_composes():
    for curve in (Secp256k1Curve(), P256Curve()):
        p = curve.scalar_base_mult(11)
        assert curve.scalar_mult(p, 13) == curve.scalar_base_mult(143)


def test_marshal_generator():
    for curve in (Secp256k1Curve(), P256Curve()):
        params = curve.params
        expected = bytes([2 + (params.gy & 1)]) + params.gx.to_bytes(32, "big")
        assert curve.marshal(curve.generator()) == expected


def test_marshal_infinity_raises():
    for curve in (Secp256k1Curve(), P256Curve()):
        with pytest.raises(PointAtInfinityError):
            curve.marshal(Point(None, None, curve))


@pytest.mark.parametrize("k", [1, 2, 7, 2**128 + 3, 2**200 - 1])
def test_marshal_roundtrip(k):
    for curve in (Secp256k1Curve(), P256Curve()):
        p = curve.scalar_base_mult(k)
        data = curve.marshal(p)
        assert len(data) == 33
        assert curve.unmarshal(data) == p


def test_unmarshal_bad_length():
    for curve in (Secp256k1Curve(), P256Curve()):
        with pytest.raises(InvalidEncodingError):
            curve.unmarshal(b"\x02" + b"\x00" * 10)


def test_unmarshal_bad_prefix():
    for curve in (Secp256k1Curve(), P256Curve()):
        data = curve.marshal(curve.generator())
        with pytest.raises(InvalidEncodingError):
            curve.unmarshal(b"\x05" + data[1:])


def test_unmarshal_x_out_of_field():
    for curve in (Secp256k1Curve(), P256Curve()):
        with pytest.raises(InvalidEncodingError):
            curve.unmarshal(b"\x02" + curve.params.p.to_bytes(32, "big"))


def test_p256_rejects_uncompressed():
    c = P256Curve()
    g = c.generator()
    data = b"\x04" + g.x.to_bytes(32, "big") + g.y.to_bytes(32, "big")
    with pytest.raises(InvalidEncodingError):
        c.unmarshal(data)


def test_secp256k1_accepts_uncompressed(secp):
    p = secp.scalar_base_mult(99)
    data = b"\x04" + p.x.to_bytes(32, "big") + p.y.to_bytes(32, "big")
    assert secp.unmarshal(data) == p


def test_secp256k1_uncompressed_off_curve(secp):
    data = b"\x04" + (1).to_bytes(32, "big") + (1).to_bytes(32, "big")
    with pytest.raises(InvalidEncodingError):
        secp.unmarshal(data)


def test_secp256k1_double_generator(secp):
    expected_x = 0xC6047F9441ED7D6D3045406E95C07CD85C778E4B8CEF3CA7ABAC09B95C709EE5
    assert secp.double(secp.generator()).x == expected_x


def _hash(text):
    return hashlib.sha256(text.encode()).digest()


def test_sign_and_verify(secp):
    key = 0x1234567890ABCDEF
    pub = secp.scalar_base_mult(key)
    digest = _hash("transfer")
    sig = secp.sign_ecdsa(key, digest)
    assert secp.verify_ecdsa(pub, digest, sig) is True


def test_sign_is_deterministic_and_low_s(secp):
    digest = _hash("deterministic")
    first = secp.sign_ecdsa(777, digest)
    assert secp.sign_ecdsa(777, digest) == first
    _, s = decode_dss_signature(first)
    assert s <= secp.order() // 2


def test_verify_rejects_wrong_message_and_key(secp):
    digest = _hash("one")
    sig = secp.sign_ecdsa(555, digest)
    assert secp.verify_ecdsa(secp.scalar_base_mult(555), _hash("two"), sig) is False
    assert secp.verify_ecdsa(secp.scalar_base_mult(556), digest, sig) is False


def test_verify_rejects_garbage(secp):
    pub = secp.scalar_base_mult(5)
    assert secp.verify_ecdsa(pub, _hash("x"), b"\x00\x01\x02") is False
    assert secp.verify_ecdsa(pub, b"short", secp.sign_ecdsa(5, _hash("x"))) is False


def test_sign_rejects_bad_hash_length(secp):
    with pytest.raises(InvalidEncodingError):
        secp.sign_ecdsa(5, b"too short")


def test_recover_public_key(secp):
    key = 0xDEADBEEF
    pub = secp.scalar_base_mult(key)
    digest = _hash("recover me")
    r, s = decode_dss_signature(secp.sign_ecdsa(key, digest))
    recovered = []
    for rid in range(4):
        try:
            recovered.append(secp.recover_public_key(digest, r, s, rid))
        except CurveError:
            continue
    assert pub in recovered


def test_recover_rejects_bad_input(secp):
    with pytest.raises(InvalidEncodingError):
        secp.recover_public_key(b"short", 1, 1, 0)
    with pytest.raises(InvalidScalarError):
        secp.recover_public_key(_hash("x"), 0, 1, 0)