from itertools import combinations

import pytest

from mpctss.algebra.polynomial import (
    DuplicatePointsError,
    InsufficientSharesError,
    InvalidModulusError,
    NilPointError,
    NilScalarError,
    NilSecretError,
    NilShareError,
    ShareIndexMismatchError,
    TooManySharesError,
)
from mpctss.algebra.shamir import (
    ShamirSecretSharing,
    Share,
    add_shares,
    scalar_mul_share,
    verify_share,
)
from mpctss.security.validation import InvalidPartyCountError, InvalidThresholdError

PRIME = 7919


@pytest.fixture
def sss():
    return ShamirSecretSharing(3, 5, PRIME)


def test_construction_errors():
    with pytest.raises(InvalidPartyCountError):
        ShamirSecretSharing(1, 1, PRIME)
    with pytest.raises(InvalidThresholdError):
        ShamirSecretSharing(4, 3, PRIME)
    with pytest.raises(InvalidModulusError):
        ShamirSecretSharing(2, 3, 0)


def test_split_produces_indexed_shares(sss):
    shares, poly = sss.split(1234)
    assert [s.index for s in shares] == [1, 2, 3, 4, 5]
    assert all(s.value == poly.evaluate(s.index) for s in shares)
    assert poly.coefficients[0] == 1234
    assert len(poly.coefficients) == 3


def test_split_nil_secret(sss):
    with pytest.raises(NilSecretError):
        sss.split(None)


def test_any_threshold_subset_recovers_secret(sss):
    shares, _ = sss.split(4321)
    for subset in combinations(shares, 3):
        assert sss.combine(list(subset)) == 4321


def test_secret_is_normalized(sss):
    shares, _ = sss.split(PRIME + 9)
    assert sss.combine(shares) == 9


def test_combine_errors(sss):
    shares, _ = sss.split(10)
    with pytest.raises(InsufficientSharesError):
        sss.combine(shares[:2])
    with pytest.raises(TooManySharesError):
        sss.combine(shares + [shares[0]])
    with pytest.raises(DuplicatePointsError):
        sss.combine([shares[0], shares[0], shares[1]])
    with pytest.raises(NilShareError):
        sss.combine([shares[0], None, shares[1]])


def test_combine_at_point(sss):
    shares, poly = sss.split(555)
    assert sss.combine_at_point(shares[1:4], 0) == 555
    assert sss.combine_at_point(shares, 42) == poly.evaluate(42)


def test_combine_at_point_errors(sss):
    shares, _ = sss.split(1)
    with pytest.raises(InsufficientSharesError):
        sss.combine_at_point(shares[:1], 0)
    with pytest.raises(NilPointError):
        sss.combine_at_point(shares, None)


def test_refresh_preserves_secret(sss):
    shares, _ = sss.split(2024)
    fresh = sss.refresh_shares(shares)
    assert len(fresh) == 5
    assert sss.combine(fresh[2:]) == 2024


def test_verify_share_feldman():
    # 2 generates the subgroup of order 11 in Z_23*.
    prime, order, g = 23, 11, 2
    scheme = ShamirSecretSharing(2, 3, order)
    shares, poly = scheme.split(7)
    commitments = [pow(g, a, prime) for a in poly.coefficients]
    assert all(verify_share(s, commitments, order, g, prime) for s in shares)
    tampered = Share(shares[0].index, (shares[0].value + 1) % order)
    assert not verify_share(tampered, commitments, order, g, prime)
    assert not verify_share(None, commitments, order, g, prime)
    assert not verify_share(shares[0], [], order, g, prime)


def test_add_shares_is_homomorphic(sss):
    a, _ = sss.split(100)
    b, _ = sss.split(250)
    summed = [add_shares(x, y, PRIME) for x, y in zip(a, b)]
    assert sss.combine(summed) == 350


def test_add_shares_errors():
    with pytest.raises(NilShareError):
        add_shares(None, Share(1, 1), PRIME)
    with pytest.raises(ShareIndexMismatchError):
        add_shares(Share(1, 1), Share(2, 1), PRIME)


def test_scalar_mul_share_is_homomorphic(sss):
    shares, _ = sss.split(30)
    scaled = [scalar_mul_share(s, 5, PRIME) for s in shares]
    assert sss.combine(scaled) == 150
    assert all(s.index == t.index for s, t in zip(shares, scaled))


def test_scalar_mul_share_errors():
    with pytest.raises(NilShareError):
        scalar_mul_share(None, 2, PRIME)
    with pytest.raises(NilScalarError):
        scalar_mul_share(Share(1, 1), None, PRIME)