import pytest

from mpctss.algebra.polynomial import (
    EmptyCoefficientsError,
    EmptyPointsError,
    InvalidDegreeError,
    InvalidModulusError,
    ModulusMismatchError,
    NilPolynomialError,
    NilScalarError,
    PointValueMismatchError,
    Polynomial,
    interpolate,
)

PRIME = 7919


def test_coefficients_are_normalized():
    poly = Polynomial([PRIME + 3, -1, None], PRIME)
    assert poly.coefficients == (3, PRIME - 1, 0)
    assert poly.modulus == PRIME


def test_constructor_errors():
    with pytest.raises(EmptyCoefficientsError):
        Polynomial([], PRIME)
    with pytest.raises(InvalidModulusError):
        Polynomial([1], 0)
    with pytest.raises(InvalidModulusError):
        Polynomial([1], None)


def test_random_polynomial_degree_and_constant():
    poly = Polynomial.random(4, 42, PRIME)
    assert len(poly.coefficients) == 5
    assert poly.coefficients[0] == 42
    assert all(0 < c < PRIME for c in poly.coefficients[1:])
    assert poly.evaluate(0) == 42


def test_random_polynomial_errors():
    with pytest.raises(InvalidDegreeError):
        Polynomial.random(-1, 1, PRIME)
    with pytest.raises(InvalidModulusError):
        Polynomial.random(2, 1, -5)


def test_random_constant_term_when_missing():
    poly = Polynomial.random(0, None, PRIME)
    assert 0 < poly.coefficients[0] < PRIME


def test_degree_ignores_trailing_zeros():
    assert Polynomial([1, 2, 0, 0], PRIME).degree() == 1
    assert Polynomial([0, 0], PRIME).degree() == 0


def test_evaluate_known_value():
    poly = Polynomial([1, 2, 3], PRIME)
    assert poly.evaluate(2) == 17
    assert poly.evaluate(None) == 0
    assert poly.evaluate(2 + PRIME) == poly.evaluate(2)


def test_evaluate_many_matches_evaluate():
    poly = Polynomial.random(3, 7, PRIME)
    points = [1, 2, 3, 10]
    assert poly.evaluate_many(points) == [poly.evaluate(x) for x in points]


def test_add_then_sub_round_trip():
    f = Polynomial.random(3, 5, PRIME)
    g = Polynomial.random(5, 9, PRIME)
    total = f.add(g)
    assert len(total.coefficients) == 6
    back = total.sub(g)
    assert back.coefficients[:4] == f.coefficients
    assert all(c == 0 for c in back.coefficients[4:])


def test_add_evaluates_pointwise():
    f = Polynomial.random(2, 1, PRIME)
    g = Polynomial.random(2, 2, PRIME)
    for x in (0, 3, 77):
        assert f.add(g).evaluate(x) == (f.evaluate(x) + g.evaluate(x)) % PRIME


def test_sub_self_is_zero():
    f = Polynomial.random(3, 11, PRIME)
    assert f.sub(f).is_zero()


def test_add_errors():
    f = Polynomial([1], PRIME)
    with pytest.raises(NilPolynomialError):
        f.add(None)
    with pytest.raises(ModulusMismatchError):
        f.sub(Polynomial([1], 101))


def test_scalar_mul():
    f = Polynomial.random(3, 4, PRIME)
    scaled = f.scalar_mul(3)
    assert scaled.evaluate(0) == 12
    assert f.scalar_mul(0).is_zero()
    with pytest.raises(NilScalarError):
        f.scalar_mul(None)


def test_str_format():
    assert str(Polynomial([1, 2, 3], PRIME)) == "3x^2 + 2x + 1"
    assert str(Polynomial([0, 0], PRIME)) == "0"


def test_interpolate_recovers_polynomial():
    f = Polynomial.random(4, 123, PRIME)
    points = [1, 2, 3, 4, 5]
    result = interpolate(points, f.evaluate_many(points), PRIME)
    assert result == f


def test_interpolate_passes_through_points():
    points = [3, 8, 20]
    values = [5, 1000, 7]
    poly = interpolate(points, values, PRIME)
    assert poly.evaluate_many(points) == values


def test_interpolate_errors():
    with pytest.raises(PointValueMismatchError):
        interpolate([1, 2], [1], PRIME)
    with pytest.raises(EmptyPointsError):
        interpolate([], [], PRIME)
    with pytest.raises(InvalidModulusError):
        interpolate([1], [1], 0)