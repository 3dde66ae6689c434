import pytest

from mpctss.security.constant_time import (
    constant_time_array_access,
    constant_time_big_int_equal,
    constant_time_bytes_copy,
    constant_time_cond_swap,
    constant_time_greater,
    constant_time_is_nonzero,
    constant_time_is_odd,
    constant_time_is_zero,
    constant_time_leading_zeros,
    constant_time_limbs_equal,
    constant_time_mod_add,
    constant_time_mod_exp,
    constant_time_mod_inv,
    constant_time_mod_mul,
    constant_time_mod_neg,
    constant_time_mod_sqr,
    constant_time_mod_sub,
    constant_time_montgomery_ladder,
    constant_time_select,
    mask_big_int,
    secure_compare_scalars,
    timing_safe_div,
    unmask_big_int,
)

PRIME = 2**255 - 19


@pytest.mark.parametrize("a,b,m", [(3, 9, 11), (0, 0, 7), (PRIME - 1, PRIME - 2, PRIME), (10**40, 7, 97)])
def test_add_sub_round_trip(a, b, m):
    total = constant_time_mod_add(a, b, m)
    assert 0 <= total < m
    assert constant_time_mod_sub(total, b, m) == a % m


def test_sub_result_is_non_negative():
    result = constant_time_mod_sub(2, 5, 7)
    assert 0 <= result < 7
    assert constant_time_mod_add(result, 5, 7) == 2


@pytest.mark.parametrize(
    "func",
    [constant_time_mod_add, constant_time_mod_sub, constant_time_mod_mul, constant_time_mod_exp],
)
@pytest.mark.parametrize("a,b,m", [(-1, 2, 5), (1, -2, 5), (1, 2, 0)])
def test_negative_inputs_raise(func, a, b, m):
    with pytest.raises(ValueError):
        func(a, b, m)


@pytest.mark.parametrize("a", [1, 2, 12345, PRIME - 1])
def test_mod_inv_is_inverse(a):
    inverse = constant_time_mod_inv(a, PRIME)
    assert constant_time_mod_mul(a, inverse, PRIME) == 1


@pytest.mark.parametrize("a,m", [(6, 9), (0, 7), (-3, 7), (3, 0)])
def test_mod_inv_missing(a, m):
    assert constant_time_mod_inv(a, m) is None


def test_mod_exp_fermat():
    assert constant_time_mod_exp(5, PRIME - 1, PRIME) == 1


def test_mod_sqr_matches_mul():
    assert constant_time_mod_sqr(123456789, PRIME) == constant_time_mod_mul(123456789, 123456789, PRIME)


def test_bytes_copy():
    dst = bytearray(3)
    constant_time_bytes_copy(dst, b"xyz")
    assert dst == bytearray(b"xyz")
    with pytest.raises(ValueError):
        constant_time_bytes_copy(bytearray(2), b"xyz")


def test_select():
    assert constant_time_select(1, 2**100, 3) == 2**100
    assert constant_time_select(0, 2**100, 3) == 3
    with pytest.raises(ValueError):
        constant_time_select(2, 1, 0)


def test_is_zero_and_nonzero():
    assert constant_time_is_zero(0) == 1
    assert constant_time_is_zero(2**64) == 0
    assert constant_time_is_nonzero(0) == 0
    assert constant_time_is_nonzero(5) == 1


def test_greater():
    assert constant_time_greater(5, 3) == 1
    assert constant_time_greater(3, 5) == 0
    assert constant_time_greater(4, 4) == 0
    with pytest.raises(ValueError):
        constant_time_greater(-1, 0)


def test_big_int_equal():
    assert constant_time_big_int_equal(0, 0) == 1
    assert constant_time_big_int_equal(2**200 + 1, 2**200 + 1) == 1
    assert constant_time_big_int_equal(2**200, 1) == 0
    assert secure_compare_scalars(PRIME, PRIME) is True
    assert secure_compare_scalars(PRIME, PRIME - 1) is False


def test_timing_safe_div():
    quotient = timing_safe_div(10, 7, PRIME)
    assert constant_time_mod_mul(quotient, 7, PRIME) == 10
    assert timing_safe_div(10, 0, PRIME) is None


def test_mask_unmask_round_trip():
    masked, mask = mask_big_int(42, PRIME)
    assert 1 <= mask < PRIME
    assert 0 <= masked < PRIME
    assert unmask_big_int(masked, mask, PRIME) == 42


def test_cond_swap():
    a, b = 2**70, 9
    assert constant_time_cond_swap(1, a, b) == (b, a)
    assert constant_time_cond_swap(0, a, b) == (a, b)
    with pytest.raises(ValueError):
        constant_time_cond_swap(3, a, b)


def test_array_access():
    values = [11, 2**90, 33]
    assert [constant_time_array_access(values, i) for i in range(len(values))] == values
    assert constant_time_array_access(values, 3) == 0
    assert constant_time_array_access(values, -1) == 0


def test_limbs_equal():
    assert constant_time_limbs_equal(2**130 + 5, 2**130 + 5) is True
    assert constant_time_limbs_equal(2**130 + 5, 2**130 + 4) is False
    assert constant_time_limbs_equal(0, 0) is True
    assert constant_time_limbs_equal(2**64, 0) is False


@pytest.mark.parametrize("k", [1, 2, 13, 255, 2**40 + 17])
def test_montgomery_ladder_scales_base(k):
    base = 7
    assert constant_time_montgomery_ladder(k, lambda s: s * base) == k * base


def test_montgomery_ladder_rejects_non_positive():
    with pytest.raises(ValueError):
        constant_time_montgomery_ladder(0, lambda s: s)


def test_is_odd():
    assert constant_time_is_odd(7) == 1
    assert constant_time_is_odd(2**100) == 0
    assert constant_time_is_odd(0) == 0


@pytest.mark.parametrize("x", [1, 5, PRIME - 1])
def test_mod_neg_is_additive_inverse(x):
    assert constant_time_mod_add(x, constant_time_mod_neg(x, PRIME), PRIME) == 0


def test_mod_neg_of_zero():
    assert constant_time_mod_neg(0, PRIME) == 0


def test_leading_zeros():
    assert constant_time_leading_zeros(0) == 0
    assert constant_time_leading_zeros(0x80) == 0
    assert constant_time_leading_zeros(1) == 7