import copy

import pytest

from coremark.crc import crc16
from coremark.matrix import (
    MatrixParams,
    bench_matrix,
    init_matrix,
    matrix_add_const,
    matrix_mul_const,
    matrix_mul_matrix,
    matrix_mul_matrix_bitextract,
    matrix_mul_vect,
    matrix_sum,
    matrix_test,
)


@pytest.mark.parametrize("blksize", [400, 666, 2000])
def test_init_matrix_fits_block(blksize):
    params = init_matrix(blksize, 1)
    n = params.n
    assert n * n * 8 < blksize <= (n + 1) * (n + 1) * 8
    assert len(params.a) == len(params.b) == len(params.c) == n * n


def test_init_matrix_value_ranges():
    params = init_matrix(2000, 0x3415 | (0x3415 << 16))
    assert all(0 <= x <= 0xFF for x in params.a)
    assert all(-0x8000 <= x <= 0x7FFF for x in params.b)


def test_init_matrix_zero_seed_is_one():
    assert init_matrix(2000, 0) == init_matrix(2000, 1)


def test_init_matrix_rejects_empty_block():
    with pytest.raises(ValueError):
        init_matrix(0, 1)


def test_add_const_round_trip():
    a = [1, -2, 300, 0x7000]
    original = list(a)
    matrix_add_const(2, a, 0x1234)
    assert a != original
    matrix_add_const(2, a, -0x1234)
    assert a == original


def test_add_const_wraps_16_bit():
    a = [0x7FFF]
    matrix_add_const(1, a, 1)
    assert a == [-0x8000]


def test_mul_const_identity_and_negation():
    a = [1, -2, 3, 4]
    c = [0] * 4
    matrix_mul_const(2, c, a, 1)
    assert c == a
    matrix_mul_const(2, c, a, -1)
    assert c == [-x for x in a]


def test_mul_matrix_by_identity():
    a = list(range(1, 10))
    identity = [1, 0, 0, 0, 1, 0, 0, 0, 1]
    c = [0] * 9
    matrix_mul_matrix(3, c, a, identity)
    assert c == a


def test_mul_vect_matches_first_column_and_keeps_rest():
    a = [1, 2, 3, 4]
    full = [0] * 4
    matrix_mul_matrix(2, full, a, [5, 9, 6, 9])
    c = [7, 7, 7, 7]
    matrix_mul_vect(2, c, a, [5, 6, 99, 99])
    assert c[:2] == [full[0], full[2]]
    assert c[2:] == [7, 7]


def test_bitextract_ignores_low_bits():
    c = [99]
    matrix_mul_matrix_bitextract(1, c, [3], [1])
    assert c == [0]


def test_matrix_sum_counts_rises():
    assert matrix_sum(2, [1, 2, 3, 4], 0x7FFF) == 4


def test_matrix_sum_clips():
    assert matrix_sum(2, [1, 2, 3, 4], 0) == 40


def test_matrix_test_restores_a():
    params = init_matrix(666, 1)
    original = list(params.a)
    crc = matrix_test(params.n, params.c, params.a, params.b, 0x22)
    assert params.a == original
    assert 0 <= crc <= 0xFFFF


def test_matrix_test_is_deterministic():
    first = init_matrix(666, 7)
    second = copy.deepcopy(first)
    assert matrix_test(first.n, first.c, first.a, first.b, 0x55) == matrix_test(
        second.n, second.c, second.a, second.b, 0x55
    )


def test_bench_matrix_folds_matrix_test():
    params = init_matrix(666, 3)
    other = copy.deepcopy(params)
    expected = crc16(matrix_test(other.n, other.c, other.a, other.b, 0x33), 0x1234)
    assert bench_matrix(params, 0x33, 0x1234) == expected


def test_bench_matrix_empty_matrix():
    params = MatrixParams(n=0)
    assert bench_matrix(params, 5, 0) == crc16(0, 0)