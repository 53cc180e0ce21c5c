"""Matrix benchmark on 16-bit inputs with 32-bit results."""

from dataclasses import dataclass, field
from math import isqrt

from .crc import crc16


def _s16(value):
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def _s32(value):
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _cmod(value, modulus):
    remainder = abs(value) % modulus
    return -remainder if value < 0 else remainder


def _rows(matrix, n):
    return (matrix[i * n:(i + 1) * n] for i in range(n))


@dataclass
class MatrixParams:
    """Input matrices A and B and result matrix C, all N by N, row-major."""

    n: int
    a: list = field(default_factory=list)
    b: list = field(default_factory=list)
    c: list = field(default_factory=list)


def init_matrix(blksize, seed):
    """Build matrices fitting in ``blksize`` bytes from ``seed``."""
    if blksize <= 0:
        raise ValueError("block size must be positive")
    seed = _s32(seed) or 1
    n = isqrt((blksize - 1) // 8)
    a = []
    b = []
    for order in range(1, n * n + 1):
        seed = _cmod(_s32(order * seed), 65536)
        bval = _s16(seed + order)
        b.append(bval)
        a.append((bval + order) & 0xFF)
    return MatrixParams(n=n, a=a, b=b, c=[0] * (n * n))


def matrix_add_const(n, a, val):
    """Add ``val`` to every element of ``a`` in place."""
    val = _s16(val)
    size = n * n
    a[:size] = [_s16(x + val) for x in a[:size]]


def matrix_mul_const(n, c, a, val):
    """Store ``a`` scaled by ``val`` into ``c``."""
    val = _s16(val)
    size = n * n
    c[:size] = [_s32(x * val) for x in a[:size]]


def matrix_mul_vect(n, c, a, b):
    """Store ``a`` times the vector formed by the first ``n`` entries of ``b``
    into the first ``n`` entries of ``c``."""
    vector = b[:n]
    c[:n] = [_s32(sum(x * y for x, y in zip(row, vector))) for row in _rows(a, n)]


def matrix_mul_matrix(n, c, a, b):
    """Store the product ``a`` x ``b`` into ``c``."""
    size = n * n
    cols = [b[j:size:n] for j in range(n)]
    c[:size] = [
        _s32(sum(x * y for x, y in zip(row, col)))
        for row in _rows(a, n)
        for col in cols
    ]


def _bit_term(x, y):
    product = _s32(x * y)
    return ((product >> 2) & 0xF) * ((product >> 5) & 0x7F)


def matrix_mul_matrix_bitextract(n, c, a, b):
    """Multiply ``a`` by ``b``, combining extracted bit fields of each product."""
    size = n * n
    cols = [b[j:size:n] for j in range(n)]
    c[:size] = [
        _s32(sum(_bit_term(x, y) for x, y in zip(row, col)))
        for row in _rows(a, n)
        for col in cols
    ]


def matrix_sum(n, c, clipval):
    """Summarise ``c``: +10 whenever the running sum passes ``clipval``
    (which resets it), otherwise +1 for each element larger than the previous."""
    clipval = _s16(clipval)
    tmp = prev = 0
    ret = 0
    for cur in c[:n * n]:
        tmp = _s32(tmp + cur)
        if tmp > clipval:
            ret += 10
            tmp = 0
        elif cur > prev:
            ret += 1
        prev = cur
    return _s16(ret)


def matrix_test(n, c, a, b, val):
    """Run every matrix step and return a 16-bit CRC of their sums.

    ``a`` is returned to its original contents afterwards.
    """
    val = _s16(val)
    clipval = _s16(0xF000 | val)
    crc = 0
    matrix_add_const(n, a, val)
    matrix_mul_const(n, c, a, val)
    crc = crc16(matrix_sum(n, c, clipval), crc)
    matrix_mul_vect(n, c, a, b)
    crc = crc16(matrix_sum(n, c, clipval), crc)
    matrix_mul_matrix(n, c, a, b)
    crc = crc16(matrix_sum(n, c, clipval), crc)
    matrix_mul_matrix_bitextract(n, c, a, b)
    crc = crc16(matrix_sum(n, c, clipval), crc)
    matrix_add_const(n, a, -val)
    return crc


def bench_matrix(params, seed, crc):
    """Run :func:`matrix_test` on ``params`` and fold the result into ``crc``."""
    result = matrix_test(params.n, params.c, params.a, params.b, _s16(seed))
    return crc16(result, crc)