"""State machine benchmark: classify comma separated number-like tokens."""

from enum import IntEnum

from .crc import crcu32


class CoreState(IntEnum):
    """States of the number-recognising machine."""

    START = 0
    INVALID = 1
    S1 = 2
    S2 = 3
    INT = 4
    FLOAT = 5
    EXPONENT = 6
    SCIENTIFIC = 7


NUM_CORE_STATES = len(CoreState)

_COMMA = ord(",")
_DOT = ord(".")
_SIGNS = (ord("+"), ord("-"))
_EXP_MARKS = (ord("e"), ord("E"))

_INT_PATTERNS = (b"5012", b"1234", b"-874", b"+122")
_FLOAT_PATTERNS = (b"35.54400", b".1234500", b"-110.700", b"+0.64400")
_SCI_PATTERNS = (b"5.500e+3", b"-.123e-2", b"-87e+832", b"+0.6e-12")
_ERR_PATTERNS = (b"T0.3e-1F", b"-T.T++Tq", b"1T3.4e4z", b"34.0e-T^")


def _pick_pattern(seed):
    kind = seed & 0x7
    index = (seed >> 3) & 0x3
    if kind <= 2:
        return _INT_PATTERNS[index]
    if kind <= 4:
        return _FLOAT_PATTERNS[index]
    if kind <= 6:
        return _SCI_PATTERNS[index]
    return _ERR_PATTERNS[index]


def init_state(size, seed):
    """Return a zero-padded block of ``size`` bytes filled with patterns."""
    if size < 1:
        raise ValueError("state block size must be at least 1")
    buf = bytearray(size)
    limit = size - 1
    total = 0
    pattern = b""
    while total + len(pattern) + 1 < limit:
        if pattern:
            end = total + len(pattern)
            buf[total:end] = pattern
            buf[end] = _COMMA
            total = end + 1
        seed += 1
        pattern = _pick_pattern(seed)
    return buf


def _is_digit(symbol):
    return 0x30 <= symbol <= 0x39


def _step(state, symbol, counts):
    if state == CoreState.START:
        if _is_digit(symbol):
            state = CoreState.INT
        elif symbol in _SIGNS:
            state = CoreState.S1
        elif symbol == _DOT:
            state = CoreState.FLOAT
        else:
            state = CoreState.INVALID
            counts[CoreState.INVALID] += 1
        counts[CoreState.START] += 1
    elif state == CoreState.S1:
        if _is_digit(symbol):
            state = CoreState.INT
        elif symbol == _DOT:
            state = CoreState.FLOAT
        else:
            state = CoreState.INVALID
        counts[CoreState.S1] += 1
    elif state == CoreState.INT:
        if symbol == _DOT:
            state = CoreState.FLOAT
            counts[CoreState.INT] += 1
        elif not _is_digit(symbol):
            state = CoreState.INVALID
            counts[CoreState.INT] += 1
    elif state == CoreState.FLOAT:
        if symbol in _EXP_MARKS:
            state = CoreState.S2
            counts[CoreState.FLOAT] += 1
        elif not _is_digit(symbol):
            state = CoreState.INVALID
            counts[CoreState.FLOAT] += 1
    elif state == CoreState.S2:
        state = CoreState.EXPONENT if symbol in _SIGNS else CoreState.INVALID
        counts[CoreState.S2] += 1
    elif state == CoreState.EXPONENT:
        state = CoreState.SCIENTIFIC if _is_digit(symbol) else CoreState.INVALID
        counts[CoreState.EXPONENT] += 1
    elif state == CoreState.SCIENTIFIC:
        if not _is_digit(symbol):
            state = CoreState.INVALID
            counts[CoreState.INVALID] += 1
    return state


def state_transition(buf, pos, transition_count):
    """Scan one token of ``buf`` starting at ``pos``.

    Returns the final state and the position where scanning stopped (just
    past the comma when the token ended on one). ``transition_count`` is
    updated in place. A zero byte or the end of ``buf`` ends the input.
    """
    state = CoreState.START
    end = len(buf)
    while pos < end and buf[pos] != 0 and state != CoreState.INVALID:
        symbol = buf[pos]
        pos += 1
        if symbol == _COMMA:
            break
        state = _step(state, symbol, transition_count)
    return state, pos


def _scan(memblock, final_counts, track_counts):
    pos = 0
    end = len(memblock)
    while pos < end and memblock[pos] != 0:
        state, pos = state_transition(memblock, pos, track_counts)
        final_counts[state] += 1


def _corrupt(memblock, blksize, seed, step):
    mask = seed & 0xFF
    for pos in range(0, blksize, step):
        if memblock[pos] != _COMMA:
            memblock[pos] ^= mask


def bench_state(blksize, memblock, seed1, seed2, step, crc):
    """Run the machine over ``memblock`` before and after corrupting it.

    The block is corrupted with ``seed1`` and then XORed with ``seed2``, so
    it is restored when both seeds are equal. Returns the updated CRC.
    """
    if step <= 0:
        raise ValueError("step must be positive")
    if blksize > len(memblock):
        raise ValueError("blksize exceeds the memory block")
    final_counts = [0] * NUM_CORE_STATES
    track_counts = [0] * NUM_CORE_STATES
    _scan(memblock, final_counts, track_counts)
    _corrupt(memblock, blksize, seed1, step)
    _scan(memblock, final_counts, track_counts)
    _corrupt(memblock, blksize, seed2, step)
    for final, track in zip(final_counts, track_counts):
        crc = crcu32(final, crc)
        crc = crcu32(track, crc)
    return crc