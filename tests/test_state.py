import pytest

from coremark.state import (
    NUM_CORE_STATES,
    CoreState,
    bench_state,
    init_state,
    state_transition,
)

PATTERNS = {
    b"5012", b"1234", b"-874", b"+122",
    b"35.54400", b".1234500", b"-110.700", b"+0.64400",
    b"5.500e+3", b"-.123e-2", b"-87e+832", b"+0.6e-12",
    b"T0.3e-1F", b"-T.T++Tq", b"1T3.4e4z", b"34.0e-T^",
}


def fresh_counts():
    return [0] * NUM_CORE_STATES


@pytest.mark.parametrize("seed", [0, 0x3415, 8, -5])
def test_init_state_layout(seed):
    block = init_state(666, seed)
    assert len(block) == 666
    assert block[-1] == 0
    text = bytes(block).rstrip(b"\0")
    assert 0 not in text
    tokens = text.split(b",")
    assert tokens[-1] == b""
    assert all(token in PATTERNS for token in tokens[:-1])


def test_init_state_pinned_prefix():
    block = bytes(init_state(400, 8))
    assert block.startswith(
        b"1234,1234,.1234500,.1234500,-.123e-2,-.123e-2,-T.T++Tq,"
    )
    assert bytes(init_state(400, 8)) == block


def test_init_state_rejects_empty_block():
    with pytest.raises(ValueError):
        init_state(0, 1)


@pytest.mark.parametrize(
    "token, expected",
    [
        (b"5012", CoreState.INT),
        (b"-874", CoreState.INT),
        (b"+122", CoreState.INT),
        (b"35.54400", CoreState.FLOAT),
        (b".1234500", CoreState.FLOAT),
        (b"-110.700", CoreState.FLOAT),
        (b"5.500e+3", CoreState.SCIENTIFIC),
        (b"-.123e-2", CoreState.SCIENTIFIC),
        (b"+0.6e-12", CoreState.SCIENTIFIC),
        (b"-87e+832", CoreState.INVALID),
        (b"T0.3e-1F", CoreState.INVALID),
        (b"-T.T++Tq", CoreState.INVALID),
        (b"1T3.4e4z", CoreState.INVALID),
        (b"34.0e-T^", CoreState.INVALID),
    ],
)
def test_state_transition_classifies(token, expected):
    state, _ = state_transition(token + b",", 0, fresh_counts())
    assert state == expected


def test_state_transition_moves_past_comma():
    buf = b"1234,5012"
    counts = fresh_counts()
    state, pos = state_transition(buf, 0, counts)
    assert (state, pos) == (CoreState.INT, 5)
    state, pos = state_transition(buf, pos, counts)
    assert (state, pos) == (CoreState.INT, len(buf))


def test_state_transition_stops_at_invalid_symbol():
    state, pos = state_transition(b"T0.3e-1F", 0, fresh_counts())
    assert state == CoreState.INVALID
    assert pos == 1


def test_state_transition_counts_start_once_per_token():
    counts = fresh_counts()
    state_transition(b"1234,", 0, counts)
    assert counts[CoreState.START] == 1
    assert sum(counts) == 1


def test_bench_state_restores_block_with_equal_seeds():
    block = init_state(666, 0x3415)
    original = bytes(block)
    crc = bench_state(666, block, 0x3415, 0x3415, 0x22, 0)
    assert bytes(block) == original
    assert 0 <= crc <= 0xFFFF


def test_bench_state_is_deterministic():
    first = init_state(666, 0)
    second = init_state(666, 0)
    assert bench_state(666, first, 0x3415, 0x3415, 0x22, 0x1234) == bench_state(
        666, second, 0x3415, 0x3415, 0x22, 0x1234
    )


def test_bench_state_leaves_corruption_with_different_seeds():
    block = init_state(666, 0x3415)
    original = bytes(block)
    bench_state(666, block, 0x3415, 0, 0x22, 0)
    assert bytes(block) != original


def test_bench_state_rejects_bad_step():
    with pytest.raises(ValueError):
        bench_state(10, init_state(10, 0), 1, 1, 0, 0)


def test_bench_state_rejects_oversized_blksize():
    with pytest.raises(ValueError):
        bench_state(20, init_state(10, 0), 1, 1, 0x22, 0)