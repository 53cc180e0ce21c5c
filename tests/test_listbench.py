import pytest

from coremark.crc import crcu16
from coremark.listbench import (
    CoreResults,
    ListData,
    ListNode,
    bench_list,
    calc_func,
    cmp_complex,
    cmp_idx,
    list_find,
    list_init,
    list_insert_new,
    list_mergesort,
    list_remove,
    list_reverse,
    list_undo_remove,
)
from coremark.matrix import bench_matrix, init_matrix
from coremark.state import init_state


def _build(pairs):
    """Build a list whose nodes hold (idx, data16) pairs in the given order."""
    idx, data = pairs[0]
    head = ListNode(ListData(data16=data, idx=idx))
    point = head
    for idx, data in pairs[1:]:
        point = list_insert_new(point, ListData(data16=data, idx=idx))
    return head


def _pairs(head):
    return [(n.info.idx, n.info.data16) for n in head] if head else []


def _make_results(seed1, seed2, seed3, size):
    res = CoreResults(seed1=seed1, seed2=seed2, seed3=seed3, size=size)
    res.head = list_init(size, seed1)
    res.mat = init_matrix(size, seed1 | (seed2 << 16))
    res.state_memory = init_state(size, seed1)
    return res


def test_list_init_has_fixed_head_and_tail():
    head = list_init(666, 0)
    nodes = list(head)
    assert (nodes[0].info.idx, nodes[0].info.data16) == (0, 0x8080 - 0x10000)
    assert (nodes[-1].info.idx, nodes[-1].info.data16) == (0x7FFF, -1)


def test_list_init_sorted_and_data_regenerated():
    head = list_init(2000, 0x3415)
    idxs = [n.info.idx for n in head]
    assert idxs == sorted(idxs)
    for node in list(head)[1:-1]:
        value = node.info.data16 & 0xFFFF
        assert value >> 8 == value & 0xFF


def test_list_init_grows_with_block():
    assert len(list(list_init(2000, 0))) > len(list(list_init(666, 0)))


def test_list_init_rejects_tiny_block():
    with pytest.raises(ValueError):
        list_init(40, 0)


def test_insert_new_copies_info():
    head = _build([(0, 1)])
    info = ListData(data16=5, idx=9)
    node = list_insert_new(head, info)
    info.data16 = 77
    assert head.next is node
    assert (node.info.idx, node.info.data16) == (9, 5)


def test_reverse_twice_restores_order():
    pairs = [(i, i * 3) for i in range(7)]
    head = _build(pairs)
    reversed_head = list_reverse(head)
    assert _pairs(reversed_head) == pairs[::-1]
    assert _pairs(list_reverse(reversed_head)) == pairs


def test_reverse_empty():
    assert list_reverse(None) is None


def test_find_by_idx_and_by_data():
    head = _build([(0, 0x0101), (5, 0x0203), (6, 0x0344)])
    assert list_find(head, ListData(data16=0, idx=5)).info.data16 == 0x0203
    assert list_find(head, ListData(data16=0x44, idx=-1)).info.idx == 6
    assert list_find(head, ListData(data16=0x99, idx=-1)) is None
    assert list_find(head, ListData(data16=0, idx=42)) is None


def test_remove_and_undo_restore_list():
    pairs = [(0, 10), (1, 11), (2, 12), (3, 13)]
    head = _build(pairs)
    removed = list_remove(head.next)
    assert removed.next is None
    assert len(list(head)) == len(pairs) - 1
    assert (2, 12) not in _pairs(head)[2:]
    list_undo_remove(removed, head.next)
    assert _pairs(head) == pairs


def test_mergesort_sorts_by_idx():
    head = _build([(5, 0), (3, 0), (9, 0), (1, 0), (7, 0), (2, 0)])
    result = list_mergesort(head, lambda a, b, res: a.idx - b.idx, None)
    assert [idx for idx, _ in _pairs(result)] == [1, 2, 3, 5, 7, 9]


def test_mergesort_is_stable():
    head = _build([(2, 1), (1, 2), (2, 3), (1, 4), (2, 5)])
    result = list_mergesort(head, lambda a, b, res: a.idx - b.idx, None)
    assert _pairs(result) == [(1, 2), (1, 4), (2, 1), (2, 3), (2, 5)]


def test_mergesort_empty_and_single():
    assert list_mergesort(None, cmp_idx, None) is None
    single = _build([(4, 4)])
    assert list_mergesort(single, cmp_idx, None) is single


def test_cmp_idx_regenerates_data_without_results():
    a = ListData(data16=0x1234, idx=7)
    b = ListData(data16=0x5600, idx=3)
    assert cmp_idx(a, b, None) == 4
    assert a.data16 == 0x1212
    assert b.data16 == 0x5656


def test_cmp_idx_leaves_data_with_results():
    a = ListData(data16=0x1234, idx=1)
    b = ListData(data16=0x5600, idx=3)
    assert cmp_idx(a, b, CoreResults()) == -2
    assert (a.data16, b.data16) == (0x1234, 0x5600)


def test_calc_func_uses_cache():
    res = CoreResults(crc=0x1111)
    data = ListData(data16=0x12C5)
    assert calc_func(data, res) == 0x45
    assert data.data16 == 0x12C5
    assert res.crc == 0x1111


def test_calc_func_default_operation_caches_result():
    res = CoreResults()
    data = ListData(data16=0x0302)
    assert calc_func(data, res) == 0x02
    assert data.data16 == 0x0382
    assert res.crc == crcu16(0x0302, 0)
    assert calc_func(data, res) == 0x02
    assert res.crc == crcu16(0x0302, 0)


def test_calc_func_matrix_operation():
    res = CoreResults(size=666, mat=init_matrix(666, 5))
    data = ListData(data16=0x0019)
    expected = bench_matrix(init_matrix(666, 5), 0x33, 0)
    assert calc_func(data, res) == expected & 0x7F
    assert res.crcmatrix == expected
    assert data.data16 == 0x0080 | (expected & 0x7F)


def test_cmp_complex_compares_computed_values():
    res = CoreResults()
    a = ListData(data16=0x0285)
    b = ListData(data16=0x0283)
    assert cmp_complex(a, b, res) == 2


def test_bench_list_restores_list_and_repeats():
    res = _make_results(0, 0, 0x66, 666)
    before = _pairs(res.head)
    res.crc = 0
    first = bench_list(res, -1)
    assert _pairs(res.head) == before
    res.crc = 0
    assert bench_list(res, -1) == first


@pytest.mark.parametrize(
    "seed, crclist, crcmatrix, crcstate",
    [
        (0, 0xE714, 0x1FD7, 0x8E3A),
        (0x3415, 0xE3C1, 0x0747, 0x8D84),
    ],
)
def test_known_2k_runs(seed, crclist, crcmatrix, crcstate):
    res = _make_results(seed, seed, 0x66, 666)
    res.crc = 0
    for finder in (1, -1):
        res.crc = crcu16(bench_list(res, finder), res.crc)
    assert res.crc == crclist
    assert res.crcmatrix == crcmatrix
    assert res.crcstate == crcstate