"""Linked-list benchmark: find, reverse, sort and checksum a list in place."""

from dataclasses import dataclass, field

from .crc import crc16, crcu16
from .matrix import MatrixParams, bench_matrix
from .state import bench_state

# Bytes reserved per list element when sizing the list: room for a node with
# two pointers on a 64-bit machine plus the 4-byte data record.
_PER_ITEM = 16 + 4


def _s16(value):
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


@dataclass
class ListData:
    """Payload of a list node.

    ``data16`` is a signed 16-bit value: the upper byte keeps the original
    data, bit 7 marks a cached result, bits 0-2 pick an operation and bits
    3-6 feed it. ``idx`` records the initial order of the list.
    """

    data16: int = 0
    idx: int = 0


@dataclass(eq=False)
class ListNode:
    """A singly linked list node."""

    info: ListData
    next: "ListNode | None" = field(default=None, repr=False)

    def __iter__(self):
        node = self
        while node is not None:
            yield node
            node = node.next


@dataclass
class CoreResults:
    """Seeds, per-algorithm data and CRCs of one benchmark context."""

    seed1: int = 0
    seed2: int = 0
    seed3: int = 0
    iterations: int = 0
    execs: int = 0
    size: int = 0
    head: "ListNode | None" = None
    mat: "MatrixParams | None" = None
    state_memory: bytearray = field(default_factory=bytearray)
    crc: int = 0
    crclist: int = 0
    crcmatrix: int = 0
    crcstate: int = 0
    err: int = 0


def calc_func(data, res):
    """Return the 7-bit value derived from ``data``, computing and caching it.

    An uncached value runs the state or matrix benchmark (or uses the data
    itself), folds the raw result into ``res.crc`` and caches the low seven
    bits in ``data.data16``.
    """
    value = data.data16
    if (value >> 7) & 1:
        return value & 0x007F
    flag = value & 0x7
    dtype = (value >> 3) & 0xF
    dtype |= dtype << 4
    if flag == 0:
        dtype = max(dtype, 0x22)
        retval = _s16(bench_state(res.size, res.state_memory, res.seed1,
                                  res.seed2, dtype, res.crc))
        if res.crcstate == 0:
            res.crcstate = retval & 0xFFFF
    elif flag == 1:
        retval = _s16(bench_matrix(res.mat, dtype, res.crc))
        if res.crcmatrix == 0:
            res.crcmatrix = retval & 0xFFFF
    else:
        retval = value
    res.crc = crcu16(retval & 0xFFFF, res.crc)
    retval &= 0x007F
    data.data16 = _s16((value & 0xFF00) | 0x0080 | retval)
    return retval


def cmp_complex(a, b, res):
    """Compare two records by their computed values."""
    return calc_func(a, res) - calc_func(b, res)


def cmp_idx(a, b, res):
    """Compare two records by index; with no ``res`` restore their data first."""
    if res is None:
        for item in (a, b):
            item.data16 = _s16((item.data16 & 0xFF00) | (0x00FF & (item.data16 >> 8)))
    return a.idx - b.idx


def list_insert_new(insert_point, info):
    """Link a new node holding a copy of ``info`` right after ``insert_point``."""
    node = ListNode(ListData(data16=info.data16, idx=info.idx), insert_point.next)
    insert_point.next = node
    return node


def list_init(blksize, seed):
    """Build the benchmark list for a block of ``blksize`` bytes.

    The list starts with a fixed head record and ends with a fixed tail
    record; the items between are derived from ``seed``, indexed, and the
    list is returned sorted by index.
    """
    size = blksize // _PER_ITEM - 2
    if size < 3:
        raise ValueError("block too small for a list")
    seed = _s16(seed)
    head = ListNode(ListData(data16=_s16(0x8080), idx=0))
    list_insert_new(head, ListData(data16=-1, idx=0x7FFF))
    # Head and tail take two of the size - 1 node slots.
    for i in range(size - 3):
        datpat = (seed ^ i) & 0xF
        dat = (datpat << 3) | (i & 0x7)
        list_insert_new(head, ListData(data16=(dat << 8) | dat, idx=0x7FFF))
    in_order = size // 5
    i = 1
    for node in list(head.next)[:-1]:
        if i < in_order:
            node.info.idx = i
            i += 1
        else:
            pat = (i ^ seed) & 0xFFFF
            i += 1
            node.info.idx = 0x3FFF & (((i & 0x07) << 8) | pat)
    return list_mergesort(head, cmp_idx, None)


def list_remove(item):
    """Remove the node after ``item`` by swapping payloads; return it."""
    removed = item.next
    item.info, removed.info = removed.info, item.info
    item.next = removed.next
    removed.next = None
    return removed


def list_undo_remove(item_removed, item_modified):
    """Reverse :func:`list_remove`, linking ``item_removed`` back in."""
    item_removed.info, item_modified.info = item_modified.info, item_removed.info
    item_removed.next = item_modified.next
    item_modified.next = item_removed
    return item_removed


def list_find(head, info):
    """Find a node by ``info.idx`` when non-negative, else by the low data byte."""
    if head is None:
        return None
    if info.idx >= 0:
        return next((n for n in head if n.info.idx == info.idx), None)
    return next((n for n in head if (n.info.data16 & 0xFF) == info.data16), None)


def list_reverse(head):
    """Reverse the list in place and return its new head."""
    previous = None
    while head is not None:
        head.next, previous, head = previous, head, head.next
    return previous


def list_mergesort(head, cmp, res):
    """Stable, iterative merge sort of the list; returns the new head.

    ``cmp(a, b, res)`` compares two payloads and may have side effects, so
    the comparisons are made in a fixed bottom-up order.
    """
    insize = 1
    while True:
        p = head
        head = tail = None
        nmerges = 0
        while p is not None:
            nmerges += 1
            q = p
            psize = 0
            for _ in range(insize):
                psize += 1
                q = q.next
                if q is None:
                    break
            qsize = insize
            while psize > 0 or (qsize > 0 and q is not None):
                if psize == 0:
                    e, q = q, q.next
                    qsize -= 1
                elif qsize == 0 or q is None or cmp(p.info, q.info, res) <= 0:
                    e, p = p, p.next
                    psize -= 1
                else:
                    e, q = q, q.next
                    qsize -= 1
                if tail is None:
                    head = e
                else:
                    tail.next = e
                tail = e
            p = q
        if tail is not None:
            tail.next = None
        if nmerges <= 1:
            return head
        insize *= 2


def bench_list(res, finder_idx):
    """Run one list benchmark pass on ``res.head`` and return its 16-bit CRC.

    The list is searched, reversed, sorted by computed value when
    ``finder_idx`` is positive, checksummed, and finally sorted back into
    its original order.
    """
    retval = 0
    found = missed = 0
    head = res.head
    info = ListData(data16=0, idx=_s16(finder_idx))
    for i in range(res.seed3):
        info.data16 = i & 0xFF
        this_find = list_find(head, info)
        head = list_reverse(head)
        if this_find is None:
            missed += 1
            retval += (head.next.info.data16 >> 8) & 1
        else:
            found += 1
            if this_find.info.data16 & 0x1:
                retval += (this_find.info.data16 >> 9) & 1
            if this_find.next is not None:
                moved = this_find.next
                this_find.next = moved.next
                moved.next = head.next
                head.next = moved
        if info.idx >= 0:
            info.idx = _s16(info.idx + 1)
    retval = (retval + found * 4 - missed) & 0xFFFF

    if finder_idx > 0:
        head = list_mergesort(head, cmp_complex, res)
    remover = list_remove(head.next)
    finder = list_find(head, info) or head.next
    for _ in finder or ():
        retval = crc16(head.info.data16, retval)
    list_undo_remove(remover, head.next)

    head = list_mergesort(head, cmp_idx, None)
    for _ in head.next or ():
        retval = crc16(head.info.data16, retval)
    return retval