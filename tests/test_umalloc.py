import pytest

from xvutils.umalloc import HEADER_SIZE, MIN_UNITS, Allocator


def test_address_is_aligned_and_inside_heap():
    alloc = Allocator()
    addr = alloc.malloc(1)
    assert addr % HEADER_SIZE == 0
    assert alloc.heap_start < addr < alloc.brk


def test_first_growth_is_minimum_chunk():
    alloc = Allocator()
    alloc.malloc(1)
    assert alloc.brk - alloc.heap_start == MIN_UNITS * HEADER_SIZE


def test_blocks_do_not_overlap():
    alloc = Allocator()
    sizes = [1, 17, 100, 1000, 5000, 0, 64]
    blocks = sorted((alloc.malloc(n), n) for n in sizes)
    for (a, n), (b, _) in zip(blocks, blocks[1:]):
        assert a + n <= b - HEADER_SIZE
    for addr, n in blocks:
        assert alloc.heap_start + HEADER_SIZE <= addr
        assert addr + n <= alloc.brk


def test_free_then_malloc_reuses_address():
    alloc = Allocator()
    a = alloc.malloc(100)
    alloc.free(a)
    assert alloc.malloc(100) == a


def test_freed_neighbours_coalesce():
    alloc = Allocator()
    a = alloc.malloc(1000)
    b = alloc.malloc(1000)
    brk = alloc.brk
    alloc.free(a)
    alloc.free(b)
    whole = alloc.malloc((MIN_UNITS - 1) * HEADER_SIZE)
    assert alloc.brk == brk
    assert whole == alloc.heap_start + HEADER_SIZE


def test_large_request_grows_heap():
    alloc = Allocator()
    request = MIN_UNITS * HEADER_SIZE * 2
    addr = alloc.malloc(request)
    assert addr + request <= alloc.brk
    assert alloc.brk - alloc.heap_start >= request


def test_limit_makes_malloc_return_none():
    alloc = Allocator(limit=MIN_UNITS * HEADER_SIZE)
    assert alloc.malloc(1) is not None
    assert alloc.malloc(MIN_UNITS * HEADER_SIZE) is None
    assert alloc.brk - alloc.heap_start == MIN_UNITS * HEADER_SIZE


def test_zero_limit_fails_first_allocation():
    assert Allocator(limit=0).malloc(1) is None


def test_double_free_is_rejected():
    alloc = Allocator()
    a = alloc.malloc(10)
    alloc.free(a)
    with pytest.raises(ValueError):
        alloc.free(a)


def test_free_of_unknown_address_is_rejected():
    alloc = Allocator()
    alloc.malloc(10)
    with pytest.raises(ValueError):
        alloc.free(alloc.heap_start + 3 * HEADER_SIZE)


def test_negative_size_is_rejected():
    with pytest.raises(ValueError):
        Allocator().malloc(-1)


def test_bad_heap_start_is_rejected():
    with pytest.raises(ValueError):
        Allocator(heap_start=HEADER_SIZE + 1)