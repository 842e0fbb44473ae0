import pytest

from xvutils import layout
from xvutils.layout import (
    MAXVA,
    PGSIZE,
    TRAMPOLINE,
    TRAPFRAME,
    clint_mtimecmp,
    kstack,
    plic_mclaim,
    plic_menable,
    plic_mpriority,
    plic_sclaim,
    plic_senable,
    plic_spriority,
)


def test_documented_register_addresses():
    assert clint_mtimecmp(2) == 0x2004010
    assert plic_menable(0) == 0x0C002000
    assert plic_mclaim(0) == 0x0C200004
    assert plic_sclaim(1) == 0x0C203004


def test_first_kernel_stack_sits_below_the_trapframe():
    assert TRAMPOLINE + PGSIZE == MAXVA
    assert kstack(0) + PGSIZE == TRAPFRAME


def test_timer_compare_registers_are_eight_bytes_apart():
    assert clint_mtimecmp(1) - clint_mtimecmp(0) == 8
    assert clint_mtimecmp(0) > layout.CLINT


@pytest.mark.parametrize("hart", [0, 1, 2, 7])
def test_claim_follows_threshold(hart):
    assert plic_mclaim(hart) == plic_mpriority(hart) + 4
    assert plic_sclaim(hart) == plic_spriority(hart) + 4


def test_per_hart_strides():
    assert plic_menable(1) - plic_menable(0) == 0x100
    assert plic_senable(3) - plic_menable(3) == 0x80
    assert plic_spriority(2) - plic_mpriority(2) == 0x1000


def test_kernel_stacks_have_guard_pages():
    assert kstack(0) == TRAMPOLINE - 2 * PGSIZE
    for p in range(5):
        assert kstack(p) - kstack(p + 1) == 2 * PGSIZE
        assert kstack(p) % PGSIZE == 0


def test_negative_indices_are_rejected():
    with pytest.raises(ValueError):
        kstack(-1)
    with pytest.raises(ValueError):
        plic_sclaim(-1)