"""Physical and virtual memory layout of the emulated board."""

from __future__ import annotations

PGSIZE = 4096
# Sv39 addresses; the top bit is left clear to avoid sign extension.
MAXVA = 1 << (9 + 9 + 9 + 12 - 1)

UART0 = 0x10000000
UART0_IRQ = 10

VIRTIO0 = 0x10001000
VIRTIO0_IRQ = 1

CLINT = 0x2000000
CLINT_MTIME = CLINT + 0xBFF8  # cycles since boot

PLIC = 0x0C000000
PLIC_PRIORITY = PLIC + 0x0
PLIC_PENDING = PLIC + 0x1000

KERNBASE = 0x80000000
PHYSTOP = KERNBASE + 128 * 1024 * 1024

TRAMPOLINE = MAXVA - PGSIZE
TRAPFRAME = TRAMPOLINE - PGSIZE


def _check(index: int, what: str) -> int:
    if index < 0:
        raise ValueError(f"{what} must not be negative")
    return index


def clint_mtimecmp(hartid: int) -> int:
    """Address of the timer compare register of a hart."""
    return CLINT + 0x4000 + 8 * _check(hartid, "hart id")


def plic_menable(hart: int) -> int:
    """Machine-mode interrupt enable bits of a hart."""
    return PLIC + 0x2000 + _check(hart, "hart") * 0x100


def plic_senable(hart: int) -> int:
    """Supervisor-mode interrupt enable bits of a hart."""
    return PLIC + 0x2080 + _check(hart, "hart") * 0x100


def plic_mpriority(hart: int) -> int:
    """Machine-mode priority threshold of a hart."""
    return PLIC + 0x200000 + _check(hart, "hart") * 0x2000


def plic_spriority(hart: int) -> int:
    """Supervisor-mode priority threshold of a hart."""
    return PLIC + 0x201000 + _check(hart, "hart") * 0x2000


def plic_mclaim(hart: int) -> int:
    """Machine-mode claim register of a hart."""
    return PLIC + 0x200004 + _check(hart, "hart") * 0x2000


def plic_sclaim(hart: int) -> int:
    """Supervisor-mode claim register of a hart."""
    return PLIC + 0x201004 + _check(hart, "hart") * 0x2000


def kstack(p: int) -> int:
    """Virtual address of the kernel stack of process slot ``p``, below the trampoline."""
    return TRAMPOLINE - (_check(p, "process slot") + 1) * 2 * PGSIZE