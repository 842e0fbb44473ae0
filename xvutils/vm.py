"""Sv39 three-level page tables over a simulated physical memory."""

from __future__ import annotations

import enum
import struct
from typing import Dict, List, Optional

from .layout import (
    KERNBASE,
    MAXVA,
    PGSIZE,
    PHYSTOP,
    PLIC,
    TRAMPOLINE,
    UART0,
    VIRTIO0,
    kstack,
)

PGSHIFT = 12
PTES_PER_TABLE = 512
_PTE_SIZE = 8
_TABLE = struct.Struct(f"<{PTES_PER_TABLE}Q")


class VmPanic(RuntimeError):
    """An invariant of the page tables was violated; the kernel would halt."""


class OutOfMemory(Exception):
    """No physical page was left to allocate."""


class BadAddress(ValueError):
    """An address is not mapped, not accessible, or not allocated."""


class PteFlag(enum.IntFlag):
    """Bits in the low part of a page-table entry."""

    V = 1 << 0  # valid
    R = 1 << 1
    W = 1 << 2
    X = 1 << 3
    U = 1 << 4  # user can access


_V = int(PteFlag.V)
_U = int(PteFlag.U)
_RWX = int(PteFlag.R | PteFlag.W | PteFlag.X)


def pg_round_up(addr: int) -> int:
    """Round ``addr`` up to a page boundary."""
    return (addr + PGSIZE - 1) & ~(PGSIZE - 1)


def pg_round_down(addr: int) -> int:
    """Round ``addr`` down to a page boundary."""
    return addr & ~(PGSIZE - 1)


def _pa2pte(pa: int) -> int:
    return (pa >> PGSHIFT) << 10


def _pte2pa(pte: int) -> int:
    return (pte >> 10) << PGSHIFT


def _pte_flags(pte: int) -> int:
    return pte & 0x3FF


def _px(level: int, va: int) -> int:
    return (va >> (PGSHIFT + 9 * level)) & 0x1FF


class PhysicalMemory:
    """Page-granular physical memory between ``start`` and ``end``.

    Only allocated pages hold data; ``len()`` gives the number allocated.
    """

    def __init__(self, start: int = KERNBASE, end: int = PHYSTOP) -> None:
        if start % PGSIZE or end % PGSIZE or end < start or start < 0:
            raise ValueError("memory bounds must be page-aligned with start <= end")
        self.start = start
        self.end = end
        self._pages: Dict[int, bytearray] = {}
        self._freed: List[int] = []
        self._fresh = start

    def __len__(self) -> int:
        return len(self._pages)

    def kalloc(self) -> int:
        """Allocate one zeroed page and return its physical address."""
        if self._freed:
            pa = self._freed.pop()
        elif self._fresh < self.end:
            pa = self._fresh
            self._fresh += PGSIZE
        else:
            raise OutOfMemory("no free physical pages")
        self._pages[pa] = bytearray(PGSIZE)
        return pa

    def kfree(self, pa: int) -> None:
        """Return the page at ``pa`` to the free list."""
        if pa % PGSIZE or pa not in self._pages:
            raise VmPanic("kfree")
        del self._pages[pa]
        self._freed.append(pa)

    def _page(self, pa: int):
        base = pg_round_down(pa)
        try:
            return self._pages[base], pa - base
        except KeyError:
            raise BadAddress(f"physical address {pa:#x} is not allocated") from None

    def read(self, pa: int, n: int) -> bytes:
        """Read ``n`` bytes starting at ``pa``; every page touched must be allocated."""
        if n < 0:
            raise ValueError("cannot read a negative number of bytes")
        out = bytearray()
        while n > 0:
            page, off = self._page(pa)
            take = min(n, PGSIZE - off)
            out += page[off:off + take]
            pa += take
            n -= take
        return bytes(out)

    def write(self, pa: int, data: bytes) -> None:
        """Write ``data`` starting at ``pa``; every page touched must be allocated."""
        view = memoryview(bytes(data))
        while view:
            page, off = self._page(pa)
            take = min(len(view), PGSIZE - off)
            page[off:off + take] = view[:take]
            pa += take
            view = view[take:]


class PageTable:
    """A page table rooted at a physical page of ``memory``.

    Without ``root`` a fresh, empty root page is allocated.
    """

    def __init__(self, memory: PhysicalMemory, root: Optional[int] = None) -> None:
        self.memory = memory
        self.root = memory.kalloc() if root is None else root

    def _load(self, addr: int) -> int:
        return int.from_bytes(self.memory.read(addr, _PTE_SIZE), "little")

    def _store(self, addr: int, pte: int) -> None:
        self.memory.write(addr, int(pte).to_bytes(_PTE_SIZE, "little"))

    def walk(self, va: int, alloc: bool = False) -> Optional[int]:
        """Return the physical address of the leaf PTE for ``va``.

        Missing intermediate tables are created when ``alloc`` is true
        (raising :class:`OutOfMemory` if none can be had), otherwise
        ``None`` is returned.
        """
        if va < 0 or va >= MAXVA:
            raise VmPanic("walk")
        table = self.root
        for level in (2, 1):
            addr = table + _PTE_SIZE * _px(level, va)
            pte = self._load(addr)
            if pte & _V:
                table = _pte2pa(pte)
            else:
                if not alloc:
                    return None
                table = self.memory.kalloc()
                self._store(addr, _pa2pte(table) | _V)
        return table + _PTE_SIZE * _px(0, va)

    def walkaddr(self, va: int) -> Optional[int]:
        """Physical address of a user page mapped at ``va``, or ``None``."""
        if va < 0 or va >= MAXVA:
            return None
        addr = self.walk(va, False)
        if addr is None:
            return None
        pte = self._load(addr)
        if not pte & _V or not pte & _U:
            return None
        return _pte2pa(pte)

    def mappages(self, va: int, size: int, pa: int, perm: int) -> None:
        """Map ``[va, va+size)`` to physical memory starting at ``pa``."""
        if size == 0:
            raise VmPanic("mappages: size")
        a = pg_round_down(va)
        last = pg_round_down(va + size - 1)
        perm = int(perm)
        while True:
            addr = self.walk(a, True)
            if self._load(addr) & _V:
                raise VmPanic("mappages: remap")
            self._store(addr, _pa2pte(pa) | perm | _V)
            if a == last:
                return
            a += PGSIZE
            pa += PGSIZE

    def unmap(self, va: int, npages: int, do_free: bool) -> None:
        """Remove ``npages`` existing mappings from page-aligned ``va``."""
        if va % PGSIZE:
            raise VmPanic("uvmunmap: not aligned")
        for a in range(va, va + npages * PGSIZE, PGSIZE):
            addr = self.walk(a, False)
            if addr is None:
                raise VmPanic("uvmunmap: walk")
            pte = self._load(addr)
            if not pte & _V:
                raise VmPanic("uvmunmap: not mapped")
            if _pte_flags(pte) == _V:
                raise VmPanic("uvmunmap: not a leaf")
            if do_free:
                self.memory.kfree(_pte2pa(pte))
            self._store(addr, 0)

    def load_first(self, src: bytes) -> None:
        """Place ``src``, smaller than a page, at user address zero."""
        if len(src) >= PGSIZE:
            raise VmPanic("uvmfirst: more than a page")
        mem = self.memory.kalloc()
        self.mappages(0, PGSIZE, mem, PteFlag.W | PteFlag.R | PteFlag.X | PteFlag.U)
        self.memory.write(mem, src)

    def grow(self, oldsz: int, newsz: int, xperm: int = 0) -> int:
        """Allocate user pages to grow from ``oldsz`` to ``newsz``; return the new size.

        On exhaustion the pages added so far are released and
        :class:`OutOfMemory` is raised.
        """
        if newsz < oldsz:
            return oldsz
        oldsz = pg_round_up(oldsz)
        perm = int(PteFlag.R | PteFlag.U) | int(xperm)
        for a in range(oldsz, newsz, PGSIZE):
            try:
                mem = self.memory.kalloc()
            except OutOfMemory:
                self.shrink(a, oldsz)
                raise
            try:
                self.mappages(a, PGSIZE, mem, perm)
            except OutOfMemory:
                self.memory.kfree(mem)
                self.shrink(a, oldsz)
                raise
        return newsz

    def shrink(self, oldsz: int, newsz: int) -> int:
        """Release user pages to bring the size from ``oldsz`` down to ``newsz``."""
        if newsz >= oldsz:
            return oldsz
        if pg_round_up(newsz) < pg_round_up(oldsz):
            npages = (pg_round_up(oldsz) - pg_round_up(newsz)) // PGSIZE
            self.unmap(pg_round_up(newsz), npages, True)
        return newsz

    def _freewalk(self, table: int) -> None:
        entries = _TABLE.unpack(self.memory.read(table, PGSIZE))
        for index, pte in enumerate(entries):
            if pte & _V and not pte & _RWX:
                self._freewalk(_pte2pa(pte))
                self._store(table + _PTE_SIZE * index, 0)
            elif pte & _V:
                raise VmPanic("freewalk: leaf")
        self.memory.kfree(table)

    def free(self, sz: int) -> None:
        """Free ``sz`` bytes of user memory, then every page-table page."""
        if sz > 0:
            self.unmap(0, pg_round_up(sz) // PGSIZE, True)
        self._freewalk(self.root)

    def copy_to(self, other: "PageTable", sz: int) -> None:
        """Copy the first ``sz`` bytes of mappings and their memory into ``other``."""
        i = 0
        try:
            for i in range(0, sz, PGSIZE):
                addr = self.walk(i, False)
                if addr is None:
                    raise VmPanic("uvmcopy: pte should exist")
                pte = self._load(addr)
                if not pte & _V:
                    raise VmPanic("uvmcopy: page not present")
                pa = _pte2pa(pte)
                flags = _pte_flags(pte)
                mem = self.memory.kalloc()
                other.memory.write(mem, self.memory.read(pa, PGSIZE))
                try:
                    other.mappages(i, PGSIZE, mem, flags)
                except OutOfMemory:
                    self.memory.kfree(mem)
                    raise
        except OutOfMemory:
            other.unmap(0, i // PGSIZE, True)
            raise

    def clear_user(self, va: int) -> None:
        """Make the page at ``va`` inaccessible to user code."""
        addr = self.walk(va, False)
        if addr is None:
            raise VmPanic("uvmclear")
        self._store(addr, self._load(addr) & ~_U)

    def _user_pa(self, va0: int) -> int:
        pa0 = self.walkaddr(va0)
        if pa0 is None:
            raise BadAddress(f"user address {va0:#x} is not mapped")
        return pa0

    def copyout(self, dstva: int, data: bytes) -> None:
        """Copy ``data`` to user virtual address ``dstva``."""
        view = memoryview(bytes(data))
        while view:
            va0 = pg_round_down(dstva)
            pa0 = self._user_pa(va0)
            n = min(PGSIZE - (dstva - va0), len(view))
            self.memory.write(pa0 + (dstva - va0), view[:n])
            view = view[n:]
            dstva = va0 + PGSIZE

    def copyin(self, srcva: int, n: int) -> bytes:
        """Copy ``n`` bytes from user virtual address ``srcva``."""
        out = bytearray()
        while n > 0:
            va0 = pg_round_down(srcva)
            pa0 = self._user_pa(va0)
            take = min(PGSIZE - (srcva - va0), n)
            out += self.memory.read(pa0 + (srcva - va0), take)
            n -= take
            srcva = va0 + PGSIZE
        return bytes(out)

    def copyinstr(self, srcva: int, max_len: int) -> bytes:
        """Copy a NUL-terminated string of at most ``max_len`` bytes, NUL included."""
        out = bytearray()
        while max_len > 0:
            va0 = pg_round_down(srcva)
            pa0 = self._user_pa(va0)
            n = min(PGSIZE - (srcva - va0), max_len)
            chunk = self.memory.read(pa0 + (srcva - va0), n)
            nul = chunk.find(0)
            if nul >= 0:
                out += chunk[:nul]
                return bytes(out)
            out += chunk
            max_len -= n
            srcva = va0 + PGSIZE
        raise BadAddress("string is not terminated within the limit")


def _kvmmap(kpgtbl: PageTable, va: int, pa: int, sz: int, perm: int) -> None:
    try:
        kpgtbl.mappages(va, sz, pa, perm)
    except OutOfMemory:
        raise VmPanic("kvmmap") from None


def kvmmake(memory: PhysicalMemory, etext: int, trampoline: int, nproc: int) -> PageTable:
    """Build the direct-mapped kernel page table.

    ``etext`` is the end of kernel text, ``trampoline`` the physical page of
    the trap trampoline, and ``nproc`` the number of kernel stacks to map.
    """
    rw = PteFlag.R | PteFlag.W
    rx = PteFlag.R | PteFlag.X
    kpgtbl = PageTable(memory)
    _kvmmap(kpgtbl, UART0, UART0, PGSIZE, rw)
    _kvmmap(kpgtbl, VIRTIO0, VIRTIO0, PGSIZE, rw)
    _kvmmap(kpgtbl, PLIC, PLIC, 0x400000, rw)
    _kvmmap(kpgtbl, KERNBASE, KERNBASE, etext - KERNBASE, rx)
    _kvmmap(kpgtbl, etext, etext, PHYSTOP - etext, rw)
    _kvmmap(kpgtbl, TRAMPOLINE, trampoline, PGSIZE, rx)
    for p in range(nproc):
        try:
            pa = memory.kalloc()
        except OutOfMemory:
            raise VmPanic("kalloc") from None
        _kvmmap(kpgtbl, kstack(p), pa, PGSIZE, rw)
    return kpgtbl