"""A first-fit free-list allocator over a simulated, growable heap.

Addresses are plain integers. The heap starts at ``heap_start`` and grows
upwards in response to allocations, like a program break moved by ``sbrk``.
"""

from __future__ import annotations

from typing import Dict, Optional, Set

HEADER_SIZE = 16
"""Size in bytes of one block header; all sizes are counted in these units."""

MIN_UNITS = 4096
"""The heap never grows by fewer units than this at a time."""


class Allocator:
    """A circular, address-ordered free list that coalesces neighbouring blocks.

    ``limit`` caps the number of bytes the heap may grow to; once it would be
    exceeded, :meth:`malloc` returns ``None``.
    """

    def __init__(self, heap_start: int = 0x1000, limit: Optional[int] = None) -> None:
        if heap_start < HEADER_SIZE or heap_start % HEADER_SIZE:
            raise ValueError(
                f"heap start must be a positive multiple of {HEADER_SIZE}"
            )
        if limit is not None and limit < 0:
            raise ValueError("heap limit must not be negative")
        self.heap_start = heap_start
        self.limit = limit
        self.brk = heap_start
        # The empty sentinel block lies just below the heap.
        self._base = heap_start - HEADER_SIZE
        self._next: Dict[int, int] = {}
        self._units: Dict[int, int] = {}
        self._allocated: Set[int] = set()
        self._freep: Optional[int] = None

    def _end(self, header: int) -> int:
        return header + self._units[header] * HEADER_SIZE

    def _sbrk(self, nbytes: int) -> Optional[int]:
        if self.limit is not None and self.brk + nbytes - self.heap_start > self.limit:
            return None
        old = self.brk
        self.brk += nbytes
        return old

    def _morecore(self, nunits: int) -> Optional[int]:
        nu = max(nunits, MIN_UNITS)
        start = self._sbrk(nu * HEADER_SIZE)
        if start is None:
            return None
        self._units[start] = nu
        self._release(start)
        return self._freep

    def _release(self, bp: int) -> None:
        nxt = self._next
        p = self._freep
        while not (p < bp < nxt[p]):
            if p >= nxt[p] and (bp > p or bp < nxt[p]):
                break  # freed block at the start or end of the arena
            p = nxt[p]
        q = nxt[p]
        if self._end(bp) == q:
            self._units[bp] += self._units.pop(q)
            nxt[bp] = nxt.pop(q)
        else:
            nxt[bp] = q
        if self._end(p) == bp:
            self._units[p] += self._units.pop(bp)
            nxt[p] = nxt.pop(bp)
        else:
            nxt[p] = bp
        self._freep = p

    def malloc(self, nbytes: int) -> Optional[int]:
        """Return the address of a block of at least ``nbytes``, or ``None`` if the heap is full."""
        if nbytes < 0:
            raise ValueError("cannot allocate a negative number of bytes")
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        if self._freep is None:
            self._next[self._base] = self._base
            self._units[self._base] = 0
            self._freep = self._base
        prevp = self._freep
        p = self._next[prevp]
        while True:
            size = self._units[p]
            if size >= nunits:
                if size == nunits:
                    self._next[prevp] = self._next.pop(p)
                else:
                    self._units[p] = size - nunits
                    p += (size - nunits) * HEADER_SIZE
                    self._units[p] = nunits
                self._freep = prevp
                self._allocated.add(p)
                return p + HEADER_SIZE
            if p == self._freep:
                grown = self._morecore(nunits)
                if grown is None:
                    return None
                p = grown
            prevp, p = p, self._next[p]

    def free(self, addr: int) -> None:
        """Return the block at ``addr`` to the free list."""
        bp = addr - HEADER_SIZE
        if bp not in self._allocated:
            raise ValueError(f"address {addr:#x} is not an allocated block")
        self._allocated.remove(bp)
        self._release(bp)