"""Virtio MMIO register offsets and the split-virtqueue structures of a block device."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import Tuple

# MMIO control registers, relative to the device base address.
VIRTIO_MMIO_MAGIC_VALUE = 0x000  # 0x74726976
VIRTIO_MMIO_VERSION = 0x004  # should be 2
VIRTIO_MMIO_DEVICE_ID = 0x008  # 1 is net, 2 is disk
VIRTIO_MMIO_VENDOR_ID = 0x00C  # 0x554d4551
VIRTIO_MMIO_DEVICE_FEATURES = 0x010
VIRTIO_MMIO_DRIVER_FEATURES = 0x020
VIRTIO_MMIO_QUEUE_SEL = 0x030
VIRTIO_MMIO_QUEUE_NUM_MAX = 0x034
VIRTIO_MMIO_QUEUE_NUM = 0x038
VIRTIO_MMIO_QUEUE_READY = 0x044
VIRTIO_MMIO_QUEUE_NOTIFY = 0x050
VIRTIO_MMIO_INTERRUPT_STATUS = 0x060
VIRTIO_MMIO_INTERRUPT_ACK = 0x064
VIRTIO_MMIO_STATUS = 0x070
VIRTIO_MMIO_QUEUE_DESC_LOW = 0x080
VIRTIO_MMIO_QUEUE_DESC_HIGH = 0x084
VIRTIO_MMIO_DRIVER_DESC_LOW = 0x090
VIRTIO_MMIO_DRIVER_DESC_HIGH = 0x094
VIRTIO_MMIO_DEVICE_DESC_LOW = 0x0A0
VIRTIO_MMIO_DEVICE_DESC_HIGH = 0x0A4

# Status register bits.
VIRTIO_CONFIG_S_ACKNOWLEDGE = 1
VIRTIO_CONFIG_S_DRIVER = 2
VIRTIO_CONFIG_S_DRIVER_OK = 4
VIRTIO_CONFIG_S_FEATURES_OK = 8

# Device feature bit numbers.
VIRTIO_BLK_F_RO = 5
VIRTIO_BLK_F_SCSI = 7
VIRTIO_BLK_F_CONFIG_WCE = 11
VIRTIO_BLK_F_MQ = 12
VIRTIO_F_ANY_LAYOUT = 27
VIRTIO_RING_F_INDIRECT_DESC = 28
VIRTIO_RING_F_EVENT_IDX = 29

NUM = 8
"""Number of descriptors; a power of two."""

VIRTIO_BLK_T_IN = 0
VIRTIO_BLK_T_OUT = 1

_DESC = struct.Struct("<QIHH")
_AVAIL = struct.Struct(f"<HH{NUM}HH")
_USED_ELEM = struct.Struct("<II")
_USED_HEAD = struct.Struct("<HH")
_BLK_REQ = struct.Struct("<IIQ")


def _pack(layout: struct.Struct, *values: int) -> bytes:
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise ValueError(f"field out of range: {exc}") from exc


def _need(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise ValueError(f"{what} needs {size} bytes, got {len(data)}")


class DescFlag(enum.IntFlag):
    """Descriptor flags."""

    NEXT = 1  # chained with another descriptor
    WRITE = 2  # device writes rather than reads


@dataclass
class VirtqDesc:
    """One descriptor of the descriptor table."""

    addr: int = 0
    len: int = 0
    flags: int = 0
    next: int = 0

    SIZE = _DESC.size

    def pack(self) -> bytes:
        """Encode in the little-endian layout."""
        return _pack(_DESC, self.addr, self.len, int(self.flags), self.next)

    @classmethod
    def unpack(cls, data: bytes) -> "VirtqDesc":
        """Decode from the start of ``data``."""
        _need(data, _DESC.size, "descriptor")
        addr, length, flags, nxt = _DESC.unpack_from(data)
        return cls(addr, length, DescFlag(flags) if flags <= 3 else flags, nxt)


@dataclass
class VirtqAvail:
    """The available ring, where the driver offers descriptor chain heads."""

    flags: int = 0
    idx: int = 0
    ring: Tuple[int, ...] = field(default_factory=lambda: (0,) * NUM)
    unused: int = 0

    SIZE = _AVAIL.size

    def pack(self) -> bytes:
        """Encode in the little-endian layout."""
        if len(self.ring) != NUM:
            raise ValueError(f"the ring holds exactly {NUM} entries")
        return _pack(_AVAIL, self.flags, self.idx, *self.ring, self.unused)

    @classmethod
    def unpack(cls, data: bytes) -> "VirtqAvail":
        """Decode from the start of ``data``."""
        _need(data, _AVAIL.size, "available ring")
        flags, idx, *rest = _AVAIL.unpack_from(data)
        return cls(flags, idx, tuple(rest[:NUM]), rest[NUM])


@dataclass
class VirtqUsedElem:
    """One entry of the used ring: a completed chain and its length."""

    id: int = 0
    len: int = 0

    SIZE = _USED_ELEM.size

    def pack(self) -> bytes:
        """Encode in the little-endian layout."""
        return _pack(_USED_ELEM, self.id, self.len)

    @classmethod
    def unpack(cls, data: bytes) -> "VirtqUsedElem":
        """Decode from the start of ``data``."""
        _need(data, _USED_ELEM.size, "used ring entry")
        return cls(*_USED_ELEM.unpack_from(data))


@dataclass
class VirtqUsed:
    """The used ring, where the device reports completed requests."""

    flags: int = 0
    idx: int = 0
    ring: Tuple[VirtqUsedElem, ...] = field(
        default_factory=lambda: tuple(VirtqUsedElem() for _ in range(NUM))
    )

    SIZE = _USED_HEAD.size + NUM * _USED_ELEM.size

    def pack(self) -> bytes:
        """Encode in the little-endian layout."""
        if len(self.ring) != NUM:
            raise ValueError(f"the ring holds exactly {NUM} entries")
        head = _pack(_USED_HEAD, self.flags, self.idx)
        return head + b"".join(elem.pack() for elem in self.ring)

    @classmethod
    def unpack(cls, data: bytes) -> "VirtqUsed":
        """Decode from the start of ``data``."""
        _need(data, cls.SIZE, "used ring")
        flags, idx = _USED_HEAD.unpack_from(data)
        ring = tuple(
            VirtqUsedElem(*_USED_ELEM.unpack_from(data, _USED_HEAD.size + i * _USED_ELEM.size))
            for i in range(NUM)
        )
        return cls(flags, idx, ring)


@dataclass
class VirtioBlkReq:
    """The first descriptor of a disk request: direction and sector."""

    type: int = VIRTIO_BLK_T_IN
    reserved: int = 0
    sector: int = 0

    SIZE = _BLK_REQ.size

    def pack(self) -> bytes:
        """Encode in the little-endian layout."""
        return _pack(_BLK_REQ, self.type, self.reserved, self.sector)

    @classmethod
    def unpack(cls, data: bytes) -> "VirtioBlkReq":
        """Decode from the start of ``data``."""
        _need(data, _BLK_REQ.size, "block request")
        return cls(*_BLK_REQ.unpack_from(data))