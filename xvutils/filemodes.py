"""Open flags, file types and the fixed-layout ``stat`` record."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass

# int dev, uint ino, short type, short nlink, (padding), uint64 size
_STAT_FORMAT = struct.Struct("<iIhh4xQ")


class OpenFlag(enum.IntFlag):
    """Flags accepted by ``open``."""

    RDONLY = 0x000
    WRONLY = 0x001
    RDWR = 0x002
    CREATE = 0x200
    TRUNC = 0x400


class FileType(enum.IntEnum):
    """Kinds of inode."""

    DIR = 1
    FILE = 2
    DEVICE = 3


def _coerce_type(value: int) -> int:
    try:
        return FileType(value)
    except ValueError:
        return value


@dataclass
class Stat:
    """Metadata about one file, as reported by ``fstat``."""

    dev: int = 0
    ino: int = 0
    type: int = 0
    nlink: int = 0
    size: int = 0

    SIZE = _STAT_FORMAT.size

    def pack(self) -> bytes:
        """Encode the record in its little-endian in-memory layout."""
        try:
            return _STAT_FORMAT.pack(self.dev, self.ino, int(self.type), self.nlink, self.size)
        except struct.error as exc:
            raise ValueError(f"stat field out of range: {exc}") from exc

    @classmethod
    def unpack(cls, data: bytes) -> "Stat":
        """Decode a record from the start of ``data``."""
        if len(data) < _STAT_FORMAT.size:
            raise ValueError(
                f"stat record needs {_STAT_FORMAT.size} bytes, got {len(data)}"
            )
        dev, ino, kind, nlink, size = _STAT_FORMAT.unpack_from(data)
        return cls(dev=dev, ino=ino, type=_coerce_type(kind), nlink=nlink, size=size)