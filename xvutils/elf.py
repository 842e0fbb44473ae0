"""The ELF64 file header and program header of an executable."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import List

ELF_MAGIC = 0x464C457F  # "\x7fELF" read as a little-endian word
ELF_PROG_LOAD = 1

_ELF_HEADER = struct.Struct("<I12sHHIQQQIHHHHHH")
_PROG_HEADER = struct.Struct("<IIQQQQQQ")


class ElfFormatError(ValueError):
    """Raised when data is not a well-formed executable."""


class ProgFlag(enum.IntFlag):
    """Permission bits of a program segment."""

    EXEC = 1
    WRITE = 2
    READ = 4


@dataclass
class ElfHeader:
    """The file header at the start of an executable."""

    magic: int = ELF_MAGIC
    elf: bytes = bytes(12)
    type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    phoff: int = 0
    shoff: int = 0
    flags: int = 0
    ehsize: int = 0
    phentsize: int = 0
    phnum: int = 0
    shentsize: int = 0
    shnum: int = 0
    shstrndx: int = 0

    SIZE = _ELF_HEADER.size

    @classmethod
    def unpack(cls, data: bytes) -> "ElfHeader":
        """Decode the header at the start of ``data`` and check its magic number."""
        if len(data) < _ELF_HEADER.size:
            raise ElfFormatError(
                f"ELF header needs {_ELF_HEADER.size} bytes, got {len(data)}"
            )
        header = cls(*_ELF_HEADER.unpack_from(data))
        if header.magic != ELF_MAGIC:
            raise ElfFormatError(f"bad ELF magic {header.magic:#010x}")
        return header

    def pack(self) -> bytes:
        """Encode the header in its little-endian layout."""
        if len(self.elf) != 12:
            raise ValueError("the identification field must be 12 bytes")
        try:
            return _ELF_HEADER.pack(
                self.magic, bytes(self.elf), self.type, self.machine, self.version,
                self.entry, self.phoff, self.shoff, self.flags, self.ehsize,
                self.phentsize, self.phnum, self.shentsize, self.shnum, self.shstrndx,
            )
        except struct.error as exc:
            raise ValueError(f"ELF header field out of range: {exc}") from exc


@dataclass
class ProgramHeader:
    """One segment description in the program header table."""

    type: int = 0
    flags: int = 0
    off: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    align: int = 0

    SIZE = _PROG_HEADER.size

    @classmethod
    def unpack(cls, data: bytes) -> "ProgramHeader":
        """Decode a program header from the start of ``data``."""
        if len(data) < _PROG_HEADER.size:
            raise ElfFormatError(
                f"program header needs {_PROG_HEADER.size} bytes, got {len(data)}"
            )
        fields = list(_PROG_HEADER.unpack_from(data))
        fields[1] = ProgFlag(fields[1]) if fields[1] <= 7 else fields[1]
        return cls(*fields)

    def pack(self) -> bytes:
        """Encode the program header in its little-endian layout."""
        try:
            return _PROG_HEADER.pack(
                self.type, int(self.flags), self.off, self.vaddr,
                self.paddr, self.filesz, self.memsz, self.align,
            )
        except struct.error as exc:
            raise ValueError(f"program header field out of range: {exc}") from exc


def read_program_headers(data: bytes) -> List[ProgramHeader]:
    """Return every program header of the executable image ``data``."""
    header = ElfHeader.unpack(data)
    headers = []
    for index in range(header.phnum):
        offset = header.phoff + index * _PROG_HEADER.size
        if offset + _PROG_HEADER.size > len(data):
            raise ElfFormatError(f"program header {index} lies beyond the end of the file")
        headers.append(ProgramHeader.unpack(data[offset:offset + _PROG_HEADER.size]))
    return headers