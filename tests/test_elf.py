import pytest

from xvutils.elf import (
    ELF_PROG_LOAD,
    ElfFormatError,
    ElfHeader,
    ProgFlag,
    ProgramHeader,
    read_program_headers,
)


def _image(programs):
    header = ElfHeader(
        entry=0x1000,
        phoff=ElfHeader.SIZE,
        phentsize=ProgramHeader.SIZE,
        phnum=len(programs),
    )
    return header.pack() + b"".join(p.pack() for p in programs)


def test_packed_header_starts_with_magic_bytes():
    assert ElfHeader().pack()[:4] == b"\x7fELF"


def test_struct_sizes_follow_the_format():
    assert len(ElfHeader().pack()) == 64
    assert len(ProgramHeader().pack()) == 56


def test_header_round_trip():
    header = ElfHeader(elf=b"\x02\x01\x01" + bytes(9), type=2, machine=243,
                       version=1, entry=0x1234, phoff=64, phnum=3, shstrndx=7)
    assert ElfHeader.unpack(header.pack()) == header


def test_program_header_round_trip():
    ph = ProgramHeader(type=ELF_PROG_LOAD, flags=ProgFlag.READ | ProgFlag.EXEC,
                       off=0x1000, vaddr=0x2000, paddr=0x2000, filesz=10,
                       memsz=20, align=0x1000)
    assert ProgramHeader.unpack(ph.pack()) == ph


def test_read_program_headers():
    programs = [
        ProgramHeader(type=ELF_PROG_LOAD, flags=ProgFlag.READ | ProgFlag.EXEC,
                      vaddr=0, filesz=100, memsz=100),
        ProgramHeader(type=ELF_PROG_LOAD, flags=ProgFlag.READ | ProgFlag.WRITE,
                      vaddr=0x1000, filesz=8, memsz=64),
    ]
    assert read_program_headers(_image(programs)) == programs


def test_bad_magic_is_rejected():
    data = bytearray(ElfHeader().pack())
    data[0] = 0
    with pytest.raises(ElfFormatError):
        ElfHeader.unpack(bytes(data))


def test_short_header_is_rejected():
    with pytest.raises(ElfFormatError):
        ElfHeader.unpack(ElfHeader().pack()[:-1])


def test_truncated_program_table_is_rejected():
    image = _image([ProgramHeader(type=ELF_PROG_LOAD)])
    with pytest.raises(ElfFormatError):
        read_program_headers(image[:-1])


def test_wrong_identification_length_is_rejected():
    with pytest.raises(ValueError):
        ElfHeader(elf=b"short").pack()


def test_flag_bits_are_packed_into_flags_field():
    ph = ProgramHeader(type=ELF_PROG_LOAD, flags=ProgFlag.READ | ProgFlag.WRITE)
    data = ph.pack()
    assert data[4:8] == (6).to_bytes(4, "little")
    unpacked = ProgramHeader.unpack(data)
    assert unpacked.flags & ProgFlag.WRITE
    assert not unpacked.flags & ProgFlag.EXEC