"""Builders for minimal, well-formed object file images used across the tests."""

from __future__ import annotations

import struct
import uuid

MIN_SIZE = 512


def _pad(data: bytes, size: int = MIN_SIZE) -> bytes:
    return data + b"\x00" * max(0, size - len(data))


def build_elf(build_id: bytes | None = bytes.fromhex("deadbeef" * 5), debug_info: bool = False) -> bytes:
    """ELF64 little-endian executable with an optional GNU build-id note."""
    names = [b".shstrtab"]
    if build_id is not None:
        names.append(b".note.gnu.build-id")
    if debug_info:
        names.append(b".debug_info")
    shstrtab = b"\x00" + b"".join(name + b"\x00" for name in names)

    def name_offset(name: bytes) -> int:
        return shstrtab.index(name + b"\x00")

    body = b""
    offset = 64
    sections = [b"\x00" * 64]

    shstrtab_offset = offset + len(body)
    body += shstrtab
    sections.append(struct.pack("<IIQQQQIIQQ", name_offset(b".shstrtab"), 3, 0, 0, shstrtab_offset, len(shstrtab), 0, 0, 1, 0))

    if build_id is not None:
        body += b"\x00" * (-len(body) % 4)
        note = struct.pack("<III", 4, len(build_id), 3) + b"GNU\x00" + build_id
        note += b"\x00" * (-len(note) % 4)
        note_offset = offset + len(body)
        body += note
        sections.append(
            struct.pack("<IIQQQQIIQQ", name_offset(b".note.gnu.build-id"), 7, 2, 0, note_offset, len(note), 0, 0, 4, 0)
        )

    if debug_info:
        debug = b"\x00" * 16
        debug_offset = offset + len(body)
        body += debug
        sections.append(struct.pack("<IIQQQQIIQQ", name_offset(b".debug_info"), 1, 0, 0, debug_offset, len(debug), 0, 0, 1, 0))

    body += b"\x00" * (-len(body) % 8)
    shoff = offset + len(body)

    ident = b"\x7fELF" + bytes([2, 1, 1, 0]) + b"\x00" * 8
    header = ident + struct.pack("<HHIQQQIHHHHHH", 2, 0x3E, 1, 0, 0, shoff, 0, 64, 56, 0, 64, len(sections), 1)
    return _pad(header + body + b"".join(sections))


def build_pe(timestamp: int = 0x5F3759DF, size_of_image: int = 0x1000) -> bytes:
    """PE32 image without sections."""
    dos = bytearray(64)
    dos[0:2] = b"MZ"
    struct.pack_into("<I", dos, 0x3C, 0x40)
    coff = struct.pack("<HHIIIHH", 0x14C, 0, timestamp, 0, 0, 0xE0, 0x0102)
    optional = struct.pack(
        "<HBBIIIIIIIIIHHHHHHIIIIHHIIIIII",
        0x10B, 14, 0,
        0, 0, 0, 0, 0, 0,
        0x400000, 0x1000, 0x200,
        6, 0, 0, 0, 6, 0,
        0, size_of_image, 0x200, 0,
        3, 0,
        0x100000, 0x1000, 0x100000, 0x1000, 0, 16,
    ) + b"\x00" * 128
    return _pad(bytes(dos) + b"PE\x00\x00" + coff + optional)


def build_pdb(guid: uuid.UUID, age: int, dbi_age: int | None = None) -> bytes:
    """MSF 7.00 file with a PDB info stream and an optional DBI stream."""
    block_size = 512
    magic = b"Microsoft C/C++ MSF 7.00\r\n\x1aDS\x00\x00\x00"

    info = struct.pack("<III", 20000404, 0x5F3759DF, age) + guid.bytes_le
    dbi = struct.pack("<iII", -1, 19990903, dbi_age) + b"\x00" * 52 if dbi_age is not None else None

    # blocks: 0 superblock, 1-2 free block maps, 3 block map, 4 directory, 5 info, 6 dbi
    sizes = [0, len(info), 0, len(dbi) if dbi is not None else 0xFFFFFFFF]
    stream_blocks = [5] + ([6] if dbi is not None else [])
    directory = struct.pack("<I", len(sizes)) + struct.pack(f"<{len(sizes)}I", *sizes)
    directory += struct.pack(f"<{len(stream_blocks)}I", *stream_blocks)

    num_blocks = 7 if dbi is not None else 6
    superblock = magic + struct.pack("<6I", block_size, 1, num_blocks, len(directory), 0, 3)

    blocks = [
        superblock,
        b"",
        b"",
        struct.pack("<I", 4),
        directory,
        info,
    ]
    if dbi is not None:
        blocks.append(dbi)
    return b"".join(_pad(block, block_size) for block in blocks)


def build_macho(uuid_bytes: bytes | None = bytes(range(16)), debug_info: bool = False) -> bytes:
    """Thin 64-bit little-endian Mach-O executable."""
    commands = []
    if uuid_bytes is not None:
        commands.append(struct.pack("<II", 0x1B, 24) + uuid_bytes)
    if debug_info:
        section = struct.pack("<16s16sQQIIIIIIII", b"__debug_info", b"__DWARF", 0, 0, 0, 0, 0, 0, 0, 0, 0, 0)
        segment = struct.pack("<II16sQQQQiiII", 0x19, 72 + len(section), b"__DWARF", 0, 0, 0, 0, 7, 7, 1, 0)
        commands.append(segment + section)
    payload = b"".join(commands)
    header = struct.pack("<IiiIIIII", 0xFEEDFACF, 0x01000007, 3, 2, len(commands), len(payload), 0, 0)
    return _pad(header + payload)
