"""Minimal reader for MSF 7.00 program databases.

Reads the stream directory and pulls the signature GUID and age out of the
PDB info stream, preferring the DBI stream's age when that stream is valid.
"""

from __future__ import annotations

import struct
import uuid
from dataclasses import dataclass

from symstore.exceptions import ObjectParseError

MSF_MAGIC = b"Microsoft C/C++ MSF 7.00\r\n\x1aDS\x00\x00\x00"

PDB_INFO_STREAM = 1
DBI_STREAM = 3
_NIL_STREAM_SIZE = 0xFFFFFFFF
_DBI_SIGNATURE = -1


@dataclass(frozen=True)
class PdbInfo:
    guid: uuid.UUID
    age: int

    @property
    def debug_id(self) -> str:
        return f"{self.guid.hex.upper()}{self.age:X}"


class _Msf:
    def __init__(self, data: bytes) -> None:
        if not data.startswith(MSF_MAGIC):
            raise ObjectParseError("Not an MSF 7.00 program database")
        if len(data) < len(MSF_MAGIC) + 24:
            raise ObjectParseError("Truncated MSF superblock")

        (
            self.block_size,
            _free_block_map,
            self.num_blocks,
            directory_bytes,
            _unknown,
            block_map_addr,
        ) = struct.unpack_from("<6I", data, len(MSF_MAGIC))
        if self.block_size not in (512, 1024, 2048, 4096):
            raise ObjectParseError(f"Invalid MSF block size {self.block_size}")

        self.data = data
        directory_blocks = self._block_count(directory_bytes)
        map_offset = self._block_offset(block_map_addr)
        blocks = struct.unpack_from(f"<{directory_blocks}I", data, map_offset)
        directory = self._read_blocks(blocks, directory_bytes)

        (num_streams,) = struct.unpack_from("<I", directory, 0)
        sizes = struct.unpack_from(f"<{num_streams}I", directory, 4)
        self.streams: list[tuple[int, tuple[int, ...]]] = []
        cursor = 4 + 4 * num_streams
        for size in sizes:
            if size == _NIL_STREAM_SIZE:
                size = 0
            count = self._block_count(size)
            stream_blocks = struct.unpack_from(f"<{count}I", directory, cursor)
            cursor += 4 * count
            self.streams.append((size, stream_blocks))

    def _block_count(self, size: int) -> int:
        return (size + self.block_size - 1) // self.block_size

    def _block_offset(self, block: int) -> int:
        if block >= self.num_blocks or (block + 1) * self.block_size > len(self.data):
            raise ObjectParseError(f"MSF block {block} out of range")
        return block * self.block_size

    def _read_blocks(self, blocks: tuple[int, ...], size: int) -> bytes:
        chunks = []
        for block in blocks:
            start = self._block_offset(block)
            chunks.append(self.data[start : start + self.block_size])
        return b"".join(chunks)[:size]

    def stream(self, index: int) -> bytes:
        if index >= len(self.streams):
            return b""
        size, blocks = self.streams[index]
        return self._read_blocks(blocks, size)


def read_pdb(data: bytes) -> PdbInfo:
    try:
        msf = _Msf(data)
    except struct.error as exc:
        raise ObjectParseError(f"Corrupt MSF directory: {exc}") from exc

    info = msf.stream(PDB_INFO_STREAM)
    if len(info) < 28:
        raise ObjectParseError("PDB info stream is missing or truncated")
    _version, _signature, age = struct.unpack_from("<III", info, 0)
    guid = uuid.UUID(bytes_le=bytes(info[12:28]))

    dbi = msf.stream(DBI_STREAM)
    if len(dbi) >= 12:
        signature, _dbi_version, dbi_age = struct.unpack_from("<iII", dbi, 0)
        if signature == _DBI_SIGNATURE:
            age = dbi_age

    return PdbInfo(guid=guid, age=age)


__all__ = ["MSF_MAGIC", "PdbInfo", "read_pdb"]
