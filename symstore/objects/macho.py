"""Mach-O load command reader.

Only what is needed to identify a thin Mach-O image: the ``LC_UUID`` value
and whether any segment carries a ``__debug_info`` section.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from symstore.exceptions import ObjectParseError

LC_SEGMENT = 0x1
LC_UUID = 0x1B
LC_SEGMENT_64 = 0x19

_HEADERS = {
    b"\xfe\xed\xfa\xce": (">", False),
    b"\xce\xfa\xed\xfe": ("<", False),
    b"\xfe\xed\xfa\xcf": (">", True),
    b"\xcf\xfa\xed\xfe": ("<", True),
}
_FAT_MAGICS = (b"\xca\xfe\xba\xbe", b"\xbe\xba\xfe\xca")

# (segment_command size, section size, offset of nsects within the command)
_SEGMENT_LAYOUT = {
    LC_SEGMENT: (56, 68, 48),
    LC_SEGMENT_64: (72, 80, 64),
}


@dataclass(frozen=True)
class MachOInfo:
    uuid: bytes | None
    has_debug_info: bool

    @property
    def code_id(self) -> str | None:
        return self.uuid.hex() if self.uuid else None


def _name(raw: bytes) -> str:
    return raw.split(b"\x00", 1)[0].decode("ascii", errors="replace")


def read_macho(data: bytes) -> MachOInfo:
    magic = data[:4]
    if magic in _FAT_MAGICS:
        raise ObjectParseError("Universal (fat) Mach-O archives are not supported")
    if magic not in _HEADERS:
        raise ObjectParseError("Not a Mach-O image")

    endian, is_64 = _HEADERS[magic]
    header_size = 32 if is_64 else 28
    if len(data) < header_size:
        raise ObjectParseError("Truncated Mach-O header")

    ncmds, sizeofcmds = struct.unpack_from(f"{endian}II", data, 16)
    if header_size + sizeofcmds > len(data):
        raise ObjectParseError("Load commands extend past end of file")

    uuid: bytes | None = None
    has_debug_info = False
    offset = header_size
    for _ in range(ncmds):
        if offset + 8 > len(data):
            raise ObjectParseError("Truncated load command")
        cmd, cmdsize = struct.unpack_from(f"{endian}II", data, offset)
        if cmdsize < 8 or offset + cmdsize > len(data):
            raise ObjectParseError(f"Invalid load command size {cmdsize} at offset {offset}")

        if cmd == LC_UUID:
            if cmdsize < 24:
                raise ObjectParseError("Truncated LC_UUID command")
            uuid = bytes(data[offset + 8 : offset + 24])
        elif cmd in _SEGMENT_LAYOUT:
            command_size, section_size, nsects_offset = _SEGMENT_LAYOUT[cmd]
            (nsects,) = struct.unpack_from(f"{endian}I", data, offset + nsects_offset)
            if command_size + nsects * section_size > cmdsize:
                raise ObjectParseError("Segment sections extend past the command")
            section = offset + command_size
            for _ in range(nsects):
                if _name(data[section : section + 16]) == "__debug_info":
                    has_debug_info = True
                section += section_size

        offset += cmdsize

    return MachOInfo(uuid=uuid, has_debug_info=has_debug_info)


__all__ = ["MachOInfo", "read_macho"]
