"""Object parser capability.

The inspector only depends on :class:`ObjectParser`; :class:`DefaultObjectParser`
is the stock implementation backed by pyelftools, pefile and the bundled
Mach-O / PDB readers.
"""

from __future__ import annotations

import io
from typing import Iterable, Protocol

import pefile
from elftools.elf.elffile import ELFFile

from symstore.exceptions import ObjectParseError
from symstore.objects.macho import read_macho
from symstore.objects.magic import peek
from symstore.objects.pdb import read_pdb
from symstore.objects.types import ObjectFormat, ParsedObject

ELF_DEBUG_SECTIONS = (".debug_info", ".zdebug_info")


class ObjectParser(Protocol):
    def parse(self, data: bytes) -> ParsedObject:  # raises ObjectParseError
        ...


def _notes_build_id(notes: Iterable) -> str | None:
    for note in notes:
        if note["n_type"] == "NT_GNU_BUILD_ID" and note["n_desc"]:
            return str(note["n_desc"]).lower()
    return None


def _parse_elf(data: bytes) -> ParsedObject:
    elf = ELFFile(io.BytesIO(data))

    build_id = None
    for section in elf.iter_sections():
        if section["sh_type"] == "SHT_NOTE":
            build_id = _notes_build_id(section.iter_notes())
            if build_id:
                break
    if not build_id:
        for segment in elf.iter_segments():
            if segment["p_type"] == "PT_NOTE":
                build_id = _notes_build_id(segment.iter_notes())
                if build_id:
                    break

    has_debug_info = any(elf.get_section_by_name(name) is not None for name in ELF_DEBUG_SECTIONS)
    return ParsedObject(format=ObjectFormat.ELF, identifier=build_id, has_debug_info=has_debug_info)


def _parse_pe(data: bytes) -> ParsedObject:
    pe = pefile.PE(data=data, fast_load=True)
    try:
        timestamp = pe.FILE_HEADER.TimeDateStamp
        size_of_image = pe.OPTIONAL_HEADER.SizeOfImage
    finally:
        pe.close()
    code_id = f"{timestamp:08X}{size_of_image:x}"
    return ParsedObject(format=ObjectFormat.PE, identifier=code_id, has_debug_info=False)


def _parse_pdb(data: bytes) -> ParsedObject:
    info = read_pdb(data)
    return ParsedObject(format=ObjectFormat.PDB, identifier=info.debug_id, has_debug_info=True)


def _parse_macho(data: bytes) -> ParsedObject:
    info = read_macho(data)
    return ParsedObject(format=ObjectFormat.MACHO, identifier=info.code_id, has_debug_info=info.has_debug_info)


_READERS = {
    ObjectFormat.ELF: _parse_elf,
    ObjectFormat.PE: _parse_pe,
    ObjectFormat.PDB: _parse_pdb,
    ObjectFormat.MACHO: _parse_macho,
}


class DefaultObjectParser:
    """Full parse of ELF, PE, PDB and thin Mach-O images."""

    def parse(self, data: bytes) -> ParsedObject:
        fmt = peek(data)
        reader = _READERS.get(fmt)
        if reader is None:
            raise ObjectParseError("Unrecognized object format")
        try:
            return reader(data)
        except ObjectParseError:
            raise
        except Exception as exc:
            raise ObjectParseError(f"Malformed {fmt.value} object: {exc}", {"format": fmt.value}) from exc


__all__ = ["ObjectParser", "DefaultObjectParser", "ELF_DEBUG_SECTIONS"]
