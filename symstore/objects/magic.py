"""Cheap object-format detection from the first bytes of a file."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from symstore.objects.types import ObjectFormat

PEEK_SIZE = 256

ELF_MAGIC = b"\x7fELF"
PE_MAGICS = (b"MZ", b"ZM")
PDB_MAGIC = b"Microsoft C/C++ MSF 7.00\r\n"
MACHO_MAGICS = (
    b"\xfe\xed\xfa\xce",  # 32-bit, big endian
    b"\xce\xfa\xed\xfe",  # 32-bit, little endian
    b"\xfe\xed\xfa\xcf",  # 64-bit, big endian
    b"\xcf\xfa\xed\xfe",  # 64-bit, little endian
)


def peek(data: bytes) -> ObjectFormat:
    """Classify ``data`` by its leading magic bytes."""
    if data.startswith(ELF_MAGIC):
        return ObjectFormat.ELF
    if data[:2] in PE_MAGICS:
        return ObjectFormat.PE
    if data.startswith(PDB_MAGIC):
        return ObjectFormat.PDB
    if data[:4] in MACHO_MAGICS:
        return ObjectFormat.MACHO
    return ObjectFormat.UNKNOWN


def sniff(path: Path) -> ObjectFormat:
    """Classify the file at ``path`` without parsing it.

    Files shorter than ``PEEK_SIZE`` and files that cannot be read are
    reported as unknown.
    """
    try:
        with path.open("rb") as fp:
            head = fp.read(PEEK_SIZE)
    except OSError as exc:
        logger.debug(f"Unable to read {path}: {exc}")
        return ObjectFormat.UNKNOWN

    if len(head) < PEEK_SIZE:
        return ObjectFormat.UNKNOWN
    return peek(head)


__all__ = ["PEEK_SIZE", "peek", "sniff"]
