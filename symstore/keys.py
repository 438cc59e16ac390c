"""Symbol store key layout.

The literal segments below (``buildid``, ``_.dwarf``, ``mach-uuid``...) are
what debuggers and crash processors query, so they must not change.

| format | resource type | key |
|--------|---------------|-----|
| ELF    | debug info    | ``buildid/{id}/debuginfo`` |
| ELF    | executable    | ``buildid/{id}/executable`` |
| PE     | executable    | ``{filename}/{id}/{filename}`` |
| PDB    | debug info    | ``{filename}/{id}/{filename}`` |
| Mach-O | executable    | ``{filename}/mach-uuid-{id}/{filename}`` |
| Mach-O | debug info    | ``_.dwarf/mach-uuid-sym-{id}/_.dwarf`` |
"""

from __future__ import annotations

from symstore.objects.types import ObjectFormat, ObjectIdentity, ResourceType


def derive_key(identity: ObjectIdentity) -> str:
    ident = identity.raw_identifier
    filename = identity.file_name

    if identity.format is ObjectFormat.ELF:
        if identity.resource_type is ResourceType.DEBUG_INFO:
            return f"buildid/{ident}/debuginfo"
        return f"buildid/{ident}/executable"

    if identity.format is ObjectFormat.MACHO:
        if identity.resource_type is ResourceType.DEBUG_INFO:
            return f"_.dwarf/mach-uuid-sym-{ident}/_.dwarf"
        return f"{filename}/mach-uuid-{ident}/{filename}"

    if identity.format in (ObjectFormat.PE, ObjectFormat.PDB):
        return f"{filename}/{ident}/{filename}"

    raise ValueError(f"No key layout for format {identity.format.value}")


def alias_keys(identity: ObjectIdentity) -> list[str]:
    """Additional SSQP-style keys an ELF file is also published under."""
    if identity.format is not ObjectFormat.ELF:
        return []
    ident = identity.raw_identifier
    if identity.resource_type is ResourceType.DEBUG_INFO:
        return [f"_.debug/elf-buildid-sym-{ident}/_.debug"]
    filename = identity.file_name
    return [f"{filename}/elf-buildid-{ident}/{filename}"]


def derive_keys(identity: ObjectIdentity, aliases: bool = False) -> list[str]:
    keys = [derive_key(identity)]
    if aliases:
        keys.extend(alias_keys(identity))
    return keys


__all__ = ["derive_key", "alias_keys", "derive_keys"]
