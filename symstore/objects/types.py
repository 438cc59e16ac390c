from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ObjectFormat(str, Enum):
    """Object container format. Values are the remote API wire names."""

    ELF = "Elf"
    PE = "Pe"
    PDB = "Pdb"
    MACHO = "MachO"
    UNKNOWN = "Unknown"


class ResourceType(str, Enum):
    EXECUTABLE = "executable"
    DEBUG_INFO = "debuginfo"


@dataclass(frozen=True)
class ParsedObject:
    """What the object parser reports about one file's bytes."""

    format: ObjectFormat
    identifier: str | None
    has_debug_info: bool


@dataclass(frozen=True)
class ObjectIdentity:
    path: Path
    format: ObjectFormat
    resource_type: ResourceType
    raw_identifier: str
    file_size: int

    def __post_init__(self) -> None:
        if not self.raw_identifier:
            raise ValueError(f"Empty identifier for {self.path}")
        if self.format is ObjectFormat.UNKNOWN:
            raise ValueError(f"Unknown object format for {self.path}")

    @property
    def file_name(self) -> str:
        return self.path.name


__all__ = ["ObjectFormat", "ResourceType", "ParsedObject", "ObjectIdentity"]
