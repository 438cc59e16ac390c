from __future__ import annotations

from pathlib import Path

from loguru import logger

from symstore.exceptions import ObjectParseError
from symstore.objects.parser import DefaultObjectParser, ObjectParser
from symstore.objects.types import ObjectFormat, ObjectIdentity, ParsedObject, ResourceType


def _resource_type(parsed: ParsedObject) -> ResourceType:
    if parsed.format is ObjectFormat.PDB:
        return ResourceType.DEBUG_INFO
    if parsed.format is ObjectFormat.PE:
        return ResourceType.EXECUTABLE
    return ResourceType.DEBUG_INFO if parsed.has_debug_info else ResourceType.EXECUTABLE


def identity_from_parsed(path: Path, file_size: int, parsed: ParsedObject) -> ObjectIdentity | None:
    """Build the identity for a parsed object, or None if it has no identifier."""
    if parsed.format is ObjectFormat.UNKNOWN:
        logger.info(f"Unsupported object format in {path}")
        return None
    if not parsed.identifier:
        logger.warning(f"{path} has no {parsed.format.value} identifier, skipping")
        return None
    return ObjectIdentity(
        path=path,
        format=parsed.format,
        resource_type=_resource_type(parsed),
        raw_identifier=parsed.identifier,
        file_size=file_size,
    )


def inspect_file(path: Path, parser: ObjectParser | None = None) -> ObjectIdentity | None:
    """Fully parse ``path`` and return its identity.

    Unreadable files, parser rejections and missing identifiers all yield None;
    the caller keeps going with the next file.
    """
    path = path.absolute()
    logger.trace(f"Inspecting file {path}")
    try:
        data = path.read_bytes()
    except OSError as exc:
        logger.warning(f"Unable to read {path}: {exc}")
        return None

    try:
        parsed = (parser or DefaultObjectParser()).parse(data)
    except ObjectParseError as exc:
        logger.info(f"Failed to parse file {path}: {exc.message}")
        return None

    return identity_from_parsed(path, len(data), parsed)


__all__ = ["inspect_file", "identity_from_parsed"]
