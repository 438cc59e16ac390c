from __future__ import annotations

from pathlib import Path
from typing import Iterable

from loguru import logger

from symstore.keys import derive_keys
from symstore.objects.inspector import inspect_file
from symstore.objects.parser import ObjectParser
from symstore.objects.types import ObjectIdentity


def deduplicate(pairs: Iterable[tuple[str, ObjectIdentity]]) -> dict[str, ObjectIdentity]:
    """Collapse ``(key, identity)`` pairs into one entry per key.

    The last identity seen for a key wins; the key keeps the position of its
    first occurrence.
    """
    entries: dict[str, ObjectIdentity] = {}
    for key, identity in pairs:
        previous = entries.get(key)
        if previous is not None and previous.path != identity.path:
            logger.warning(f"Overwrote {previous.path} with {identity.path} for key {key}")
        entries[key] = identity
    return entries


def _keyed_identities(paths: Iterable[Path], parser: ObjectParser | None, aliases: bool):
    for path in paths:
        identity = inspect_file(path, parser)
        if identity is None:
            logger.warning(f"{path} has no key")
            continue
        for key in derive_keys(identity, aliases=aliases):
            yield key, identity


def map_files_to_keys(
    paths: Iterable[Path],
    parser: ObjectParser | None = None,
    *,
    aliases: bool = False,
) -> dict[str, ObjectIdentity]:
    """Inspect every path and return the deduplicated key map."""
    return deduplicate(_keyed_identities(paths, parser, aliases))


__all__ = ["deduplicate", "map_files_to_keys"]
