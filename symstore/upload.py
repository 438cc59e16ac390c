from __future__ import annotations

from pathlib import Path

from loguru import logger

from symstore.collect import collect_candidates
from symstore.dedup import map_files_to_keys
from symstore.objects.parser import ObjectParser
from symstore.publisher import Publisher, PublishReport
from symstore.storage import SymbolBackend


def upload(
    search_path: Path,
    recursive: bool,
    backend: SymbolBackend,
    *,
    dry_run: bool = False,
    workers: int = 1,
    aliases: bool = False,
    parser: ObjectParser | None = None,
) -> PublishReport:
    """Collect, identify and publish every object file under ``search_path``.

    Raises:
        PathNotFoundError: If ``search_path`` does not exist.
    """
    files = collect_candidates(search_path, recursive)
    # the key map must be complete before anything is written
    entries = map_files_to_keys(files, parser, aliases=aliases)
    logger.info(f"{len(entries)} unique key(s) from {len(files)} file(s)")
    return Publisher(backend, dry_run=dry_run, workers=workers).publish(entries)


__all__ = ["upload"]
