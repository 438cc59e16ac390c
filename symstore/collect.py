"""Discovery of candidate object files under a search root."""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger

from symstore.exceptions import PathNotFoundError
from symstore.objects.magic import sniff
from symstore.objects.types import ObjectFormat


def _walk(root: Path, recursive: bool):
    for dirpath, dirnames, filenames in os.walk(root):
        if not recursive:
            dirnames.clear()
        else:
            dirnames.sort()
        for filename in sorted(filenames):
            yield Path(dirpath) / filename


def collect_candidates(root: Path, recursive: bool = False) -> list[Path]:
    """Return the files under ``root`` worth a full parse.

    An explicit file is always returned. Directory entries are kept only when
    their magic bytes look like a supported object format. Without
    ``recursive`` only the direct children of ``root`` are visited.
    """
    if not root.exists():
        raise PathNotFoundError(f'Path "{root}" does not exist', {"path": str(root)})

    if not root.is_dir():
        return [root]

    files: list[Path] = []
    for path in _walk(root, recursive):
        if not path.is_file():
            continue
        fmt = sniff(path)
        if fmt is ObjectFormat.UNKNOWN:
            continue
        logger.debug(f"Found {fmt.value} candidate {path}")
        files.append(path)

    logger.info(f"Found {len(files)} candidate object file(s) under {root}")
    return files


__all__ = ["collect_candidates"]
