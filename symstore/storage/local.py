from __future__ import annotations

import shutil
from pathlib import Path

from symstore.exceptions import StorageError
from symstore.objects.types import ObjectIdentity


class LocalStorage:
    """Mirror of the symbol store layout on a local or mounted filesystem."""

    supports_exists = False

    def __init__(self, root: Path) -> None:
        self.root = root
        self.name = f"path '{root}'"

    def _path(self, key: str) -> Path:
        return self.root / key

    def destination(self, key: str) -> str:
        return str(self._path(key))

    def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def put_file(self, key: str, identity: ObjectIdentity) -> str:
        target = self._path(key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                f"Failed to create destination folder '{target.parent}': {exc}",
                {"path": str(target.parent)},
            ) from exc
        try:
            shutil.copyfile(identity.path, target)
        except OSError as exc:
            raise StorageError(
                f"Failed to copy '{identity.path}' to '{target}': {exc}",
                {"source": str(identity.path), "target": str(target)},
            ) from exc
        return str(target)

    def close(self) -> None:
        pass


__all__ = ["LocalStorage"]
