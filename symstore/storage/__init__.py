"""Storage backends a symbol store can be published to (S3/B2, local path, remote API)."""

from __future__ import annotations

from typing import Protocol

from symstore.objects.types import ObjectIdentity


class SymbolBackend(Protocol):
    name: str
    supports_exists: bool

    def destination(self, key: str) -> str:  # human readable target for logs
        ...

    def exists(self, key: str) -> bool:
        ...

    def put_file(self, key: str, identity: ObjectIdentity) -> str:  # returns destination
        ...

    def close(self) -> None:
        ...


__all__ = ["SymbolBackend"]
