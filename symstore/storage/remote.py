"""Upload client for a hosted symbol server.

Uploads go through three calls: ``create`` returns a signed URL, the file is
PUT to that URL, and ``finish`` marks the upload complete. ``create`` is keyed
by the file identity, so repeating a partially failed upload is safe.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Iterator
from urllib.parse import quote

import httpx

from symstore.auth import TokenProvider
from symstore.exceptions import RemoteAPIError
from symstore.objects.types import ObjectIdentity

CHUNK_SIZE = 1024 * 1024


def sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as fp:
        for chunk in iter(lambda: fp.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _iter_file(path: Path) -> Iterator[bytes]:
    with path.open("rb") as fp:
        for chunk in iter(lambda: fp.read(CHUNK_SIZE), b""):
            yield chunk


def upload_metadata(identity: ObjectIdentity, sha256: str) -> dict[str, Any]:
    return {
        "file_type": identity.format.value,
        "file_size": identity.file_size,
        "file_name": identity.file_name,
        "identifier": identity.raw_identifier,
        "resource_type": identity.resource_type.value,
        "sha256": sha256,
    }


class SymbolServerStorage:
    """Symbol store hosted behind the symbol server HTTP API."""

    supports_exists = True

    def __init__(
        self,
        base_url: str,
        project: str,
        token_provider: TokenProvider,
        *,
        timeout_seconds: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.project = project.strip("/")
        self.name = f"symbol server '{self.base_url}' project '{self.project}'"

        token = token_provider.get_bearer_token()
        self.client = httpx.Client(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout_seconds,
            transport=transport,
        )
        # signed upload URLs carry their own credentials
        self.upload_client = httpx.Client(timeout=timeout_seconds, transport=transport)

    def _path(self, key: str) -> str:
        return f"/{quote(self.project)}/{quote(key, safe='/')}"

    def destination(self, key: str) -> str:
        return f"{self.base_url}{self._path(key)}"

    def exists(self, key: str) -> bool:
        try:
            response = self.client.head(self._path(key))
        except httpx.HTTPError as exc:
            raise RemoteAPIError(f"HEAD {self.destination(key)} failed: {exc}", "exists") from exc
        if response.status_code == 200:
            return True
        if response.status_code == 404:
            return False
        raise RemoteAPIError(
            f"HEAD {self.destination(key)} returned {response.status_code}",
            "exists",
            {"status": str(response.status_code)},
        )

    def _post(self, phase: str, payload: dict[str, Any]) -> httpx.Response:
        url = f"/api/projects/{quote(self.project)}/uploads/{phase}"
        try:
            response = self.client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RemoteAPIError(f"{phase} request for '{payload['file_name']}' failed: {exc}", phase) from exc
        return response

    def _create(self, payload: dict[str, Any]) -> str:
        response = self._post("create", payload)
        try:
            upload_url = response.json()["upload_url"]
        except (ValueError, KeyError, TypeError) as exc:
            raise RemoteAPIError("create response carries no upload_url", "create") from exc
        if not upload_url:
            raise RemoteAPIError("create response carries no upload_url", "create")
        return str(upload_url)

    def _upload(self, upload_url: str, identity: ObjectIdentity) -> None:
        try:
            response = self.upload_client.put(
                upload_url,
                content=_iter_file(identity.path),
                headers={
                    "Content-Length": str(identity.file_size),
                    "Content-Type": "application/octet-stream",
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RemoteAPIError(f"upload of '{identity.path}' failed: {exc}", "upload") from exc

    def put_file(self, key: str, identity: ObjectIdentity) -> str:
        payload = upload_metadata(identity, sha256_file(identity.path))
        upload_url = self._create(payload)
        self._upload(upload_url, identity)
        self._post("finish", payload)
        return self.destination(key)

    def close(self) -> None:
        self.client.close()
        self.upload_client.close()


__all__ = ["SymbolServerStorage", "sha256_file", "upload_metadata"]
