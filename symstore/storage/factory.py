from __future__ import annotations

from symstore.auth import EnvTokenProvider, TokenProvider
from symstore.exceptions import BackendSetupError, ConfigurationError
from symstore.settings import (
    B2Settings,
    HttpSettings,
    PathSettings,
    S3Settings,
    ServerSettings,
    SymbolServerSettings,
)
from symstore.storage import SymbolBackend
from symstore.storage.local import LocalStorage
from symstore.storage.remote import SymbolServerStorage
from symstore.storage.s3 import S3Storage


def build_backend(server: ServerSettings, token_provider: TokenProvider | None = None) -> SymbolBackend:
    """Construct the backend for a configured server.

    Raises:
        ConfigurationError: If the server type cannot be published to.
        BackendSetupError: If the backend cannot be set up (credentials, region...).
    """
    storage = server.storage

    if isinstance(storage, PathSettings):
        return LocalStorage(storage.path)

    if isinstance(storage, S3Settings):
        return S3Storage(
            bucket=storage.bucket,
            prefix=storage.prefix,
            region=storage.region,
            profile=storage.profile,
            endpoint_url=storage.endpoint_url,
        )

    if isinstance(storage, B2Settings):
        if not storage.key_id or not storage.key:
            raise BackendSetupError(
                f"B2 credentials missing: set {storage.key_id_env} and {storage.key_env}",
                {"bucket": storage.bucket},
            )
        return S3Storage(
            bucket=storage.bucket,
            prefix=storage.prefix,
            endpoint_url=storage.endpoint,
            access_key_id=storage.key_id,
            secret_access_key=storage.key,
        )

    if isinstance(storage, SymbolServerSettings):
        return SymbolServerStorage(
            base_url=storage.url,
            project=storage.project,
            token_provider=token_provider or EnvTokenProvider(storage.token_env),
            timeout_seconds=storage.timeout_seconds,
        )

    if isinstance(storage, HttpSettings):
        raise ConfigurationError(f"Upload to HTTP server ({storage.url}) not yet implemented!")

    raise ConfigurationError(f"Unsupported server type '{storage.type}'")


__all__ = ["build_backend"]
