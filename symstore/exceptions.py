"""Custom exception hierarchy for symstore."""

from __future__ import annotations


class SymstoreError(Exception):
    """Base exception for all symstore-specific errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(SymstoreError):
    """Raised when configuration is invalid or missing."""
    pass


class PathNotFoundError(SymstoreError):
    """Raised when the search root does not exist."""
    pass


class ObjectParseError(SymstoreError):
    """Raised by an object parser when content is malformed or unsupported."""
    pass


class BackendSetupError(SymstoreError):
    """Raised when a storage backend cannot be constructed.

    Always fatal for the run: nothing has been published yet.
    """
    pass


class AuthError(BackendSetupError):
    """Raised when no bearer token can be obtained."""
    pass


class StorageError(SymstoreError):
    """Raised when a single storage operation fails."""
    pass


class S3Error(StorageError):
    """Raised when S3 operations fail."""
    pass


class RemoteAPIError(StorageError):
    """Raised when one phase of the remote upload protocol fails."""

    def __init__(self, message: str, phase: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message, {"phase": phase, **(details or {})})
        self.phase = phase
