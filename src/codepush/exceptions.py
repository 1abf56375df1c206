"""
CodePush exception hierarchy.

Configuration resolution itself never raises. These exceptions are raised by
the consumers of a resolved configuration at the point where a missing or
unrecognized value is first used.

Hierarchy::

    CodePushError
    ├── ConfigurationError           - unusable configuration at point of use
    ├── StorageError                 - storage profile dispatch
    │   ├── UnknownStorageTypeError  - storage type outside the known set
    │   └── StorageNotConfiguredError - active profile lacks a required value
    └── CacheStoreReconnectError     - cache store reconnection stopped
"""

from __future__ import annotations


class CodePushError(Exception):
    """Base exception for all CodePush errors."""

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- Configuration -----------------------------------------------------------


class ConfigurationError(CodePushError):
    """Raised when a resolved configuration value cannot be used."""


# --- Storage -----------------------------------------------------------------


class StorageError(ConfigurationError):
    """Raised when the storage backend cannot be selected or used."""


class UnknownStorageTypeError(StorageError):
    """Raised when ``STORAGE_TYPE`` names a backend that does not exist."""

    def __init__(self, storage_type: str, *, choices: list[str] | None = None) -> None:
        choices = choices or []
        message = f"Unknown storage type: {storage_type!r}"
        if choices:
            message += f" (expected one of: {', '.join(choices)})"
        super().__init__(message, details={"storage_type": storage_type, "choices": choices})
        self.storage_type = storage_type


class StorageNotConfiguredError(StorageError):
    """Raised when the active storage profile is missing a required value."""

    def __init__(self, storage_type: str, field: str) -> None:
        super().__init__(
            f"Storage '{storage_type}' is not configured: '{field}' is not set",
            details={"storage_type": storage_type, "field": field},
        )
        self.storage_type = storage_type
        self.field = field


# --- Cache store -------------------------------------------------------------


class CacheStoreReconnectError(CodePushError):
    """Raised (or handed to the cache client) when reconnecting must stop."""

    def __init__(self, reason: str, *, error_code: str | None = None) -> None:
        super().__init__(reason, details={"error_code": error_code})
        self.error_code = error_code
