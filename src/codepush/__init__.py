"""
CodePush - configuration core for the CodePush update server.

Resolves the typed runtime configuration every other subsystem reads.
"""

__version__ = "0.1.0"

from codepush.config import ResolvedConfig, load_config, resolve_config

# Exceptions
from codepush.exceptions import (
    CacheStoreReconnectError,
    CodePushError,
    ConfigurationError,
    StorageError,
    StorageNotConfiguredError,
    UnknownStorageTypeError,
)

# Logging utilities
from codepush.utils.logging import get_logger, setup_logging, setup_logging_from_config

__all__ = [
    "__version__",
    # Configuration
    "load_config",
    "resolve_config",
    "ResolvedConfig",
    # Exceptions
    "CodePushError",
    "ConfigurationError",
    "StorageError",
    "UnknownStorageTypeError",
    "StorageNotConfiguredError",
    "CacheStoreReconnectError",
    # Logging
    "get_logger",
    "setup_logging",
    "setup_logging_from_config",
]
