"""
Configuration management.

Resolve the runtime configuration from environment variables, select the
storage backend and define the cache store reconnection policy.
"""

from codepush.config.env import EnvReader, to_bool, to_number
from codepush.config.loader import (
    CacheStoreConfig,
    CommonConfig,
    DatabaseConfig,
    JwtConfig,
    LogConfig,
    ResolvedConfig,
    SmtpConfig,
    load_config,
    resolve_config,
)
from codepush.config.reconnect import (
    ReconnectAction,
    ReconnectContext,
    ReconnectDecision,
    ReconnectPolicy,
)
from codepush.config.storage import (
    StorageConfig,
    StorageType,
    require_download_url,
    resolve_download_url,
)

__all__ = [
    "load_config",
    "resolve_config",
    "ResolvedConfig",
    "LogConfig",
    "DatabaseConfig",
    "JwtConfig",
    "CommonConfig",
    "SmtpConfig",
    "CacheStoreConfig",
    "StorageConfig",
    "StorageType",
    "resolve_download_url",
    "require_download_url",
    "ReconnectPolicy",
    "ReconnectContext",
    "ReconnectDecision",
    "ReconnectAction",
    "EnvReader",
    "to_bool",
    "to_number",
]
