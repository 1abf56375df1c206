"""
Configuration resolution.

Builds the immutable ``ResolvedConfig`` from the process environment once at
startup. Resolution never raises: unparsable numbers fall back to their
defaults and unset optional values stay ``None``. Consumers validate the
values they need when they first use them.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import quote

from dotenv import dotenv_values

from codepush.config.env import EnvReader, RawEnv
from codepush.config.reconnect import DEFAULT_RECONNECT_POLICY, ReconnectPolicy
from codepush.config.storage import StorageConfig, StorageProfile, resolve_storage
from codepush.utils.logging import get_logger, setup_logging_from_config

logger = get_logger("codepush.config")

DEFAULT_ENVIRONMENT = "development"
DEFAULT_TOKEN_SECRET = "INSERT_RANDOM_TOKEN_KEY"

# Masked by ResolvedConfig.to_dict()
SECRET_FIELDS = frozenset(
    (
        "password",
        "token_secret",
        "secret_key",
        "secret_access_key",
        "session_token",
        "access_key",
        "access_key_id",
    )
)
MASK = "********"


@dataclass(frozen=True)
class LogConfig:
    # error, warn, info, debug
    level: str = "info"
    # text, json
    format: str = "text"


@dataclass(frozen=True)
class DatabaseConfig:
    """Relational database (MySQL only)."""

    username: str = "root"
    password: str = "password"
    database: str = "codepush"
    host: str = "127.0.0.1"
    port: int = 3306
    dialect: str = "mysql"
    logging: bool = False

    @property
    def url(self) -> str:
        """Database connection URL."""
        user = quote(self.username, safe="")
        password = quote(self.password, safe="")
        return f"{self.dialect}://{user}:{password}@{self.host}:{self.port}/{self.database}"


@dataclass(frozen=True)
class JwtConfig:
    # Recommended: 63 random alpha-numeric characters
    token_secret: str = DEFAULT_TOKEN_SECRET


@dataclass(frozen=True)
class CommonConfig:
    """Feature toggles and limits shared across subsystems."""

    allow_registration: bool = False
    # Failed logins allowed per day; 0 disables the limit. Needs the cache store.
    try_login_times: int = 4
    # Number of diff packages generated for each new release
    diff_nums: int = 3
    # Scratch dir for computing diff packages
    data_dir: str = field(default_factory=tempfile.gettempdir)
    # Not validated here; see StorageConfig.profile()
    storage_type: str = "local"
    update_check_cache: bool = False
    rollout_client_unique_id_cache: bool = False


@dataclass(frozen=True)
class SmtpConfig:
    """Outgoing mail, used to verify registration emails."""

    host: str | None = None
    port: int = 465
    secure: bool = True
    username: str | None = None
    password: str | None = None


@dataclass(frozen=True)
class CacheStoreConfig:
    """Redis, used by registration, login throttling and the caches."""

    host: str = "127.0.0.1"
    port: int = 6379
    password: str | None = None
    db: int = 0
    retry_policy: ReconnectPolicy = DEFAULT_RECONNECT_POLICY

    def connection_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for a cache client constructor."""
        kwargs: dict[str, Any] = {"host": self.host, "port": self.port, "db": self.db}
        if self.password is not None:
            kwargs["password"] = self.password
        return kwargs


@dataclass(frozen=True)
class ResolvedConfig:
    """Complete runtime configuration, created once and passed to each subsystem."""

    env: str = DEFAULT_ENVIRONMENT
    log: LogConfig = field(default_factory=LogConfig)
    db: DatabaseConfig = field(default_factory=DatabaseConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    jwt: JwtConfig = field(default_factory=JwtConfig)
    common: CommonConfig = field(default_factory=CommonConfig)
    smtp: SmtpConfig = field(default_factory=SmtpConfig)
    redis: CacheStoreConfig = field(default_factory=CacheStoreConfig)

    def active_storage(self) -> StorageProfile:
        """
        Profile selected by ``common.storage_type``.

        Raises:
            UnknownStorageTypeError: If the storage type is not a known backend
        """
        return self.storage.profile(self.common.storage_type)

    def to_dict(self, mask_secrets: bool = True) -> dict[str, Any]:
        """
        Plain-dict view, suitable for YAML/JSON output.

        Args:
            mask_secrets: Replace credentials that are set with a mask

        Returns:
            Nested dictionary of all sections
        """
        data = asdict(self)
        if mask_secrets:
            data = _mask(data)
        return data


def _mask(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            k: (MASK if k in SECRET_FIELDS and v is not None else _mask(v))
            for k, v in value.items()
        }
    return value


def resolve_config(environ: RawEnv | None = None) -> ResolvedConfig:
    """
    Resolve the configuration from raw environment values.

    Args:
        environ: Raw environment (default: a snapshot of ``os.environ``)

    Returns:
        ResolvedConfig instance
    """
    env = EnvReader(environ)

    return ResolvedConfig(
        env=env.first("NODE_ENV", "ENVIRONMENT", default=DEFAULT_ENVIRONMENT),
        log=LogConfig(
            level=env.string("LOG_LEVEL", "info"),
            format=env.string("LOG_FORMAT", "text"),
        ),
        db=DatabaseConfig(
            username=env.string("RDS_USERNAME", "root"),
            password=env.string("RDS_PASSWORD", "password"),
            database=env.string("RDS_DATABASE", "codepush"),
            host=env.string("RDS_HOST", "127.0.0.1"),
            port=env.number("RDS_PORT", 3306),
        ),
        storage=resolve_storage(env),
        jwt=JwtConfig(token_secret=env.string("TOKEN_SECRET", DEFAULT_TOKEN_SECRET)),
        common=CommonConfig(
            allow_registration=env.boolean("ALLOW_REGISTRATION"),
            try_login_times=env.number("TRY_LOGIN_TIMES", 4),
            diff_nums=env.number("DIFF_NUMS", 3),
            data_dir=env.string("DATA_DIR", tempfile.gettempdir()),
            storage_type=env.string("STORAGE_TYPE", "local"),
            update_check_cache=env.boolean("UPDATE_CHECK_CACHE"),
            rollout_client_unique_id_cache=env.boolean("ROLLOUT_CLIENT_UNIQUE_ID_CACHE"),
        ),
        smtp=SmtpConfig(
            host=env.string("SMTP_HOST"),
            port=env.number("SMTP_PORT", 465),
            username=env.string("SMTP_USERNAME"),
            password=env.string("SMTP_PASSWORD"),
        ),
        redis=CacheStoreConfig(
            host=env.string("REDIS_HOST", "127.0.0.1"),
            port=env.number("REDIS_PORT", 6379),
            password=env.string("REDIS_PASSWORD"),
            db=env.number("REDIS_DB", 0),
        ),
    )


def load_config(
    environ: RawEnv | None = None,
    env_file: str | Path | None = None,
    configure_logging: bool = True,
) -> ResolvedConfig:
    """
    Load the CodePush configuration.

    Values from ``env_file`` (a dotenv file) fill in variables missing from
    the environment; variables already set always win. Logging is configured
    from the ``log`` section before anything else is logged.

    Args:
        environ: Raw environment (default: ``os.environ``)
        env_file: Optional path to a ``.env`` file
        configure_logging: Apply ``log.level`` and ``log.format`` (default: True)

    Returns:
        ResolvedConfig instance
    """
    raw: dict[str, str | None] = {}
    missing_env_file: Path | None = None
    if env_file is not None:
        env_path = Path(env_file)
        if env_path.is_file():
            raw.update(dotenv_values(env_path))
        else:
            missing_env_file = env_path
    raw.update(os.environ if environ is None else environ)

    config = resolve_config(raw)

    if configure_logging:
        setup_logging_from_config(config.log)
    if missing_env_file is not None:
        logger.warning(f"Env file not found, ignoring: {missing_env_file}")

    logger.info(
        "use config",
        extra={"env": config.env, "storageType": config.common.storage_type},
    )
    return config
