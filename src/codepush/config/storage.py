"""
Storage backend profiles.

Every supported backend has its own profile; which one is used is decided by
``common.storage_type``. Profiles are resolved regardless of which one is
active, and credentials are not checked here: a backend that is missing a
value fails when it is dispatched or used.
"""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from enum import Enum

from codepush.config.env import EnvReader
from codepush.exceptions import StorageNotConfiguredError, UnknownStorageTypeError

# Shared override used by every backend after its own *_DOWNLOAD_URL
DOWNLOAD_URL_VAR = "DOWNLOAD_URL"

LOCAL_DOWNLOAD_URL = "http://127.0.0.1:3000/download"
LOCAL_PUBLIC_PATH = "/download"


class StorageType(str, Enum):
    """Supported binary storage backends."""

    LOCAL = "local"
    QINIU = "qiniu"
    S3 = "s3"
    OSS = "oss"
    TENCENTCLOUD = "tencentcloud"

    @classmethod
    def parse(cls, value: str) -> StorageType:
        """Map a raw storage type onto the enum, raising for unknown values."""
        try:
            return cls(value)
        except ValueError:
            raise UnknownStorageTypeError(value, choices=[t.value for t in cls]) from None


@dataclass(frozen=True)
class LocalStorageConfig:
    """Files kept on local disk and served by the server itself."""

    # Do not point this at a temp dir in production; it is the public download dir
    storage_dir: str = field(default_factory=tempfile.gettempdir)
    download_url: str = LOCAL_DOWNLOAD_URL
    public: str = LOCAL_PUBLIC_PATH

    storage_type = StorageType.LOCAL


@dataclass(frozen=True)
class QiniuStorageConfig:
    """Qiniu cloud storage (http://www.qiniu.com/)."""

    access_key: str | None = None
    secret_key: str | None = None
    bucket_name: str | None = None
    download_url: str | None = None

    storage_type = StorageType.QINIU


@dataclass(frozen=True)
class S3StorageConfig:
    """Amazon S3."""

    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None
    bucket_name: str | None = None
    region: str | None = None
    download_url: str | None = None

    storage_type = StorageType.S3


@dataclass(frozen=True)
class OssStorageConfig:
    """Aliyun OSS."""

    access_key_id: str | None = None
    secret_access_key: str | None = None
    endpoint: str | None = None
    bucket_name: str | None = None
    # Key prefix prepended to every object key
    prefix: str | None = None
    download_url: str | None = None

    storage_type = StorageType.OSS


@dataclass(frozen=True)
class TencentCloudStorageConfig:
    """Tencent Cloud COS."""

    access_key_id: str | None = None
    secret_access_key: str | None = None
    bucket_name: str | None = None
    region: str | None = None
    download_url: str | None = None

    storage_type = StorageType.TENCENTCLOUD


StorageProfile = (
    LocalStorageConfig | QiniuStorageConfig | S3StorageConfig | OssStorageConfig | TencentCloudStorageConfig
)


@dataclass(frozen=True)
class StorageConfig:
    """All storage profiles, active or not."""

    local: LocalStorageConfig = field(default_factory=LocalStorageConfig)
    qiniu: QiniuStorageConfig = field(default_factory=QiniuStorageConfig)
    s3: S3StorageConfig = field(default_factory=S3StorageConfig)
    oss: OssStorageConfig = field(default_factory=OssStorageConfig)
    tencentcloud: TencentCloudStorageConfig = field(default_factory=TencentCloudStorageConfig)

    def profile(self, storage_type: str | StorageType) -> StorageProfile:
        """
        Dispatch to the profile named by ``storage_type``.

        Args:
            storage_type: Raw storage type (usually ``common.storage_type``)

        Returns:
            The matching profile

        Raises:
            UnknownStorageTypeError: If ``storage_type`` is not a known backend
        """
        kind = storage_type if isinstance(storage_type, StorageType) else StorageType.parse(storage_type)
        return getattr(self, kind.value)


def resolve_download_url(env: EnvReader, provider_var: str, fallback: str | None = None) -> str | None:
    """
    Resolve a backend's download URL.

    The backend's own variable wins, then ``DOWNLOAD_URL``, then ``fallback``.
    Only the local backend has a fallback, so other backends resolve to None
    when neither variable is set.
    """
    return env.first(provider_var, DOWNLOAD_URL_VAR, default=fallback)


def require_download_url(profile: StorageProfile) -> str:
    """Return the profile's download URL, raising if it was never configured."""
    if not profile.download_url:
        raise StorageNotConfiguredError(profile.storage_type.value, "download_url")
    return profile.download_url


def resolve_storage(env: EnvReader) -> StorageConfig:
    """Resolve every storage profile from the environment."""
    return StorageConfig(
        local=LocalStorageConfig(
            storage_dir=env.string("STORAGE_DIR", tempfile.gettempdir()),
            download_url=resolve_download_url(env, "LOCAL_DOWNLOAD_URL", LOCAL_DOWNLOAD_URL),
        ),
        qiniu=QiniuStorageConfig(
            access_key=env.string("QINIU_ACCESS_KEY"),
            secret_key=env.string("QINIU_SECRET_KEY"),
            bucket_name=env.string("QINIU_BUCKET_NAME"),
            download_url=resolve_download_url(env, "QINIU_DOWNLOAD_URL"),
        ),
        s3=S3StorageConfig(
            access_key_id=env.string("AWS_ACCESS_KEY_ID"),
            secret_access_key=env.string("AWS_SECRET_ACCESS_KEY"),
            session_token=env.string("AWS_SESSION_TOKEN"),
            bucket_name=env.string("AWS_BUCKET_NAME"),
            region=env.string("AWS_REGION"),
            download_url=resolve_download_url(env, "AWS_DOWNLOAD_URL"),
        ),
        oss=OssStorageConfig(
            access_key_id=env.string("OSS_ACCESS_KEY_ID"),
            secret_access_key=env.string("OSS_SECRET_ACCESS_KEY"),
            endpoint=env.string("OSS_ENDPOINT"),
            bucket_name=env.string("OSS_BUCKET_NAME"),
            prefix=env.string("OSS_PREFIX"),
            download_url=resolve_download_url(env, "OSS_DOWNLOAD_URL"),
        ),
        tencentcloud=TencentCloudStorageConfig(
            access_key_id=env.string("COS_ACCESS_KEY_ID"),
            secret_access_key=env.string("COS_SECRET_ACCESS_KEY"),
            bucket_name=env.string("COS_BUCKET_NAME"),
            region=env.string("COS_REGION"),
            download_url=resolve_download_url(env, "COS_DOWNLOAD_URL"),
        ),
    )
