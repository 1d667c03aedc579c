from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from bucketstore.common.connection_string import DEFAULT_BUCKET, ConnectionString

ENV_FILE = Path(".env")


def _load_env_file() -> None:
    if not ENV_FILE.exists():
        return
    for raw_line in ENV_FILE.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


@dataclass
class Settings:
    STORAGE_CONNECTION_STRING: str | None = None
    S3_ENDPOINT_URL: str | None = None
    S3_REGION: str | None = None
    S3_ACCESS_KEY_ID: str | None = None
    S3_SECRET_ACCESS_KEY: str | None = None
    S3_BUCKET: str = DEFAULT_BUCKET
    S3_USE_SSL: bool = False
    S3_ADDRESSING_STYLE: str = "path"
    STORAGE_AUTO_CREATE_BUCKET: bool = False
    STORAGE_DELETE_PAGE_SIZE: int = 250
    STORAGE_DEFAULT_PAGE_SIZE: int = 100
    ENABLE_METRICS: bool = True

    def __post_init__(self) -> None:
        if self.STORAGE_CONNECTION_STRING:
            self._apply_connection_string(
                ConnectionString.parse(self.STORAGE_CONNECTION_STRING)
            )
        if self.STORAGE_DELETE_PAGE_SIZE <= 0:
            raise ValueError("STORAGE_DELETE_PAGE_SIZE must be positive.")
        if not self.S3_BUCKET:
            raise ValueError("S3_BUCKET must not be empty.")

    def _apply_connection_string(self, parsed: ConnectionString) -> None:
        # Connection string values win over the individual S3_* variables
        if parsed.access_key:
            self.S3_ACCESS_KEY_ID = parsed.access_key
        if parsed.secret_key:
            self.S3_SECRET_ACCESS_KEY = parsed.secret_key
        if parsed.region:
            self.S3_REGION = parsed.region
        if parsed.endpoint:
            self.S3_ENDPOINT_URL = parsed.endpoint_url
            self.S3_USE_SSL = parsed.secure
        self.S3_BUCKET = parsed.bucket

    @classmethod
    def from_environment(cls) -> "Settings":
        _load_env_file()
        return cls(
            STORAGE_CONNECTION_STRING=os.environ.get("STORAGE_CONNECTION_STRING"),
            S3_ENDPOINT_URL=os.environ.get("S3_ENDPOINT_URL"),
            S3_REGION=os.environ.get("S3_REGION"),
            S3_ACCESS_KEY_ID=os.environ.get("S3_ACCESS_KEY_ID"),
            S3_SECRET_ACCESS_KEY=os.environ.get("S3_SECRET_ACCESS_KEY"),
            S3_BUCKET=os.environ.get("S3_BUCKET", cls.S3_BUCKET),
            S3_USE_SSL=_as_bool(os.environ.get("S3_USE_SSL"), cls.S3_USE_SSL),
            S3_ADDRESSING_STYLE=os.environ.get(
                "S3_ADDRESSING_STYLE", cls.S3_ADDRESSING_STYLE
            ),
            STORAGE_AUTO_CREATE_BUCKET=_as_bool(
                os.environ.get("STORAGE_AUTO_CREATE_BUCKET"),
                cls.STORAGE_AUTO_CREATE_BUCKET,
            ),
            STORAGE_DELETE_PAGE_SIZE=int(
                os.environ.get("STORAGE_DELETE_PAGE_SIZE", cls.STORAGE_DELETE_PAGE_SIZE)
            ),
            STORAGE_DEFAULT_PAGE_SIZE=int(
                os.environ.get(
                    "STORAGE_DEFAULT_PAGE_SIZE", cls.STORAGE_DEFAULT_PAGE_SIZE
                )
            ),
            ENABLE_METRICS=_as_bool(
                os.environ.get("ENABLE_METRICS"), cls.ENABLE_METRICS
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_environment()
