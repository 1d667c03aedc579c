"""File storage service over a bucket-oriented object store.

This module provides the public file operations (get, save, copy, rename,
delete, list) and translates remote failures into plain results: reads
return None for missing objects, mutations return False instead of raising,
and listings only raise for errors that cannot mean "no results".
"""

from __future__ import annotations

import io
import logging
import time
from contextlib import closing
from itertools import islice
from typing import TYPE_CHECKING

from bucketstore.common.cancellation import (
    CancellationToken,
    OperationCancelledError,
    raise_if_cancelled,
)
from bucketstore.common.config import Settings, get_settings
from bucketstore.domain.models import FileSpec
from bucketstore.domain.paths import normalize_path
from bucketstore.infra.observability.metrics import (
    STORAGE_DELETED_OBJECTS,
    STORAGE_LATENCY,
    STORAGE_OPERATIONS,
)
from bucketstore.infra.storage.client import NotFoundError, ObjectStoreClient
from bucketstore.services.batch_delete import DEFAULT_DELETE_PAGE_SIZE, BatchDeleter
from bucketstore.services.listing import ObjectLister, as_utc
from bucketstore.services.paging import PageCursor, Pager
from bucketstore.services.provisioning import BucketProvisioner
from bucketstore.services.staging import StreamStager, UploadSource

if TYPE_CHECKING:
    from bucketstore.infra.storage.s3_client import S3ObjectStoreClient

DEFAULT_PAGE_SIZE = 100


class StorageBackendNotConfiguredError(Exception):
    """Raised when the storage backend is not properly configured."""


def _require_path(value: str | None, name: str) -> str:
    if not value:
        raise ValueError(f"{name} is required")
    return normalize_path(value)


class FileStorage:
    """Provider-agnostic file operations backed by one bucket.

    Every operation first makes sure the bucket exists (when auto-create is
    enabled); provisioning failures are raised, not translated.
    """

    def __init__(
        self,
        client: ObjectStoreClient,
        *,
        bucket: str,
        auto_create_bucket: bool = False,
        delete_page_size: int = DEFAULT_DELETE_PAGE_SIZE,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        enable_metrics: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        if not bucket:
            raise ValueError("bucket is required")
        self._client = client
        self._bucket = bucket
        self._logger = logger or logging.getLogger(__name__)
        self._default_page_size = default_page_size
        self._enable_metrics = enable_metrics
        self._provisioner = BucketProvisioner(
            client, bucket, auto_create=auto_create_bucket, logger=self._logger
        )
        self._stager = StreamStager()
        self._lister = ObjectLister(client, bucket, logger=self._logger)
        self._pager = Pager(self._lister)
        self._deleter = BatchDeleter(
            client,
            bucket,
            self._pager,
            page_size=delete_page_size,
            logger=self._logger,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        client: ObjectStoreClient | None = None,
        logger: logging.Logger | None = None,
    ) -> "FileStorage":
        settings = settings or get_settings()
        return cls(
            client or cls._build_storage_client(settings),
            bucket=settings.S3_BUCKET,
            auto_create_bucket=settings.STORAGE_AUTO_CREATE_BUCKET,
            delete_page_size=settings.STORAGE_DELETE_PAGE_SIZE,
            default_page_size=settings.STORAGE_DEFAULT_PAGE_SIZE,
            enable_metrics=settings.ENABLE_METRICS,
            logger=logger,
        )

    @staticmethod
    def _build_storage_client(settings: Settings) -> "S3ObjectStoreClient":
        """Build the S3-compatible client from configuration."""
        from bucketstore.infra.storage.s3_client import S3ObjectStoreClient

        if not settings.S3_ACCESS_KEY_ID or not settings.S3_SECRET_ACCESS_KEY:
            raise StorageBackendNotConfiguredError(
                "S3_ACCESS_KEY_ID and S3_SECRET_ACCESS_KEY are required"
            )
        return S3ObjectStoreClient(settings=settings)

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def client(self) -> ObjectStoreClient:
        return self._client

    def _record(self, operation: str, outcome: str, started: float) -> None:
        if not self._enable_metrics:
            return
        STORAGE_OPERATIONS.labels(operation, outcome).inc()
        STORAGE_LATENCY.labels(operation).observe(time.perf_counter() - started)

    def ensure_bucket_exists(self, cancellation: CancellationToken | None = None) -> None:
        self._provisioner.ensure_exists(cancellation)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_file_stream(
        self,
        path: str,
        cancellation: CancellationToken | None = None,
    ) -> io.BytesIO | None:
        """Download an object into memory.

        Returns:
            A stream positioned at 0, or None if the object could not be read.
        """
        key = _require_path(path, "path")
        self.ensure_bucket_exists(cancellation)
        started = time.perf_counter()

        buffer = io.BytesIO()

        def on_chunk(chunk: bytes) -> None:
            raise_if_cancelled(cancellation)
            buffer.write(chunk)

        try:
            raise_if_cancelled(cancellation)
            self._client.get_object(self._bucket, key, on_chunk)
        except OperationCancelledError:
            buffer.close()
            raise
        except NotFoundError:
            buffer.close()
            self._logger.debug(
                "File not found: %s", key, extra={"extra": {"path": key}}
            )
            self._record("get", "not_found", started)
            return None
        except Exception:
            buffer.close()
            self._logger.debug(
                "Error trying to get file stream: %s",
                key,
                exc_info=True,
                extra={"extra": {"path": key}},
            )
            self._record("get", "error", started)
            return None

        buffer.seek(0)
        self._record("get", "ok", started)
        return buffer

    def get_file_contents(
        self,
        path: str,
        cancellation: CancellationToken | None = None,
    ) -> bytes | None:
        stream = self.get_file_stream(path, cancellation)
        if stream is None:
            return None
        with stream:
            return stream.getvalue()

    def get_file_info(self, path: str) -> FileSpec | None:
        key = _require_path(path, "path")
        self.ensure_bucket_exists()

        try:
            stat = self._client.stat_object(self._bucket, key)
        except Exception:
            self._logger.debug(
                "Unable to get file info for %s",
                key,
                exc_info=True,
                extra={"extra": {"path": key}},
            )
            return None

        modified = as_utc(stat.last_modified)
        return FileSpec(path=key, size=int(stat.size), created=modified, modified=modified)

    def exists(self, path: str) -> bool:
        key = _require_path(path, "path")
        self.ensure_bucket_exists()

        try:
            self._client.stat_object(self._bucket, key)
        except NotFoundError:
            return False
        return True

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def save_file(
        self,
        path: str,
        data: UploadSource,
        cancellation: CancellationToken | None = None,
    ) -> bool:
        """Upload data to path.

        Args:
            path: Target object path.
            data: Bytes, text (stored as UTF-8) or a binary stream. Seekable
                streams are uploaded from their current position.

        Returns:
            True on success, False if the upload failed.
        """
        key = _require_path(path, "path")
        if data is None:
            raise ValueError("data is required")
        self.ensure_bucket_exists(cancellation)
        started = time.perf_counter()

        try:
            with self._stager.stage(data) as staged:
                raise_if_cancelled(cancellation)
                self._client.put_object(self._bucket, key, staged.stream, staged.length)
        except OperationCancelledError:
            raise
        except Exception:
            self._logger.error(
                "Error trying to save file: %s",
                key,
                exc_info=True,
                extra={"extra": {"path": key}},
            )
            self._record("save", "error", started)
            return False

        self._record("save", "ok", started)
        return True

    def copy_file(
        self,
        path: str,
        target_path: str,
        cancellation: CancellationToken | None = None,
    ) -> bool:
        source = _require_path(path, "path")
        target = _require_path(target_path, "target_path")
        self.ensure_bucket_exists(cancellation)
        started = time.perf_counter()

        try:
            raise_if_cancelled(cancellation)
            self._client.copy_object(self._bucket, source, self._bucket, target)
        except OperationCancelledError:
            raise
        except Exception:
            self._logger.error(
                "Error trying to copy file %s to %s.",
                source,
                target,
                exc_info=True,
                extra={"extra": {"path": source, "target_path": target}},
            )
            self._record("copy", "error", started)
            return False

        self._record("copy", "ok", started)
        return True

    def rename_file(
        self,
        path: str,
        new_path: str,
        cancellation: CancellationToken | None = None,
    ) -> bool:
        """Copy path to new_path, then delete path.

        Not atomic: when the delete fails after a successful copy, False is
        returned and both objects exist.
        """
        source = _require_path(path, "path")
        target = _require_path(new_path, "new_path")
        self.ensure_bucket_exists(cancellation)

        return self.copy_file(source, target, cancellation) and self.delete_file(
            source, cancellation
        )

    def delete_file(
        self,
        path: str,
        cancellation: CancellationToken | None = None,
    ) -> bool:
        key = _require_path(path, "path")
        self.ensure_bucket_exists(cancellation)
        started = time.perf_counter()

        try:
            raise_if_cancelled(cancellation)
            self._client.remove_object(self._bucket, key)
        except OperationCancelledError:
            raise
        except Exception:
            self._logger.debug(
                "Error trying to delete file: %s.",
                key,
                exc_info=True,
                extra={"extra": {"path": key}},
            )
            self._record("delete", "error", started)
            return False

        self._record("delete", "ok", started)
        return True

    def delete_files(
        self,
        search_pattern: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> int:
        """Delete every object matching search_pattern.

        Returns:
            Number of objects deleted, excluding removals the store rejected.
        """
        self.ensure_bucket_exists(cancellation)
        started = time.perf_counter()

        try:
            deleted = self._deleter.delete_matching(search_pattern, cancellation)
        except OperationCancelledError:
            raise
        except Exception:
            self._record("delete_many", "error", started)
            raise

        if self._enable_metrics:
            STORAGE_DELETED_OBJECTS.inc(deleted)
        self._record("delete_many", "ok", started)
        return deleted

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def get_file_list(
        self,
        search_pattern: str | None = None,
        limit: int | None = None,
        skip: int | None = None,
        cancellation: CancellationToken | None = None,
    ) -> list[FileSpec]:
        if limit is not None and limit <= 0:
            return []
        self.ensure_bucket_exists(cancellation)

        start = max(0, skip or 0)
        stop = start + limit if limit is not None else None
        with closing(self._lister.list(search_pattern, cancellation)) as entries:
            return list(islice(entries, start, stop))

    def get_paged_file_list(
        self,
        page_size: int | None = None,
        search_pattern: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> PageCursor:
        """Return the first page of matches; advance with PageCursor.fetch_next."""
        size = self._default_page_size if page_size is None else page_size
        if size <= 0:
            return self._pager.first_page(search_pattern, size, cancellation)

        self.ensure_bucket_exists(cancellation)
        started = time.perf_counter()
        try:
            cursor = self._pager.first_page(
                normalize_path(search_pattern), size, cancellation
            )
        except OperationCancelledError:
            raise
        except Exception:
            self._record("list", "error", started)
            raise
        self._record("list", "ok", started)
        return cursor
