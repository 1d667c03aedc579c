"""S3-compatible object store client implementation.

This module provides an S3-compatible client that works with AWS S3, MinIO,
and other S3-compatible object storage services.

Dependencies:
    - boto3
    - botocore
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, BinaryIO, Callable, Iterable, Iterator

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from bucketstore.infra.storage.client import (
    BucketNotFoundError,
    DeleteError,
    ListedObject,
    ObjectNotFoundError,
    ObjectStat,
    StorageError,
)

if TYPE_CHECKING:
    from bucketstore.common.config import Settings

# DeleteObjects accepts at most this many keys per request
MAX_DELETE_KEYS = 1000
DEFAULT_CHUNK_SIZE = 64 * 1024

_OBJECT_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}
_BUCKET_MISSING_CODES = {"NoSuchBucket"}
_BUCKET_ALREADY_CODES = {"BucketAlreadyOwnedByYou", "BucketAlreadyExists"}


def _error_code(exc: BaseException) -> str:
    if isinstance(exc, ClientError):
        return str(exc.response.get("Error", {}).get("Code", ""))
    return ""


def _translate(exc: Exception, message: str) -> StorageError:
    """Map a boto error to the storage error vocabulary."""
    code = _error_code(exc)
    if code in _BUCKET_MISSING_CODES:
        return BucketNotFoundError(f"{message}: {exc}")
    if code in _OBJECT_MISSING_CODES:
        return ObjectNotFoundError(f"{message}: {exc}")
    return StorageError(f"{message}: {exc}")


class S3ObjectStoreClient:
    """S3-compatible object store client.

    Supports AWS S3, MinIO, and other S3-compatible services.
    Uses boto3 for all remote calls.
    """

    def __init__(self, *, settings: "Settings") -> None:
        """Initialize the S3 client with configuration from settings.

        Args:
            settings: Application settings containing S3 configuration.
        """
        self._settings = settings
        self._region = settings.S3_REGION
        self._client = self._build_client(settings)

    @staticmethod
    def _build_client(settings: "Settings") -> Any:
        """Create a boto3 S3 client from settings."""
        addressing_style = (settings.S3_ADDRESSING_STYLE or "path").strip().lower()
        config = Config(s3={"addressing_style": addressing_style})

        return boto3.client(
            "s3",
            endpoint_url=settings.S3_ENDPOINT_URL,
            region_name=settings.S3_REGION,
            aws_access_key_id=settings.S3_ACCESS_KEY_ID,
            aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
            use_ssl=bool(settings.S3_USE_SSL),
            config=config,
        )

    def bucket_exists(self, bucket: str) -> bool:
        """Check bucket existence with a HEAD request."""
        try:
            self._client.head_bucket(Bucket=bucket)
        except ClientError as exc:
            code = _error_code(exc)
            if code in _OBJECT_MISSING_CODES or code in _BUCKET_MISSING_CODES:
                return False
            raise StorageError(f"Failed to check bucket: {exc}") from exc
        except Exception as exc:
            raise StorageError(f"Failed to check bucket: {exc}") from exc
        return True

    def create_bucket(self, bucket: str) -> None:
        """Create a bucket, treating an already-owned bucket as success."""
        params: dict[str, Any] = {"Bucket": bucket}
        # us-east-1 rejects an explicit LocationConstraint
        if self._region and self._region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": self._region}

        try:
            self._client.create_bucket(**params)
        except ClientError as exc:
            if _error_code(exc) in _BUCKET_ALREADY_CODES:
                return
            raise StorageError(f"Failed to create bucket: {exc}") from exc
        except Exception as exc:
            raise StorageError(f"Failed to create bucket: {exc}") from exc

    def stat_object(self, bucket: str, key: str) -> ObjectStat:
        """Get object metadata without downloading the content."""
        try:
            response = self._client.head_object(Bucket=bucket, Key=key)
        except Exception as exc:
            raise _translate(exc, "Failed to get object metadata") from exc

        size = response.get("ContentLength")
        last_modified = response.get("LastModified") or datetime.now(timezone.utc)
        return ObjectStat(
            size=int(size) if size is not None else 0,
            last_modified=last_modified,
        )

    def get_object(
        self,
        bucket: str,
        key: str,
        on_chunk: Callable[[bytes], None],
    ) -> None:
        """Download an object, handing each body chunk to on_chunk."""
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
        except Exception as exc:
            raise _translate(exc, "Failed to get object") from exc

        body = response["Body"]
        try:
            for chunk in body.iter_chunks(DEFAULT_CHUNK_SIZE):
                if chunk:
                    on_chunk(chunk)
        except (ClientError, BotoCoreError) as exc:
            raise _translate(exc, "Failed to read object body") from exc
        finally:
            body.close()

    def put_object(self, bucket: str, key: str, data: BinaryIO, length: int) -> None:
        """Upload an object from the current position of data."""
        try:
            self._client.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentLength=int(length),
            )
        except Exception as exc:
            raise _translate(exc, "Failed to put object") from exc

    def copy_object(
        self,
        bucket: str,
        src_key: str,
        dst_bucket: str,
        dst_key: str,
    ) -> None:
        """Server-side copy of an object."""
        try:
            self._client.copy_object(
                Bucket=dst_bucket,
                Key=dst_key,
                CopySource={"Bucket": bucket, "Key": src_key},
            )
        except Exception as exc:
            raise _translate(exc, "Failed to copy object") from exc

    def remove_object(self, bucket: str, key: str) -> None:
        """Delete an object from storage."""
        try:
            self._client.delete_object(Bucket=bucket, Key=key)
        except Exception as exc:
            raise _translate(exc, "Failed to delete object") from exc

    def remove_objects(self, bucket: str, keys: Iterable[str]) -> Iterator[DeleteError]:
        """Delete objects in batches, yielding the keys S3 failed to delete.

        A request that fails as a whole reports every key it carried.
        """
        key_list = list(keys)
        for start in range(0, len(key_list), MAX_DELETE_KEYS):
            chunk = key_list[start : start + MAX_DELETE_KEYS]
            try:
                response = self._client.delete_objects(
                    Bucket=bucket,
                    Delete={
                        "Objects": [{"Key": key} for key in chunk],
                        "Quiet": True,
                    },
                )
            except Exception as exc:
                for key in chunk:
                    yield DeleteError(key=key, message=str(exc))
                continue

            for error in response.get("Errors") or []:
                yield DeleteError(
                    key=str(error.get("Key", "")),
                    message=str(error.get("Message") or error.get("Code") or ""),
                )

    def list_objects(
        self,
        bucket: str,
        prefix: str,
        recursive: bool = True,
    ) -> Iterator[ListedObject]:
        """Enumerate objects under prefix using the list_objects_v2 paginator."""
        params: dict[str, Any] = {"Bucket": bucket, "Prefix": prefix or ""}
        if not recursive:
            params["Delimiter"] = "/"

        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(**params):
                for common in page.get("CommonPrefixes") or []:
                    yield ListedObject(
                        key=common["Prefix"],
                        is_dir=True,
                        size=0,
                        last_modified=None,
                    )
                for obj in page.get("Contents") or []:
                    key = obj["Key"]
                    yield ListedObject(
                        key=key,
                        is_dir=key.endswith("/"),
                        size=int(obj.get("Size") or 0),
                        last_modified=obj.get("LastModified"),
                    )
        except (ClientError, BotoCoreError) as exc:
            raise _translate(exc, "Failed to list objects") from exc
