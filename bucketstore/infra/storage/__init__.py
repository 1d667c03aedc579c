"""Object storage abstraction layer.

This module provides a protocol-based abstraction for remote object stores,
with an S3-compatible implementation that also serves MinIO.
"""

from .client import (
    BucketNotFoundError,
    DeleteError,
    EmptyBucketError,
    ListedObject,
    NotFoundError,
    ObjectNotFoundError,
    ObjectStat,
    ObjectStoreClient,
    StorageError,
)

__all__ = [
    "BucketNotFoundError",
    "DeleteError",
    "EmptyBucketError",
    "ListedObject",
    "NotFoundError",
    "ObjectNotFoundError",
    "ObjectStat",
    "ObjectStoreClient",
    "StorageError",
]
