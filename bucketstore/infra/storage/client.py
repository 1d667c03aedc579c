"""Object store client protocol and data types.

This module defines the narrow interface the storage services consume from a
bucket-oriented remote object store, plus the error vocabulary adapters use
to report remote failures.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Callable, Iterable, Iterator, Protocol


class StorageError(RuntimeError):
    """Raised when object storage operations fail."""


class NotFoundError(StorageError):
    """Base for errors signalling that a bucket or object is absent."""


class ObjectNotFoundError(NotFoundError):
    """Raised when the requested object does not exist."""


class BucketNotFoundError(NotFoundError):
    """Raised when the bucket does not exist."""


class EmptyBucketError(StorageError):
    """Raised by stores that signal an empty bucket as an error while listing."""


@dataclass(frozen=True, slots=True)
class ObjectStat:
    """Metadata from a stat (HEAD) request."""

    size: int
    last_modified: datetime


@dataclass(frozen=True, slots=True)
class ListedObject:
    """A raw entry produced by a remote enumeration."""

    key: str
    is_dir: bool
    size: int
    last_modified: datetime | str | None


@dataclass(frozen=True, slots=True)
class DeleteError:
    """A single failed removal reported by a batch delete."""

    key: str
    message: str


class ObjectStoreClient(Protocol):
    """Protocol defining the remote calls the storage services rely on.

    Implementations raise StorageError (or one of its subclasses) for every
    remote failure.
    """

    def bucket_exists(self, bucket: str) -> bool:
        """Return True if the bucket exists."""
        ...

    def create_bucket(self, bucket: str) -> None:
        """Create the bucket.

        Creating a bucket that already exists must be a no-op.
        """
        ...

    def stat_object(self, bucket: str, key: str) -> ObjectStat:
        """Get object metadata without downloading the content.

        Raises:
            ObjectNotFoundError: If the object does not exist.
            BucketNotFoundError: If the bucket does not exist.
        """
        ...

    def get_object(
        self, bucket: str, key: str, on_chunk: Callable[[bytes], None]
    ) -> None:
        """Stream the object content to on_chunk, one chunk at a time."""
        ...

    def put_object(self, bucket: str, key: str, data: BinaryIO, length: int) -> None:
        """Upload length bytes read from the current position of data."""
        ...

    def copy_object(
        self, bucket: str, src_key: str, dst_bucket: str, dst_key: str
    ) -> None:
        """Server-side copy of an object."""
        ...

    def remove_object(self, bucket: str, key: str) -> None:
        """Remove a single object."""
        ...

    def remove_objects(self, bucket: str, keys: Iterable[str]) -> Iterator[DeleteError]:
        """Remove many objects, yielding only the removals that failed."""
        ...

    def list_objects(
        self, bucket: str, prefix: str, recursive: bool = True
    ) -> Iterator[ListedObject]:
        """Lazily enumerate entries whose key starts with prefix."""
        ...
