from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterator

from bucketstore.common.cancellation import (
    CancellationToken,
    OperationCancelledError,
    raise_if_cancelled,
)
from bucketstore.domain.models import FileSpec
from bucketstore.domain.search_criteria import get_search_criteria
from bucketstore.infra.storage.client import (
    EmptyBucketError,
    ListedObject,
    NotFoundError,
    ObjectStoreClient,
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def as_utc(value: datetime | str | None) -> datetime:
    if value is None:
        return _EPOCH
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_file_spec(entry: ListedObject) -> FileSpec:
    modified = as_utc(entry.last_modified)
    return FileSpec(path=entry.key, size=int(entry.size), created=modified, modified=modified)


class ObjectLister:
    """Streams the objects matching a search pattern, in remote order.

    Each call starts a fresh remote enumeration; the returned iterator is
    single-pass.
    """

    def __init__(
        self,
        client: ObjectStoreClient,
        bucket: str,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._bucket = bucket
        self._logger = logger or logging.getLogger(__name__)

    def list(
        self,
        search_pattern: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Iterator[FileSpec]:
        criteria = get_search_criteria(search_pattern)
        raise_if_cancelled(cancellation)
        try:
            entries = self._client.list_objects(
                self._bucket, criteria.prefix, recursive=True
            )
            for entry in entries:
                raise_if_cancelled(cancellation)
                if entry.is_dir:
                    continue
                if not criteria.matches(entry.key):
                    continue
                yield to_file_spec(entry)
        except OperationCancelledError:
            raise
        except (EmptyBucketError, NotFoundError):
            return
        except Exception:
            self._logger.error(
                "Error trying to find files: %s",
                search_pattern,
                exc_info=True,
                extra={"extra": {"search_pattern": search_pattern}},
            )
            raise
