from __future__ import annotations

import logging

from bucketstore.common.cancellation import (
    CancellationToken,
    OperationCancelledError,
    raise_if_cancelled,
)
from bucketstore.domain.models import FileSpec
from bucketstore.domain.paths import normalize_path
from bucketstore.infra.storage.client import ObjectStoreClient
from bucketstore.services.paging import Pager

DEFAULT_DELETE_PAGE_SIZE = 250


class BatchDeleter:
    """Deletes every object matching a search pattern, page by page.

    Failures reported for individual keys are logged and subtracted from the
    result; they never stop the remaining pages from being processed.
    """

    def __init__(
        self,
        client: ObjectStoreClient,
        bucket: str,
        pager: Pager,
        *,
        page_size: int = DEFAULT_DELETE_PAGE_SIZE,
        logger: logging.Logger | None = None,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._client = client
        self._bucket = bucket
        self._pager = pager
        self._page_size = page_size
        self._logger = logger or logging.getLogger(__name__)

    def delete_matching(
        self,
        search_pattern: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> int:
        """Delete all matches of search_pattern.

        Each key is submitted at most once. A page holding only keys that were
        already submitted (a store whose listing lags behind its deletes) is
        stepped over instead of being removed again.

        Returns:
            The number of objects removed, net of reported failures.
        """
        cursor = self._pager.first_page(search_pattern, self._page_size, cancellation)
        if not cursor.items:
            return 0

        submitted: set[str] = set()
        deleted = 0
        while True:
            fresh = tuple(
                spec for spec in cursor.items if spec.path not in submitted
            )
            removed = 0
            if fresh:
                submitted.update(spec.path for spec in fresh)
                removed = len(fresh) - self._remove_page(fresh, cancellation)
                deleted += removed
            if cursor.continuation is None:
                break
            # Removed keys drop out of the listing, shifting the survivors forward
            cursor = self._pager.fetch_page(
                cursor.continuation.rewind(removed), cancellation
            )
            if not cursor.items:
                break

        return deleted

    def _remove_page(
        self,
        items: tuple[FileSpec, ...],
        cancellation: CancellationToken | None,
    ) -> int:
        """Remove one page of objects and return how many removals failed."""
        raise_if_cancelled(cancellation)
        keys = [normalize_path(spec.path) for spec in items]

        failed = 0
        try:
            for error in self._client.remove_objects(self._bucket, keys):
                failed += 1
                self._logger.error(
                    "Error trying to delete file %s: %s",
                    error.key,
                    error.message,
                    extra={"extra": {"path": error.key, "error": error.message}},
                )
        except OperationCancelledError:
            raise
        except Exception:
            # The whole batch counts as not deleted
            self._logger.error(
                "Error trying to delete %d files",
                len(keys),
                exc_info=True,
                extra={"extra": {"count": len(keys)}},
            )
            return len(keys)

        return min(failed, len(keys))
