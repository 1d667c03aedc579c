"""Uniform file operations over bucket-oriented object stores."""

from bucketstore.common.cancellation import CancellationToken, OperationCancelledError
from bucketstore.domain import FileSpec, SearchCriteria, get_search_criteria, normalize_path
from bucketstore.infra.storage import ObjectStoreClient, StorageError
from bucketstore.services import FileStorage, PageCursor

__all__ = [
    "CancellationToken",
    "FileSpec",
    "FileStorage",
    "ObjectStoreClient",
    "OperationCancelledError",
    "PageCursor",
    "SearchCriteria",
    "StorageError",
    "get_search_criteria",
    "normalize_path",
]
