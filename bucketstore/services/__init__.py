from .batch_delete import BatchDeleter
from .file_storage import FileStorage, StorageBackendNotConfiguredError
from .listing import ObjectLister
from .paging import PageCursor, PageRequest, Pager
from .provisioning import BucketProvisioner
from .staging import StagedStream, StreamStager

__all__ = [
    "BatchDeleter",
    "BucketProvisioner",
    "FileStorage",
    "ObjectLister",
    "PageCursor",
    "PageRequest",
    "Pager",
    "StagedStream",
    "StorageBackendNotConfiguredError",
    "StreamStager",
]
