from __future__ import annotations

import logging
from threading import Lock

from bucketstore.common.cancellation import CancellationToken, raise_if_cancelled
from bucketstore.infra.storage.client import ObjectStoreClient


class BucketProvisioner:
    """Makes sure the bucket exists before the first remote access.

    The result is cached for the lifetime of the instance and never
    re-validated, so a bucket deleted externally afterwards goes unnoticed.
    Two processes provisioning the same bucket may both attempt creation;
    clients must treat creating an existing bucket as a no-op.
    """

    def __init__(
        self,
        client: ObjectStoreClient,
        bucket: str,
        *,
        auto_create: bool,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._bucket = bucket
        self._auto_create = auto_create
        self._logger = logger or logging.getLogger(__name__)
        self._confirmed = False
        self._lock = Lock()

    @property
    def confirmed(self) -> bool:
        return self._confirmed

    def ensure_exists(self, cancellation: CancellationToken | None = None) -> None:
        if not self._auto_create or self._confirmed:
            return

        with self._lock:
            if self._confirmed:
                return
            raise_if_cancelled(cancellation)
            if not self._client.bucket_exists(self._bucket):
                raise_if_cancelled(cancellation)
                self._logger.info(
                    "Creating bucket %s",
                    self._bucket,
                    extra={"extra": {"bucket": self._bucket}},
                )
                self._client.create_bucket(self._bucket)
            self._confirmed = True
