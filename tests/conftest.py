from __future__ import annotations

import logging

import pytest

from bucketstore.common.config import get_settings
from bucketstore.services.file_storage import FileStorage
from tests.services.mock_storage import MockObjectStoreClient

BUCKET = "test-bucket"


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch, tmp_path):
    # keep a developer's local .env out of the tests
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def mock_client():
    client = MockObjectStoreClient()
    client.buckets[BUCKET] = {}
    return client


@pytest.fixture()
def storage_logger():
    return logging.getLogger("tests.storage")


@pytest.fixture()
def storage(mock_client, storage_logger):
    return FileStorage(mock_client, bucket=BUCKET, logger=storage_logger)
