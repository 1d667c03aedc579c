from __future__ import annotations

from datetime import datetime, timezone

import pytest

from bucketstore.common.cancellation import CancellationToken, OperationCancelledError
from bucketstore.infra.storage.client import (
    BucketNotFoundError,
    EmptyBucketError,
    ListedObject,
    ObjectNotFoundError,
    StorageError,
)
from bucketstore.services.listing import ObjectLister, as_utc, to_file_spec
from tests.conftest import BUCKET


@pytest.fixture()
def lister(mock_client):
    return ObjectLister(mock_client, BUCKET)


def test_lists_all_objects_in_remote_order(lister, mock_client):
    mock_client.seed(BUCKET, ["b.txt", "a.txt", "x/c.txt"])

    assert [spec.path for spec in lister.list()] == ["a.txt", "b.txt", "x/c.txt"]


def test_listing_is_lazy(lister, mock_client):
    mock_client.seed(BUCKET, ["a.txt"])

    entries = lister.list()

    assert mock_client.call_count("list_objects") == 0
    assert next(entries).path == "a.txt"
    assert mock_client.call_count("list_objects") == 1


def test_uses_prefix_and_pattern(lister, mock_client):
    mock_client.seed(BUCKET, ["a/b/c.txt", "a/b/c/d.txt", "a/b/e.csv", "z.txt"])

    paths = [spec.path for spec in lister.list("a\\b\\*.txt")]

    assert paths == ["a/b/c.txt"]
    assert mock_client.calls[-1] == ("list_objects", (BUCKET, "a/b", True))


def test_skips_directory_markers(lister, mock_client):
    mock_client.seed(BUCKET, ["x/hello.txt"])
    mock_client.directory_markers.add("x/")

    assert [spec.path for spec in lister.list()] == ["x/hello.txt"]


@pytest.mark.parametrize(
    "error",
    [EmptyBucketError("empty"), BucketNotFoundError("gone"), ObjectNotFoundError("gone")],
)
def test_empty_or_missing_container_yields_nothing(lister, mock_client, error):
    mock_client.list_error = error

    assert list(lister.list("*")) == []


def test_other_errors_propagate_and_are_logged(mock_client, caplog):
    lister = ObjectLister(mock_client, BUCKET)
    mock_client.list_error = StorageError("connection reset")

    with caplog.at_level("ERROR"):
        with pytest.raises(StorageError, match="connection reset"):
            list(lister.list("logs/*"))

    records = [rec for rec in caplog.records if "Error trying to find files" in rec.getMessage()]
    assert records
    assert records[-1].extra == {"search_pattern": "logs/*"}


def test_cancellation_aborts_listing(lister, mock_client):
    mock_client.seed(BUCKET, ["a.txt", "b.txt"])
    token = CancellationToken()
    entries = lister.list(cancellation=token)

    assert next(entries).path == "a.txt"
    token.cancel()

    with pytest.raises(OperationCancelledError):
        next(entries)


def test_file_spec_conversion_uses_utc():
    naive = ListedObject(
        key="a.txt", is_dir=False, size=7, last_modified=datetime(2024, 1, 2, 3, 4, 5)
    )

    spec = to_file_spec(naive)

    assert spec.size == 7
    assert spec.created == spec.modified
    assert spec.modified == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_as_utc_parses_strings():
    assert as_utc("2024-01-02T03:04:05Z") == datetime(
        2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc
    )
    assert as_utc(None).year == 1970
