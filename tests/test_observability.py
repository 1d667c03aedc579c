import pytest
from prometheus_client import REGISTRY, generate_latest

from bucketstore.infra.observability import metrics  # noqa: F401
from bucketstore.infra.storage.client import StorageError
from bucketstore.services.file_storage import FileStorage
from tests.services.mock_storage import MockObjectStoreClient


def sample(name: str, **labels: str) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def build_storage(enable_metrics: bool = True) -> FileStorage:
    client = MockObjectStoreClient()
    client.seed("metrics-bucket", ["a.txt", "b.txt", "c.txt"])
    return FileStorage(client, bucket="metrics-bucket", enable_metrics=enable_metrics)


def test_operation_outcome_labels():
    storage = build_storage()
    ok_before = sample("storage_operations_total", operation="get", outcome="ok")
    missing_before = sample(
        "storage_operations_total", operation="get", outcome="not_found"
    )

    storage.get_file_stream("a.txt")
    storage.get_file_stream("missing.txt")

    assert sample("storage_operations_total", operation="get", outcome="ok") == ok_before + 1
    assert (
        sample("storage_operations_total", operation="get", outcome="not_found")
        == missing_before + 1
    )


def test_latency_metric_present():
    storage = build_storage()
    before = sample("storage_operation_duration_seconds_count", operation="save")

    storage.save_file("new.txt", b"payload")

    assert sample("storage_operation_duration_seconds_count", operation="save") == before + 1
    # path values never become label values
    assert b"new.txt" not in generate_latest(REGISTRY)


def test_deleted_objects_counter():
    storage = build_storage()
    before = sample("storage_deleted_objects_total")

    assert storage.delete_files("*.txt") == 3

    assert sample("storage_deleted_objects_total") == before + 3


def test_metrics_can_be_disabled():
    storage = build_storage(enable_metrics=False)
    before = sample("storage_operations_total", operation="copy", outcome="ok")

    storage.copy_file("a.txt", "d.txt")

    assert sample("storage_operations_total", operation="copy", outcome="ok") == before


def test_listing_failures_record_error_outcome():
    storage = build_storage()
    storage.client.list_error = StorageError("throttled")
    list_before = sample("storage_operations_total", operation="list", outcome="error")
    delete_before = sample(
        "storage_operations_total", operation="delete_many", outcome="error"
    )

    with pytest.raises(StorageError):
        storage.get_paged_file_list(10)
    with pytest.raises(StorageError):
        storage.delete_files("*.txt")

    assert (
        sample("storage_operations_total", operation="list", outcome="error")
        == list_before + 1
    )
    assert (
        sample("storage_operations_total", operation="delete_many", outcome="error")
        == delete_before + 1
    )
