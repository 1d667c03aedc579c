from prometheus_client import Counter, Histogram

# Low-cardinality labels: the operation name and a fixed outcome set, never the path
STORAGE_OPERATIONS = Counter(
    "storage_operations_total",
    "Total storage operations",
    ["operation", "outcome"],
)

STORAGE_LATENCY = Histogram(
    "storage_operation_duration_seconds",
    "Storage operation latency in seconds",
    ["operation"],
)

STORAGE_DELETED_OBJECTS = Counter(
    "storage_deleted_objects_total",
    "Objects removed by batch deletes",
)
