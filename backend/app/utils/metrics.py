"""
Prometheus metrics definitions.
All metrics are registered here and can be imported by other modules.
"""
from prometheus_client import Counter, Histogram

# HTTP request metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'path', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'path'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Error metrics
errors_total = Counter(
    'errors_total',
    'Total errors',
    ['error_type']
)

# Image metrics (area: storage or team)
images_uploaded_total = Counter(
    'images_uploaded_total',
    'Total images uploaded',
    ['area']
)

images_deleted_total = Counter(
    'images_deleted_total',
    'Total images deleted',
    ['area']
)

storage_operation_failures_total = Counter(
    'storage_operation_failures_total',
    'Total failed blob store operations',
    ['operation']
)

storage_operation_duration_seconds = Histogram(
    'storage_operation_duration_seconds',
    'Blob store operation duration in seconds',
    ['operation'],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0]
)
