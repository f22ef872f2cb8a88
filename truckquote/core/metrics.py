"""Prometheus metrics for monitoring"""
from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry
import time
from contextlib import contextmanager

registry = CollectorRegistry()

request_count = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status'],
    registry=registry
)

request_duration = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    registry=registry
)

distance_lookups = Counter(
    'distance_lookups_total',
    'Total distance provider lookups',
    ['status'],
    registry=registry
)

distance_lookup_duration = Histogram(
    'distance_lookup_duration_seconds',
    'Distance provider lookup duration in seconds',
    registry=registry
)

quote_calculations = Counter(
    'quote_calculations_total',
    'Total quote calculations',
    ['outcome'],
    registry=registry
)

rate_limit_exceeded = Counter(
    'rate_limit_exceeded_total',
    'Total rate limit exceeded events',
    registry=registry
)

webhook_deliveries = Counter(
    'webhook_deliveries_total',
    'Total webhook delivery attempts',
    ['status'],
    registry=registry
)

redis_connected = Gauge(
    'redis_connected',
    'Redis connection status (1=connected, 0=disconnected)',
    registry=registry
)

db_connected = Gauge(
    'db_connected',
    'Database connection status (1=connected, 0=disconnected)',
    registry=registry
)


@contextmanager
def track_distance_lookup():
    """Time one provider call and count it by outcome"""
    start_time = time.time()
    try:
        yield
    except Exception as e:
        distance_lookups.labels(status=type(e).__name__).inc()
        raise
    else:
        distance_lookups.labels(status='ok').inc()
    finally:
        distance_lookup_duration.observe(time.time() - start_time)


def get_metrics_text() -> str:
    """Generate Prometheus metrics in text format"""
    from prometheus_client import generate_latest
    return generate_latest(registry).decode('utf-8')
