"""
Prometheus-compatible metrics for the API and the geolocation pipeline
"""
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
import logging
import re

logger = logging.getLogger("app")

# HTTP Request Metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request latency in seconds',
    ['method', 'endpoint'],
    buckets=(0.001, 0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0)
)

# Geolocation Metrics
geolocation_lookups_total = Counter(
    'geolocation_lookups_total',
    'Geolocation lookups by outcome',
    ['outcome']
)

geolocation_cache_events_total = Counter(
    'geolocation_cache_events_total',
    'Response cache hits and misses',
    ['result']
)

geolocation_rate_limit_wait_seconds = Histogram(
    'geolocation_rate_limit_wait_seconds',
    'Time spent waiting for a rate limiter slot',
    buckets=(0.1, 1.0, 5.0, 15.0, 30.0, 60.0)
)

# Country Block Metrics
country_block_checks_total = Counter(
    'country_block_checks_total',
    'Caller block checks by result',
    ['blocked']
)

temporal_blocks_expired_total = Counter(
    'temporal_blocks_expired_total',
    'Expired temporal blocks removed',
    ['path']
)

blocked_countries_count = Gauge(
    'blocked_countries_count',
    'Number of entries currently held by the country block store'
)


def record_request(method: str, endpoint: str, status_code: int, duration: float):
    """
    Record HTTP request metrics

    Args:
        method: HTTP method (GET, POST, etc.)
        endpoint: API endpoint path
        status_code: HTTP response status code
        duration: Request duration in seconds
    """
    try:
        sanitized_endpoint = _sanitize_endpoint(endpoint)

        http_requests_total.labels(
            method=method,
            endpoint=sanitized_endpoint,
            status_code=status_code
        ).inc()

        http_request_duration_seconds.labels(
            method=method,
            endpoint=sanitized_endpoint
        ).observe(duration)
    except Exception as e:
        logger.error(f"Failed to record request metrics: {e}")


def record_lookup(outcome: str):
    try:
        geolocation_lookups_total.labels(outcome=outcome).inc()
    except Exception as e:
        logger.error(f"Failed to record lookup metrics: {e}")


def record_cache_event(hit: bool):
    try:
        geolocation_cache_events_total.labels(result="hit" if hit else "miss").inc()
    except Exception as e:
        logger.error(f"Failed to record cache metrics: {e}")


def record_rate_limit_wait(seconds: float):
    try:
        geolocation_rate_limit_wait_seconds.observe(seconds)
    except Exception as e:
        logger.error(f"Failed to record rate limiter metrics: {e}")


def record_block_check(blocked: bool):
    try:
        country_block_checks_total.labels(blocked=str(blocked).lower()).inc()
    except Exception as e:
        logger.error(f"Failed to record block check metrics: {e}")


def record_expired_blocks(path: str, count: int = 1):
    """
    Args:
        path: "lazy" for read-triggered eviction, "sweep" for the scheduler
        count: Number of removed entries
    """
    try:
        if count > 0:
            temporal_blocks_expired_total.labels(path=path).inc(count)
    except Exception as e:
        logger.error(f"Failed to record expiry metrics: {e}")


def update_blocked_countries(count: int):
    try:
        blocked_countries_count.set(count)
    except Exception as e:
        logger.error(f"Failed to update blocked countries gauge: {e}")


def get_metrics() -> bytes:
    """
    Get all metrics in Prometheus format
    """
    return generate_latest()


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST


def _sanitize_endpoint(endpoint: str) -> str:
    """
    Sanitize endpoint to avoid high cardinality in metrics.
    Country codes in paths collapse to a placeholder.
    """
    endpoint = re.sub(r'/block/[^/]+$', '/block/{country_code}', endpoint)

    if len(endpoint) > 100:
        endpoint = endpoint[:100] + '...'

    return endpoint
