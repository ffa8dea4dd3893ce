"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Hold metrics
hold_attempts = Counter(
    'seat_hold_attempts_total',
    'Total seat hold attempts',
    ['result']  # held, already_held, unavailable
)

seat_releases = Counter(
    'seat_releases_total',
    'Seats returned to inventory',
    ['reason']  # cancelled, abandoned, event_cancelled, rollback
)

# Order lifecycle metrics
order_transitions = Counter(
    'order_transitions_total',
    'Order status transitions',
    ['status']  # completed, cancelled, abandoned
)

# Auto selection metrics
autoselect_attempts = Counter(
    'autoselect_attempts_total',
    'Auto seat selection requests',
    ['result']  # adjacent, scattered, mixed, insufficient
)

autoselect_retries = Counter(
    'autoselect_retry_attempts_total',
    'Auto selection retries after losing a hold race'
)

# Reaper metrics
reaper_sweeps = Counter(
    'reaper_sweeps_total',
    'Expiry reaper sweeps',
    ['result']  # ok, error
)

reaper_sweep_latency = Histogram(
    'reaper_sweep_latency_seconds',
    'Expiry reaper sweep duration',
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0]
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )

# Convenience functions for instrumentation
def record_hold_attempt(result: str):
    """Record hold attempt. Result: held, already_held, unavailable"""
    hold_attempts.labels(result=result).inc()

def record_seat_release(reason: str, count: int = 1):
    """Record seats released back to inventory."""
    if count:
        seat_releases.labels(reason=reason).inc(count)

def record_order_transition(status: str):
    """Record an order leaving the active state."""
    order_transitions.labels(status=status).inc()

def record_autoselect(result: str):
    """Record auto selection outcome. Result: adjacent, scattered, mixed, insufficient"""
    autoselect_attempts.labels(result=result).inc()

def record_reaper_sweep(ok: bool, duration: float):
    """Record a reaper sweep and its duration in seconds."""
    reaper_sweeps.labels(result="ok" if ok else "error").inc()
    reaper_sweep_latency.observe(duration)

def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
