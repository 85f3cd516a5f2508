"""
Prometheus metrics blueprint.

/metrics exposes request counters and latency plus the checkout and claim
counters. Restrict it to the monitoring network in production.
"""
import os
import time

from flask import Blueprint, Response, request, g
from prometheus_client import (
    Counter, Histogram, Gauge, CollectorRegistry, REGISTRY, CONTENT_TYPE_LATEST,
    generate_latest, multiprocess,
)

metrics_bp = Blueprint('metrics', __name__)

# Gunicorn workers share samples through PROMETHEUS_MULTIPROC_DIR
MULTIPROCESS_MODE = os.environ.get('PROMETHEUS_MULTIPROC_DIR') is not None

if MULTIPROCESS_MODE:
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
else:
    registry = REGISTRY

# Metrics are written to the multiprocess directory, not to a registry, in that mode
_metric_registry = None if MULTIPROCESS_MODE else registry


def _metric(kind, name, documentation, labels=(), **kwargs):
    return kind(f'pantrypal_{name}', documentation, list(labels), registry=_metric_registry, **kwargs)


# HTTP
http_requests_total = _metric(
    Counter, 'http_requests_total', 'Total HTTP requests', ('method', 'endpoint', 'http_status')
)
http_request_duration_seconds = _metric(
    Histogram, 'http_request_duration_seconds', 'HTTP request latency in seconds', ('method', 'endpoint'),
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)
http_requests_in_flight = _metric(
    Gauge, 'http_requests_in_flight', 'HTTP requests being processed'
)

# Checkout and claims
sales_completed_total = _metric(Counter, 'sales_completed_total', 'Sales committed')
sales_failed_total = _metric(Counter, 'sales_failed_total', 'Sales rolled back, by error kind', ('reason',))
claims_completed_total = _metric(Counter, 'claims_completed_total', 'Claim codes redeemed')
claims_failed_total = _metric(Counter, 'claims_failed_total', 'Claim attempts refused, by error kind', ('reason',))


def setup_metrics_instrumentation(app):
    """Time every request and count it by endpoint and status."""

    @app.before_request
    def start_request_timer():
        g.metrics_started_at = time.perf_counter()
        http_requests_in_flight.inc()

    @app.after_request
    def record_request(response):
        started_at = g.pop('metrics_started_at', None)
        if started_at is None:
            return response

        endpoint = request.endpoint or 'unknown'
        http_request_duration_seconds.labels(request.method, endpoint).observe(
            time.perf_counter() - started_at
        )
        http_requests_total.labels(request.method, endpoint, response.status_code).inc()
        http_requests_in_flight.dec()
        return response


@metrics_bp.route('/metrics')
def metrics():
    """Prometheus scrape endpoint (unauthenticated)."""
    return Response(generate_latest(registry), mimetype=CONTENT_TYPE_LATEST)
