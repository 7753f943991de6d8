from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from flask import Response, request
import time

# Cache Metrics
cache_requests_total = Counter("catalog_cache_requests_total", "View cache lookups", ["region", "result"])

cache_evictions_total = Counter(
    "catalog_cache_evictions_total", "Entries evicted for capacity", ["region"]
)

cache_invalidations_total = Counter(
    "catalog_cache_invalidations_total", "Explicit region or entry invalidations", ["region"]
)

cache_entries = Gauge("catalog_cache_entries", "Entries currently held per region", ["region"])

# Catalog Metrics
catalog_writes_total = Counter("catalog_writes_total", "Catalog write operations", ["entity", "operation"])

duplicate_interaction_races_total = Counter(
    "catalog_duplicate_interaction_races_total",
    "Duplicate interactions rejected by the storage constraint after passing the pre-check",
)

# API Metrics
api_request_duration_seconds = Histogram(
    "catalog_api_request_duration_seconds", "API request duration", ["endpoint", "method"]
)

api_requests_total = Counter("catalog_api_requests_total", "Total API requests", ["endpoint", "method", "status_code"])


def init_metrics(app):
    @app.route("/api/metrics")
    def metrics():
        update_cache_metrics(app)
        return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)

    @app.before_request
    def before_request():
        request.start_time = time.time()

    @app.after_request
    def after_request(response):
        duration = time.time() - getattr(request, "start_time", time.time())
        api_request_duration_seconds.labels(endpoint=request.endpoint or "unknown", method=request.method).observe(
            duration
        )
        api_requests_total.labels(
            endpoint=request.endpoint or "unknown", method=request.method, status_code=response.status_code
        ).inc()
        return response

    app.logger.info("Prometheus metrics initialized at /api/metrics")


def update_cache_metrics(app):
    """Refresh per-region entry gauges from the application's view cache."""
    cache = app.extensions.get("view_cache")
    if cache is None:
        return
    for region in cache.regions:
        cache_entries.labels(region=region).set(cache.size(region))
