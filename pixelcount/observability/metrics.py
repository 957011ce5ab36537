"""
Prometheus Metrics - Application metrics

Exposes metrics for pixel count latency, page loading and results.
"""

from prometheus_client import Counter, Histogram, Gauge, Info

from ..core.config import settings


# ─────────────────────────────────────────────
# APPLICATION METRICS
# ─────────────────────────────────────────────

COMPUTE_COUNT = Counter(
    'pixelcount_compute_total',
    'Total number of pixel count computations',
    ['status']  # success, error
)

COMPUTE_LATENCY = Histogram(
    'pixelcount_compute_latency_seconds',
    'End-to-end pixel count latency in seconds',
    buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)

PAGE_LOAD_LATENCY = Histogram(
    'pixelcount_page_load_latency_seconds',
    'Time spent waiting for all pages to load',
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0]
)

LEAF_NODES = Histogram(
    'pixelcount_leaf_nodes',
    'Leaf nodes visited per computation',
    buckets=[0, 10, 100, 1000, 10000, 100000]
)

LAST_TOTAL = Gauge(
    'pixelcount_last_total_pixels',
    'Pixel total of the most recent successful computation'
)

UI_MESSAGES = Counter(
    'pixelcount_ui_messages_total',
    'UI messages exchanged with the display',
    ['direction', 'type']  # inbound/outbound, loading/count/refresh/close
)

SYSTEM_INFO = Info(
    'pixelcount_system',
    'pixelcount service information'
)


def setup_metrics():
    """Initialize metrics with default values"""
    SYSTEM_INFO.info({
        'version': '1.0.0',
        'environment': settings.environment,
        'service': settings.service_name,
    })
