"""Metrics collection for the gateway.

Provides a thin convenience wrapper around ``prometheus_client`` so the HTTP
layer and the pipelines record request, ingestion, search and engine metrics
consistently.

Design notes
- Metrics and labels are predeclared to avoid cardinality explosions
- A single registry is kept per collector (can be injected for tests)
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
import structlog

logger = structlog.get_logger("metrics")


class MetricsCollector:
    """Centralized metrics collection.

    Parameters
    - service_name: Logical name used for scoping
    - registry: Optional custom ``CollectorRegistry`` (e.g. for testing)
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry or CollectorRegistry()

        self.request_count = Counter(
            'http_requests_total',
            'Total HTTP requests',
            ['method', 'endpoint', 'status'],
            registry=self.registry
        )

        self.request_duration = Histogram(
            'http_request_duration_seconds',
            'HTTP request duration',
            ['method', 'endpoint'],
            registry=self.registry
        )

        self.ingestion_batches = Counter(
            'ds_ingestion_batches_total',
            'Total ingestion batches',
            ['status'],
            registry=self.registry
        )

        self.ingested_documents = Counter(
            'ds_ingested_documents_total',
            'Total documents submitted for indexing',
            ['status'],
            registry=self.registry
        )

        self.search_requests = Counter(
            'ds_search_requests_total',
            'Total search requests',
            ['status'],
            registry=self.registry
        )

        self.search_duration = Histogram(
            'ds_search_duration_seconds',
            'Search duration',
            ['status'],
            registry=self.registry
        )

        self.skipped_hits = Counter(
            'ds_search_skipped_hits_total',
            'Search hits dropped because their payload could not be mapped',
            registry=self.registry
        )

        self.engine_operations = Counter(
            'ds_engine_operations_total',
            'Search engine calls by operation and outcome',
            ['operation', 'status'],
            registry=self.registry
        )

    def record_http_request(
        self,
        method: str,
        endpoint: str,
        status: int,
        duration: float
    ) -> None:
        """Record HTTP request metrics.

        duration is expected in seconds to match Prometheus histogram units.
        """
        self.request_count.labels(method=method, endpoint=endpoint, status=status).inc()
        self.request_duration.labels(method=method, endpoint=endpoint).observe(duration)

    def record_ingestion(self, status: str, document_count: int) -> None:
        """Record one ingestion batch and the documents it carried."""
        self.ingestion_batches.labels(status=status).inc()
        self.ingested_documents.labels(status=status).inc(document_count)

    def record_search(self, status: str, duration: float, skipped_hits: int = 0) -> None:
        """Record search metrics."""
        self.search_requests.labels(status=status).inc()
        self.search_duration.labels(status=status).observe(duration)
        if skipped_hits:
            self.skipped_hits.inc(skipped_hits)

    def record_engine_operation(self, operation: str, status: str) -> None:
        """Record one search engine call."""
        self.engine_operations.labels(operation=operation, status=status).inc()

    def get_metrics(self) -> str:
        """Get metrics in Prometheus exposition format for scraping."""
        return generate_latest(self.registry).decode('utf-8')


_metrics_collector: Optional[MetricsCollector] = None


def get_metrics_collector(service_name: str) -> MetricsCollector:
    """Get or create the process-wide metrics collector."""
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector(service_name)
    return _metrics_collector
