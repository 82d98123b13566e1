"""
Prometheus exporter for live benchmark counters.
"""

import logging
from prometheus_client import CollectorRegistry, Counter, Gauge, start_http_server

from http_bench.configuration import PROMETHEUS_NAMESPACE
from http_bench.persistence.record import RequestOutcome

logger = logging.getLogger(__name__)


class PrometheusExporter:
    """Mirrors run counters into Prometheus metrics on a private registry."""

    def __init__(self, port: int = None, registry: CollectorRegistry = None):
        self.port = port
        self.registry = registry or CollectorRegistry()
        self.server_started = False

        self.requests_total = Counter(
            'requests_total', 'Completed benchmark requests', ['outcome'],
            namespace=PROMETHEUS_NAMESPACE, registry=self.registry,
        )
        self.bytes_transferred = Counter(
            'bytes_transferred_total', 'Response body bytes read',
            namespace=PROMETHEUS_NAMESPACE, registry=self.registry,
        )
        self.concurrency = Gauge(
            'concurrency', 'Worker threads of the current run',
            namespace=PROMETHEUS_NAMESPACE, registry=self.registry,
        )
        self.pending = Gauge(
            'pending_requests', 'Requests of the current run not yet completed',
            namespace=PROMETHEUS_NAMESPACE, registry=self.registry,
        )

    def start_server(self) -> None:
        """Start the Prometheus HTTP server."""
        if self.server_started or self.port is None:
            return
        try:
            start_http_server(self.port, registry=self.registry)
            self.server_started = True
            logger.info(f"Prometheus server started on port {self.port}")
        except OSError as e:
            logger.error(f"Failed to start Prometheus server: {e}")

    def record_request(self, outcome: RequestOutcome) -> None:
        """Record one request outcome."""
        self.requests_total.labels(outcome='success' if outcome.success else 'failure').inc()
        self.bytes_transferred.inc(outcome.bytes_read)
        self.pending.dec()

    def begin_run(self, concurrency: int, total_requests: int) -> None:
        self.concurrency.set(concurrency)
        self.pending.set(total_requests)

    def get_sample(self, name: str, labels: dict = None) -> float:
        """Read back a sample value, 0.0 if it has not been emitted yet."""
        value = self.registry.get_sample_value(f"{PROMETHEUS_NAMESPACE}_{name}", labels or {})
        return value if value is not None else 0.0
