"""
Shared run counters for success, failure and transferred bytes.
"""

import threading
import logging
from typing import Dict

from http_bench.persistence.record import RequestOutcome

logger = logging.getLogger(__name__)


class MetricsAggregator:
    """Counters mutated by every worker of a run.

    Each record() call updates the counters under a single lock, so an
    outcome is always applied as a whole. The orchestrator reads them through
    snapshot() once the stop latch has released.
    """

    def __init__(self, exporter=None):
        """Initialize the aggregator.

        Args:
            exporter: Optional PrometheusExporter that mirrors every recorded outcome
        """
        self.success_count = 0
        self.failure_count = 0
        self.bytes_transferred = 0
        self.exporter = exporter
        self.lock = threading.Lock()

    def record(self, outcome: RequestOutcome) -> None:
        """Fold one request outcome into the counters.

        Args:
            outcome: Result produced by the request executor
        """
        with self.lock:
            if outcome.success:
                self.success_count += 1
            else:
                self.failure_count += 1
            self.bytes_transferred += outcome.bytes_read

        if self.exporter is not None:
            self.exporter.record_request(outcome)

    def completed(self) -> int:
        """Total outcomes recorded so far."""
        with self.lock:
            return self.success_count + self.failure_count

    def snapshot(self) -> Dict[str, int]:
        """Get a consistent copy of all counters.

        Returns:
            Dictionary with success_count, failure_count and bytes_transferred
        """
        with self.lock:
            return {
                "success_count": self.success_count,
                "failure_count": self.failure_count,
                "bytes_transferred": self.bytes_transferred,
            }

    def __repr__(self) -> str:
        snap = self.snapshot()
        return (
            f"MetricsAggregator(ok={snap['success_count']}, "
            f"failed={snap['failure_count']}, bytes={snap['bytes_transferred']})"
        )
