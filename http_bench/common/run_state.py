"""
Shared state of one benchmark run against a single URL.
"""

import logging

from http_bench.common.latch import CountDownLatch
from http_bench.common.work_dispenser import WorkDispenser
from http_bench.configuration import BenchmarkConfig
from http_bench.persistence.metrics_aggregator import MetricsAggregator

logger = logging.getLogger(__name__)


class RunState:
    """Everything the workers of one run share.

    Built and discarded by the orchestrator; workers only hold a reference.
    """

    def __init__(self, url: str, config: BenchmarkConfig, exporter=None):
        """Initialize run state for one URL.

        Args:
            url: Target URL
            config: Resolved configuration of the invocation
            exporter: Optional PrometheusExporter fed by the metrics aggregator
        """
        self.url = url
        self.config = config

        # Request-time values
        self.method = config.method
        self.content_type = config.content_type
        self.body = config.body
        self.connect_timeout = config.connect_timeout_seconds
        self.read_timeout = config.read_timeout_seconds

        self.work = WorkDispenser(config.total_requests)
        self.metrics = MetricsAggregator(exporter)

        # Workers plus the orchestrator must arrive before anyone starts
        self.start = CountDownLatch(config.concurrency + 1)
        self.stop = CountDownLatch(config.concurrency)

        logger.debug(
            f"Built run state for {url}: {config.total_requests} requests, "
            f"{config.concurrency} workers"
        )
