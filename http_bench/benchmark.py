"""
Benchmark run orchestration: one full run per URL, strictly sequential.
"""

import sys
import time
import logging
from enum import Enum
from typing import Iterable, List, Optional, TextIO

from http_bench.common.run_state import RunState
from http_bench.common.worker_pool import WorkerPool
from http_bench.configuration import BenchmarkConfig
from http_bench.persistence.parquet import ParquetPersistence
from http_bench.persistence.prom import PrometheusExporter
from http_bench.persistence.report import BenchmarkReport
from http_bench.systems.base import HttpSystem, get_connection_count

logger = logging.getLogger(__name__)


class RunPhase(Enum):
    """Orchestrator states of a single URL run."""

    BUILDING = "building"
    RUNNING = "running"
    DRAINING = "draining"
    REPORTED = "reported"


class BenchmarkRunner:
    """Runs the configured benchmark against one or more URLs."""

    def __init__(
        self,
        config: BenchmarkConfig,
        executor=None,
        exporter: Optional[PrometheusExporter] = None,
        output: Optional[TextIO] = None,
    ):
        """Initialize the runner.

        Args:
            config: Resolved configuration shared by every run
            executor: Request executor (default: HttpSystem built from config)
            exporter: Prometheus exporter (default: one on config.prometheus_port, if set)
            output: Stream the reports are printed to (default: stdout)
        """
        self.config = config
        self.executor = executor if executor is not None else HttpSystem(config)
        if exporter is None and config.prometheus_port is not None:
            exporter = PrometheusExporter(config.prometheus_port)
        self.exporter = exporter
        self.output = output
        self.persistence = ParquetPersistence(config.output_dir) if config.output_dir else None
        self.worker_pool = WorkerPool(self.executor)
        self.phase: Optional[RunPhase] = None

        logger.info(
            f"Initialized benchmark runner: {config.total_requests} requests, "
            f"concurrency {config.concurrency}, method {config.method}, "
            f"keep-alive {config.keep_alive}"
        )

    def _enter_phase(self, phase: RunPhase, url: str) -> None:
        self.phase = phase
        logger.debug(f"{url}: {phase.value}")

    def run(self, url: str) -> BenchmarkReport:
        """Run the benchmark to completion against a single URL.

        Args:
            url: Target URL

        Returns:
            Report of the run
        """
        self._enter_phase(RunPhase.BUILDING, url)
        run_state = RunState(url, self.config, self.exporter)
        if self.exporter is not None:
            self.exporter.begin_run(self.config.concurrency, self.config.total_requests)

        logger.info(f"Benchmarking {url}")
        self.worker_pool.start_workers(run_state)

        self._enter_phase(RunPhase.RUNNING, url)
        run_state.start.count_down()
        run_state.start.await_zero()
        start_time = time.perf_counter()

        self._enter_phase(RunPhase.DRAINING, url)
        run_state.stop.await_zero()
        elapsed = time.perf_counter() - start_time

        self._enter_phase(RunPhase.REPORTED, url)
        counters = run_state.metrics.snapshot()
        report = BenchmarkReport(
            url=url,
            concurrency=self.config.concurrency,
            keep_alive=self.config.keep_alive,
            elapsed_seconds=elapsed,
            success_count=counters["success_count"],
            failure_count=counters["failure_count"],
            bytes_transferred=counters["bytes_transferred"],
        )

        # Workers have already signalled stop, so this only reaps the threads
        self.worker_pool.join()
        self._release_connections()

        logger.info(
            f"Completed {url}: {report.success_count} ok, {report.failure_count} failed "
            f"in {elapsed:.3f}s ({report.requests_per_second:.2f} req/s)"
        )
        logger.debug(f"Established connections after run: {get_connection_count()}")
        return report

    def run_all(self, urls: Iterable[str]) -> List[BenchmarkReport]:
        """Run every URL in order, printing each report as soon as it is ready.

        Args:
            urls: Target URLs

        Returns:
            Reports in URL order
        """
        if self.exporter is not None:
            self.exporter.start_server()

        reports = []
        for url in urls:
            report = self.run(url)
            print(report.render(), file=self.output or sys.stdout, flush=True)
            if self.persistence is not None:
                self.persistence.store_report(report)
            reports.append(report)

        if self.persistence is not None:
            try:
                filepath = self.persistence.save_to_file()
                if filepath:
                    logger.info(f"Reports saved to: {filepath}")
            except (OSError, ValueError, ImportError) as e:
                logger.error(f"Failed to save reports: {e}")

        return reports

    def _release_connections(self) -> None:
        close = getattr(self.executor, "close", None)
        if close is not None:
            close()

    def close(self) -> None:
        """Release pooled connections."""
        self._release_connections()
