"""
Thread-per-worker pool that drains the work dispenser of one run.
"""

import threading
import logging
from typing import List, Optional

from http_bench.persistence.record import RequestOutcome

logger = logging.getLogger(__name__)


class WorkerPool:
    """Launches the worker threads of a run and tracks them until they finish.

    Every worker follows the same lifecycle: arrive at the start latch and wait
    for the release, claim and execute work units until the dispenser is
    exhausted, then count down the stop latch. The stop signal is sent on every
    exit path.
    """

    def __init__(self, executor, thread_name_prefix: str = "bench-worker"):
        """Initialize the worker pool.

        Args:
            executor: Object whose execute(run_state) returns a RequestOutcome
            thread_name_prefix: Prefix for worker thread names
        """
        self.executor = executor
        self.thread_name_prefix = thread_name_prefix
        self.worker_threads: List[threading.Thread] = []

    def start_workers(self, run_state) -> int:
        """Start one thread per unit of concurrency.

        Workers that cannot be started are accounted for on both latches so
        the run still completes with the workers that did start.

        Args:
            run_state: RunState shared by all workers of the run

        Returns:
            Number of workers started
        """
        concurrency = run_state.config.concurrency
        for worker_id in range(concurrency):
            worker = threading.Thread(
                target=self._worker_task,
                args=(worker_id, run_state),
                name=f"{self.thread_name_prefix}-{worker_id}",
                daemon=True,
            )
            try:
                worker.start()
            except RuntimeError as e:
                missing = concurrency - worker_id
                logger.error(f"Could only start {worker_id}/{concurrency} workers: {e}")
                for _ in range(missing):
                    run_state.start.count_down()
                    run_state.stop.count_down()
                break
            self.worker_threads.append(worker)

        logger.debug(f"Started {len(self.worker_threads)} workers for {run_state.url}")
        return len(self.worker_threads)

    def _worker_task(self, worker_id: int, run_state):
        """Worker lifecycle: wait for start, drain the dispenser, signal stop."""
        completed = 0
        fault_logged = False

        try:
            run_state.start.count_down()
            run_state.start.await_zero()

            while run_state.work.claim():
                try:
                    outcome = self.executor.execute(run_state)
                except Exception as e:
                    # The unit is already claimed, so it still has to be counted
                    if not fault_logged:
                        logger.error(f"Worker {worker_id} executor error: {e}")
                        fault_logged = True
                    outcome = RequestOutcome.failure()
                run_state.metrics.record(outcome)
                completed += 1

        except Exception as e:
            logger.error(f"Worker {worker_id} fatal error: {e}")
        finally:
            run_state.stop.count_down()
            logger.debug(f"Worker {worker_id} finished after {completed} requests")

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for every started worker thread to exit and forget them."""
        for worker in self.worker_threads:
            worker.join(timeout)
        self.worker_threads = [w for w in self.worker_threads if w.is_alive()]
