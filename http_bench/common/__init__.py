"""
Concurrency primitives and the worker pool of a benchmark run.
"""

from .latch import CountDownLatch
from .run_state import RunState
from .work_dispenser import WorkDispenser
from .worker_pool import WorkerPool

__all__ = ['CountDownLatch', 'RunState', 'WorkDispenser', 'WorkerPool']
