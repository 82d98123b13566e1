"""
Countdown latch used as the start and stop barriers of a run.
"""

import threading
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class CountDownLatch:
    """Blocks waiters until ``count`` arrivals have been signalled."""

    def __init__(self, count: int):
        """Initialize the latch.

        Args:
            count: Number of count_down() calls needed to release waiters
        """
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        self._count = count
        self._lock = threading.Lock()
        self._condition = threading.Condition(self._lock)

    def count_down(self) -> None:
        """Signal one arrival. Releases all waiters when the count reaches zero."""
        with self._condition:
            if self._count == 0:
                return
            self._count -= 1
            if self._count == 0:
                self._condition.notify_all()

    def await_zero(self, timeout: Optional[float] = None) -> bool:
        """Block until the count reaches zero.

        Args:
            timeout: Maximum time to wait in seconds (None = wait forever)

        Returns:
            True if the latch released, False on timeout
        """
        with self._condition:
            return self._condition.wait_for(lambda: self._count == 0, timeout=timeout)

    def get_count(self) -> int:
        with self._lock:
            return self._count

    def __repr__(self) -> str:
        return f"CountDownLatch(count={self.get_count()})"
