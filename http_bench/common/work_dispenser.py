"""
Exact-once work distribution for benchmark workers.
"""

import threading
import logging

logger = logging.getLogger(__name__)


class WorkDispenser:
    """Hands out a fixed number of work units, one per successful claim.

    The counter starts at the total and is decremented on every claim. A claim
    succeeds when the decremented value is still >= 0, so across all callers
    exactly ``total`` claims return True. Once exhausted the counter stays
    pinned at -1.
    """

    def __init__(self, total: int):
        """Initialize the dispenser.

        Args:
            total: Number of work units to hand out (>= 0)
        """
        if total < 0:
            raise ValueError(f"total must be >= 0, got {total}")
        self._total = total
        self._remaining = total
        self._lock = threading.Lock()

    def claim(self) -> bool:
        """Reserve one work unit.

        Returns:
            True if a unit was reserved, False if the work is exhausted
        """
        with self._lock:
            if self._remaining < 0:
                return False
            self._remaining -= 1
            return self._remaining >= 0

    def remaining(self) -> int:
        """Number of units not yet claimed."""
        with self._lock:
            return max(self._remaining, 0)

    @property
    def total(self) -> int:
        return self._total

    def __repr__(self) -> str:
        return f"WorkDispenser(remaining={self.remaining()}/{self._total})"
