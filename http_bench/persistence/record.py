"""
Per-request outcome produced by the request executor.
"""

from typing import Optional


class RequestOutcome:
    """Result of one HTTP round-trip, folded into the counters right away."""

    __slots__ = ("success", "bytes_read", "status")

    def __init__(self, success: bool, bytes_read: int = 0, status: Optional[int] = None):
        self.success = success
        self.bytes_read = bytes_read
        self.status = status

    @classmethod
    def failure(cls, bytes_read: int = 0, status: Optional[int] = None) -> "RequestOutcome":
        return cls(False, bytes_read, status)

    def __eq__(self, other):
        if not isinstance(other, RequestOutcome):
            return NotImplemented
        return (self.success, self.bytes_read, self.status) == (
            other.success, other.bytes_read, other.status
        )

    def __repr__(self) -> str:
        return (
            f"RequestOutcome(success={self.success}, bytes_read={self.bytes_read}, "
            f"status={self.status})"
        )
