"""
Per-URL benchmark report and its fixed-label text rendering.
"""

from typing import Any, Dict, List

from http_bench.configuration import (
    MIN_ELAPSED_DIVISOR_SECONDS,
    REPORT_LABELS,
    REPORT_LABEL_WIDTH,
)


class BenchmarkReport:
    """Summary of one completed run against a single URL."""

    def __init__(self, url: str, concurrency: int, keep_alive: bool, elapsed_seconds: float,
                 success_count: int, failure_count: int, bytes_transferred: int):
        self.url = url
        self.concurrency = concurrency
        self.keep_alive = keep_alive
        self.elapsed_seconds = elapsed_seconds
        self.success_count = success_count
        self.failure_count = failure_count
        self.bytes_transferred = bytes_transferred

    @property
    def total_requests(self) -> int:
        return self.success_count + self.failure_count

    @property
    def requests_per_second(self) -> float:
        """Mean request rate; runs shorter than a second are divided by one second."""
        return self.total_requests / max(self.elapsed_seconds, MIN_ELAPSED_DIVISOR_SECONDS)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "concurrency": self.concurrency,
            "keep_alive": self.keep_alive,
            "elapsed_seconds": self.elapsed_seconds,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "bytes_transferred": self.bytes_transferred,
            "requests_per_second": self.requests_per_second,
        }

    def render_lines(self) -> List[str]:
        values = {
            "url": self.url,
            "concurrency": str(self.concurrency),
            "keep_alive": str(self.keep_alive).lower(),
            "elapsed_seconds": f"{self.elapsed_seconds:.3f} seconds",
            "success_count": str(self.success_count),
            "failure_count": str(self.failure_count),
            "bytes_transferred": f"{self.bytes_transferred} bytes",
            "requests_per_second": f"{self.requests_per_second:.2f} [#/sec] (mean)",
        }
        return [
            f"{label:<{REPORT_LABEL_WIDTH}}{values[key]}"
            for key, label in REPORT_LABELS.items()
        ]

    def render(self) -> str:
        """Render the report as one labelled field per line."""
        return "\n".join(self.render_lines())

    def __repr__(self) -> str:
        return (
            f"BenchmarkReport(url={self.url!r}, ok={self.success_count}, "
            f"failed={self.failure_count}, bytes={self.bytes_transferred}, "
            f"elapsed={self.elapsed_seconds:.3f}s)"
        )
