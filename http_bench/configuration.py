"""
Configuration constants and the resolved run configuration for http-bench.

This module contains:
- The option defaults used by the command line layer
- Transfer and timing constants used by the request executor
- Report labels
- The immutable BenchmarkConfig value shared read-only by every worker
"""

import os
from dataclasses import dataclass
from typing import Dict, Optional

# =============================================================================
# OPTION DEFAULTS
# =============================================================================

DEFAULT_CONNECT_TIMEOUT_MS: int = 30000
DEFAULT_READ_TIMEOUT_MS: int = 30000
DEFAULT_TOTAL_REQUESTS: int = 1
DEFAULT_CONCURRENCY: int = 1
DEFAULT_CONTENT_TYPE: str = "text/plain"
DEFAULT_METHOD: str = "GET"
DEFAULT_KEEP_ALIVE: bool = False

# Accepted URL prefix for positional arguments
URL_SCHEME_PREFIX: str = "http"

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL: str = os.getenv("HTTP_BENCH_LOG_LEVEL", "INFO")
LOG_FORMAT: str = "%(asctime)s - %(levelname)s - %(message)s"

# =============================================================================
# TRANSFER AND TIMING
# =============================================================================

READ_BUFFER_SIZE: int = 2048  # Bytes per read from the response stream
HTTP_SUCCESS_STATUS: int = 200
MS_PER_SECOND: float = 1000.0
MIN_ELAPSED_DIVISOR_SECONDS: float = 1.0  # Floor for the requests/sec divisor

# =============================================================================
# PERSISTENCE AND METRICS
# =============================================================================

DEFAULT_RESULTS_PREFIX: str = "http_bench"
PROMETHEUS_NAMESPACE: str = "http_bench"

# =============================================================================
# REPORT LABELS
# =============================================================================

REPORT_LABEL_WIDTH: int = 24
REPORT_LABELS: Dict[str, str] = {
    "url": "URL:",
    "concurrency": "Concurrency Level:",
    "keep_alive": "Use KeepAlive:",
    "elapsed_seconds": "Time taken for tests:",
    "success_count": "Complete requests:",
    "failure_count": "Failed requests:",
    "bytes_transferred": "HTML transferred:",
    "requests_per_second": "Requests per second:",
}


@dataclass(frozen=True)
class BenchmarkConfig:
    """Resolved, immutable parameters for every run of one invocation."""

    connect_timeout_ms: int = DEFAULT_CONNECT_TIMEOUT_MS
    read_timeout_ms: int = DEFAULT_READ_TIMEOUT_MS
    total_requests: int = DEFAULT_TOTAL_REQUESTS
    concurrency: int = DEFAULT_CONCURRENCY
    method: str = DEFAULT_METHOD
    content_type: str = DEFAULT_CONTENT_TYPE
    keep_alive: bool = DEFAULT_KEEP_ALIVE
    body: Optional[bytes] = None
    output_dir: Optional[str] = None
    prometheus_port: Optional[int] = None

    def __post_init__(self):
        if self.connect_timeout_ms <= 0:
            raise ValueError(f"connectTimeout must be > 0, got {self.connect_timeout_ms}")
        if self.read_timeout_ms <= 0:
            raise ValueError(f"readTimeout must be > 0, got {self.read_timeout_ms}")
        if self.total_requests < 0:
            raise ValueError(f"totalRequest must be >= 0, got {self.total_requests}")
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {self.concurrency}")
        if not self.method:
            raise ValueError("method must not be empty")
        if self.prometheus_port is not None and not 0 < self.prometheus_port < 65536:
            raise ValueError(f"prometheusPort out of range: {self.prometheus_port}")
        # Frozen, so normalise through object.__setattr__
        object.__setattr__(self, "method", self.method.upper())

    @property
    def connect_timeout_seconds(self) -> float:
        return self.connect_timeout_ms / MS_PER_SECOND

    @property
    def read_timeout_seconds(self) -> float:
        return self.read_timeout_ms / MS_PER_SECOND

    @property
    def max_connections(self) -> int:
        """Upper bound on open connections; each worker holds at most one."""
        return self.concurrency
