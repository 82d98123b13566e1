"""
Blocking HTTP request executor used by benchmark workers.
"""

import logging
import os
import threading
from typing import Dict, Optional

import psutil
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from http_bench.configuration import BenchmarkConfig, HTTP_SUCCESS_STATUS, READ_BUFFER_SIZE
from http_bench.persistence.record import RequestOutcome

logger = logging.getLogger(__name__)


def _close_quietly(resource) -> None:
    if resource is None:
        return
    try:
        resource.close()
    except Exception:
        pass


class HttpSystem:
    """Performs one HTTP round-trip per claimed work unit.

    With keep-alive enabled every worker thread reuses its own session, so a
    connection is never shared between threads. Without keep-alive each
    request gets a fresh session that is closed once the body has been read.
    """

    def __init__(self, config: BenchmarkConfig):
        self.config = config
        self.keep_alive = config.keep_alive
        self._local = threading.local()
        self._sessions = []
        self._sessions_lock = threading.Lock()

        logger.info(
            f"Initialized HTTP executor (keep-alive={'on' if self.keep_alive else 'off'}, "
            f"max_connections={config.max_connections})"
        )

    def _create_session(self) -> requests.Session:
        """Create a session with no transport retries and no redirect following."""
        session = requests.Session()
        retries = Retry(total=0, redirect=False, raise_on_status=False)
        adapter = HTTPAdapter(pool_connections=1, pool_maxsize=1, max_retries=retries)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        if not self.keep_alive:
            session.headers["Connection"] = "close"
        return session

    def _worker_session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._create_session()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def _headers(self, run_state) -> Dict[str, str]:
        if run_state.body is None:
            return {}
        return {"Content-Type": run_state.content_type}

    def execute(self, run_state) -> RequestOutcome:
        """Run one request/response cycle against the run's URL.

        The full response body is read for every status, so the byte count
        reflects the whole transfer. Any error yields a failed outcome that
        keeps the bytes read up to that point.

        Args:
            run_state: RunState of the current run

        Returns:
            RequestOutcome with success set when the status is 200
        """
        session = self._worker_session() if self.keep_alive else self._create_session()
        response = None
        status: Optional[int] = None
        bytes_read = 0

        try:
            prepared = session.prepare_request(requests.Request(
                run_state.method,
                run_state.url,
                data=run_state.body,
                headers=self._headers(run_state),
            ))
            # Straight to the adapter: Session.send looks ahead on 3xx
            # responses and would consume the body before it is counted
            response = session.get_adapter(prepared.url).send(
                prepared,
                stream=True,
                timeout=(run_state.connect_timeout, run_state.read_timeout),
            )
            status = response.status_code

            # Raw stream, so compressed bodies are counted as transferred
            while True:
                chunk = response.raw.read(READ_BUFFER_SIZE, decode_content=False)
                if not chunk:
                    break
                bytes_read += len(chunk)

            return RequestOutcome(status == HTTP_SUCCESS_STATUS, bytes_read, status)
        except Exception:
            return RequestOutcome.failure(bytes_read, status)
        finally:
            _close_quietly(response)
            if not self.keep_alive:
                _close_quietly(session)

    def close(self) -> None:
        """Close every pooled worker session."""
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            _close_quietly(session)
        self._local = threading.local()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def get_connection_count() -> int:
    """Get number of established connections for this process."""
    try:
        process = psutil.Process(os.getpid())
        connections = process.net_connections(kind='inet')
        return len([c for c in connections if c.status == psutil.CONN_ESTABLISHED])
    except psutil.Error as e:
        logger.debug(f"Failed to get connection count: {e}")
        return -1
