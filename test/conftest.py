"""
Shared fixtures: a local HTTP endpoint the benchmark can be pointed at.
"""

import itertools
import socket
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

# Body sizes served round-robin by /cycle
CYCLE_SIZES = [0, 1, 17, 50, 2048, 5000, 333]


class BenchHandler(BaseHTTPRequestHandler):
    """Routes:

    /bytes/<n>           200 with an n byte body
    /status/<code>/<n>   <code> with an n byte body
    /cycle               200 with the next size from CYCLE_SIZES
    /redirect            302 to /bytes/10 with a 5 byte body
    /redirect/<code>     <code> to /bytes/10 with a 5 byte body
    /slow                200 after one second
    /truncated           announces 100 bytes, sends 40, then closes
    """

    protocol_version = "HTTP/1.1"

    def log_message(self, format, *args):
        pass

    def _read_body(self) -> bytes:
        length = int(self.headers.get("Content-Length") or 0)
        return self.rfile.read(length) if length else b""

    def _send(self, status: int, body: bytes, headers: dict = None):
        self.send_response(status)
        self.send_header("Content-Length", str(len(body)))
        for name, value in (headers or {}).items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(body)

    def _route(self):
        body = self._read_body()
        self.server.record(self, body)
        parts = self.path.strip("/").split("/")

        if parts[0] == "bytes":
            self._send(200, b"x" * int(parts[1]))
        elif parts[0] == "status":
            self._send(int(parts[1]), b"e" * int(parts[2]))
        elif parts[0] == "cycle":
            size = self.server.next_size()
            self._send(200, b"c" * size)
        elif parts[0] == "redirect":
            code = int(parts[1]) if len(parts) > 1 else 302
            self._send(code, b"moved", {"Location": "/bytes/10"})
        elif parts[0] == "slow":
            time.sleep(1.0)
            self._send(200, b"late")
        elif parts[0] == "truncated":
            self.send_response(200)
            self.send_header("Content-Length", "100")
            self.end_headers()
            self.wfile.write(b"t" * 40)
            self.wfile.flush()
            self.close_connection = True
        else:
            self._send(404, b"")

    do_GET = _route
    do_POST = _route
    do_PUT = _route
    do_DELETE = _route


class BenchServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self):
        super().__init__(("127.0.0.1", 0), BenchHandler)
        self.lock = threading.Lock()
        self.reset()

    def reset(self):
        with self.lock:
            self.requests = []
            self.served_sizes = []
            self._sizes = itertools.cycle(CYCLE_SIZES)

    def record(self, handler, body: bytes):
        with self.lock:
            self.requests.append({
                "method": handler.command,
                "path": handler.path,
                "content_type": handler.headers.get("Content-Type"),
                "connection": handler.headers.get("Connection"),
                "client_port": handler.client_address[1],
                "body": body,
            })

    def next_size(self) -> int:
        with self.lock:
            size = next(self._sizes)
            self.served_sizes.append(size)
            return size

    def url(self, path: str) -> str:
        host, port = self.server_address[:2]
        return f"http://{host}:{port}{path}"


@pytest.fixture(scope="session")
def _bench_server():
    server = BenchServer()
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()


@pytest.fixture
def http_server(_bench_server):
    _bench_server.reset()
    return _bench_server


@pytest.fixture
def closed_port_url():
    """URL of a local port nothing listens on."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"http://127.0.0.1:{port}/"
