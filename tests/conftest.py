"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Callable, Generator

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fileserver import HTTPServer, ServerConfig


INDEX_HTML = b"<!DOCTYPE html><html><body><h1>Hello</h1></body></html>\n"
STYLE_CSS = b"body { color: #333; }\n"
# PNG signature plus bytes that are not valid UTF-8
LOGO_PNG = b"\x89PNG\r\n\x1a\n" + bytes(range(256))


@pytest.fixture
def docroot(tmp_path: Path) -> Path:
    """
    A small document root:

        index.html
        style.css
        logo.png
        empty.txt          (zero bytes)
        README             (no extension)
        docs/guide.html
        My Notes.txt       (space in the name)
    """
    root = tmp_path / "www"
    root.mkdir()
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "style.css").write_bytes(STYLE_CSS)
    (root / "logo.png").write_bytes(LOGO_PNG)
    (root / "empty.txt").write_bytes(b"")
    (root / "README").write_bytes(b"plain file\n")
    (root / "docs").mkdir()
    (root / "docs" / "guide.html").write_bytes(b"<p>guide</p>")
    (root / "My Notes.txt").write_bytes(b"notes")
    return root


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /index.html HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/html\r\n"
        b"\r\n"
    )


class RunningServer:
    """An HTTPServer running on a background thread."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"configure_logging": False},
            daemon=True,
        )

    @property
    def port(self) -> int:
        return self.server.server_address[1]

    def start(self):
        self._thread.start()
        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        self._thread.join(timeout=10.0)

    def connect(self) -> socket.socket:
        sock = socket.create_connection(("127.0.0.1", self.port), timeout=10.0)
        return sock

    def request(self, raw: bytes) -> bytes:
        """
        Send raw bytes, half-close, and read until the server closes.
        """
        with self.connect() as sock:
            sock.sendall(raw)
            sock.shutdown(socket.SHUT_WR)
            return read_all(sock)


def read_all(sock: socket.socket) -> bytes:
    chunks = []
    while True:
        chunk = sock.recv(65536)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def split_response(raw: bytes) -> tuple[int, dict, bytes]:
    """Split raw response bytes into (status, headers, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    status = int(lines[0].split(" ")[1])
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(":")
        headers[name.strip()] = value.strip()
    return status, headers, body


@pytest.fixture
def start_server(docroot: Path) -> Generator[Callable[..., RunningServer], None, None]:
    """
    Factory: start_server(**config_overrides) -> RunningServer.

    Servers started through it are stopped at teardown.
    """
    started = []

    def _start(**overrides) -> RunningServer:
        settings = dict(
            host="127.0.0.1",
            port=0,  # Let OS pick a free port
            root_dir=str(docroot),
            workers=2,
            timeout=2.0,
            log_level="WARNING",
        )
        settings.update(overrides)
        running = RunningServer(HTTPServer(ServerConfig(**settings)))
        running.start()
        started.append(running)
        return running

    yield _start

    for running in started:
        running.stop()


@pytest.fixture
def server(start_server) -> RunningServer:
    """A server with default test settings."""
    return start_server()
