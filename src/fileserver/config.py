"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the file server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m fileserver --port 3000                          │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── FILESERVER_PORT=3000 python -m fileserver                 │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Nothing here changes while the server runs. The config is built once,
validated once, and read by every connection.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class ServerConfig:
    """
    Configuration for the file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, max_header_size, timeout

    CONCURRENCY
    - workers

    DOCUMENTS
    - root_dir, index_file, serve_empty_files

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """
    The port number to listen on. 0 lets the OS pick a free port
    (see HTTPServer.server_address for the one it picked).
    """

    backlog: int = 10
    """
    Maximum number of queued connections in the OS accept queue.
    This is the only admission control; beyond it the OS refuses.
    """

    buffer_size: int = 8192
    """
    Bytes requested per recv() call.
    """

    max_header_size: int = 8192
    """
    Most bytes read from one connection while looking for the end of the
    header block. Longer requests are truncated and answered with 400.
    """

    timeout: Optional[float] = 5.0
    """
    Read timeout in seconds. A client that connects but sends nothing is
    disconnected after this long, without a response.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONCURRENCY
    # ─────────────────────────────────────────────────────────────────────

    workers: int = 4
    """
    Number of worker threads handling connections.
    0 = handle each connection inline on the accept loop (one at a time).
    """

    # ─────────────────────────────────────────────────────────────────────
    # DOCUMENTS
    # ─────────────────────────────────────────────────────────────────────

    root_dir: str = "."
    """
    Directory files are served from.
    """

    index_file: str = "index.html"
    """
    Document served for "/" and for an empty target.
    """

    serve_empty_files: bool = False
    """
    False: a zero-length file is answered with 404, same as a missing one.
    True: it is served as 200 with an empty body.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    log_format: str = "text"
    """
    Access log format: 'text' (one line per request) or 'json'.
    """

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "PyFileServer/1.0"
    """
    Value of the Server header, also shown on error pages.
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        FILESERVER_HOST       Server host (default: 127.0.0.1)
        FILESERVER_PORT       Server port (default: 8080)
        FILESERVER_ROOT       Document root (default: .)
        FILESERVER_WORKERS    Worker threads, 0 = sequential (default: 4)
        FILESERVER_TIMEOUT    Read timeout in seconds (default: 5)
        FILESERVER_LOG_LEVEL  Logging level (default: INFO)

        =====================================================================
        """
        return cls(
            host=os.getenv("FILESERVER_HOST", "127.0.0.1"),
            port=int(os.getenv("FILESERVER_PORT", "8080")),
            root_dir=os.getenv("FILESERVER_ROOT", "."),
            workers=int(os.getenv("FILESERVER_WORKERS", "4")),
            timeout=float(os.getenv("FILESERVER_TIMEOUT", "5")),
            log_level=os.getenv("FILESERVER_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at server construction so a bad value fails at startup,
        not on the first request.

        Raises:
            ValueError: If any value is out of range.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.max_header_size < 1:
            raise ValueError("max_header_size must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.workers < 0:
            raise ValueError("workers must be >= 0")

        if not self.index_file or "/" in self.index_file:
            raise ValueError(f"Invalid index_file: {self.index_file!r}")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"log_format must be 'text' or 'json', not {self.log_format!r}")
