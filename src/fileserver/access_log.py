"""
=============================================================================
ACCESS LOG
=============================================================================

One line per answered request, on the "fileserver.access" logger.

    TEXT FORMAT (default):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ 127.0.0.1 - - [19/Oct/2026:14:03:11 +0000] "GET / HTTP/1.1" 200 1342 0.84ms
    │ ─────────       ────────────────────────────  ──────────────  ─── ──── ──────
    │ client IP       timestamp                     request line    code size duration
    └─────────────────────────────────────────────────────────────────────┘

    JSON FORMAT (log_format="json"):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ {"connection_id": "a1b2c3d4", "request_line": "GET / HTTP/1.1",     │
    │  "client_ip": "127.0.0.1", "status_code": 200, ...}                 │
    └─────────────────────────────────────────────────────────────────────┘

The access log is purely observational. Nothing reads it back.

Configure it like any other logger:
    logging.getLogger("fileserver.access").addHandler(file_handler)

=============================================================================
"""

import json
import logging
import time
from dataclasses import dataclass


logger = logging.getLogger("fileserver.access")


@dataclass
class RequestLog:
    """
    Structured log entry for one request.

    Attributes:
        connection_id: Short id of the connection (matches other log lines).
        request_line: First line of the request, or "-" if unparseable.
        client_ip: Client's IP address.
        user_agent: User-Agent header, or "-".
        status_code: Response status.
        content_length: Response body size in bytes.
        duration_ms: Time from parse to framed response.
        timestamp: Common log format timestamp.
    """

    connection_id: str
    request_line: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        """Convert to a dict for JSON serialization."""
        return {
            "connection_id": self.connection_id,
            "request_line": self.request_line,
            "client_ip": self.client_ip,
            "user_agent": self.user_agent,
            "status_code": self.status_code,
            "content_length": self.content_length,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        """Format as a common-log-style line."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.request_line}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


def log_request(entry: RequestLog, log_format: str = "text", level: int = logging.INFO):
    """Emit one access log line in the configured format."""
    if log_format == "json":
        logger.log(level, json.dumps(entry.to_dict()))
    else:
        logger.log(level, entry.to_text())


def common_log_timestamp() -> str:
    """Current local time as "19/Oct/2026:14:03:11 +0000"."""
    return time.strftime("%d/%b/%Y:%H:%M:%S %z")
