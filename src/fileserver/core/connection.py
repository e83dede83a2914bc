"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket: read one request, write one response,
close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

TCP does NOT preserve message boundaries. A client that sends

    GET /index.html HTTP/1.1\r\nHost: localhost\r\n\r\n

may arrive in one recv() or in several:

    First recv():  "GET /index.h"
    Second recv(): "tml HTTP/1.1\r\nHost: localhost\r\n\r\n"

So we keep reading until we see the end of the header block (\r\n\r\n),
instead of trusting a single recv() to hold the whole request.

=============================================================================
WHEN TO STOP READING
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   "\r\n\r\n" seen               → return buffer   (parse it)        │
    │   max_header_size reached       → return buffer   (truncated → 400) │
    │   EOF / timeout, some bytes     → return buffer   (no terminator    │
    │                                                    → 400)           │
    │   EOF / timeout, nothing at all → return None     (close silently)  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Only the header block matters. Any request body is never read.

=============================================================================
ONE REQUEST PER CONNECTION
=============================================================================

There is no keep-alive. Each Connection sees exactly one request and is
closed right after the response is written:

    NEW → READING → PROCESSING → WRITING → CLOSING → CLOSED

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional
import uuid


logger = logging.getLogger(__name__)


HEADER_TERMINATOR = b"\r\n\r\n"

# Total time close() spends discarding unread client bytes.
DRAIN_TIMEOUT = 0.5


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    Used for logging and to make close() idempotent.
    """
    NEW = "new"                # Just accepted, nothing read yet
    READING = "reading"        # Reading the request header block
    PROCESSING = "processing"  # Request handed to the dispatcher
    WRITING = "writing"        # Sending the response
    CLOSING = "closing"        # Shutdown sequence in progress
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short unique identifier, used as a prefix in log lines.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
    """

    # Required parameters
    socket: socket.socket
    address: tuple[str, int]

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    buffer_size: int = 8192           # Bytes per recv()
    timeout: Optional[float] = 5.0    # Read timeout
    max_header_size: int = 8192       # Stop reading after this many bytes

    def __post_init__(self):
        """Configure the socket after initialization."""
        self.socket.setblocking(True)
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> Optional[bytes]:
        """
        Read the header block of one HTTP request.

        Returns:
            The bytes received (up to max_header_size), or None if the
            client sent nothing before closing or timing out.
        """
        self.state = ConnectionState.READING
        buffer = b""

        while HEADER_TERMINATOR not in buffer:
            try:
                chunk = self.socket.recv(self.buffer_size)
            except socket.timeout:
                logger.info(f"[{self.id}] Read timed out after {self.timeout}s "
                            f"({len(buffer)} bytes received)")
                break
            except OSError as e:
                logger.info(f"[{self.id}] Connection error while reading: {e}")
                break

            if not chunk:
                break  # Client closed its side

            buffer += chunk

            if len(buffer) >= self.max_header_size:
                logger.warning(f"[{self.id}] Header block exceeds "
                               f"{self.max_header_size} bytes, truncating")
                buffer = buffer[:self.max_header_size]
                break

        if not buffer:
            logger.info(f"[{self.id}] No data received from {self.client_ip}:{self.client_port}")
            return None

        return buffer

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send response bytes to the client.

        Uses sendall() so a partially filled send buffer cannot truncate
        the response.

        Returns:
            True if the send succeeded, False if the client went away.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN, the client sees end-of-response
        2. Drain whatever the client still sends (e.g. an ignored body),
           for at most DRAIN_TIMEOUT seconds and max_header_size bytes
        3. close(): release the file descriptor
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        self._drain()

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def _drain(self):
        """
        Read and discard what the client still sends after the response.

        Closing with unread data makes the kernel send RST instead of FIN,
        which can destroy the response before the client reads it. The
        drain is bounded in both time and bytes: a client that keeps
        uploading gets cut off.
        """
        deadline = time.monotonic() + DRAIN_TIMEOUT
        drained = 0

        try:
            while drained < self.max_header_size:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(remaining)
                chunk = self.socket.recv(self.buffer_size)
                if not chunk:
                    return
                drained += len(chunk)
        except OSError:
            return

        logger.debug(f"[{self.id}] Stopped draining after {drained} bytes")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
