"""
=============================================================================
TCP ACCEPTOR
=============================================================================

Owns the listening socket and turns every accepted client into a
Connection that is handed to a callback.

=============================================================================
THE SERVER SOCKET LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   socket()  ──►  bind(host, port)  ──►  listen(backlog)             │
    │                        │                      │                      │
    │                  OSError: logged,        ready.set()                 │
    │                  re-raised (fatal)            │                      │
    │                                               ▼                      │
    │                              ┌───────── accept() ◄──────────┐       │
    │                              │              │                │       │
    │                              │        Connection(...)        │       │
    │                              │              │                │       │
    │                              │      handler(connection) ─────┘       │
    │                              │      (exception: log, loop)           │
    │                              │                                       │
    │                     timeout: check _running, loop                    │
    │                     OSError: log, loop                               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Failing to bind or listen stops the server before it serves anything.
Failing to accept one connection does not: the error is logged and the
loop carries on with the next client. The same holds for an exception
raised by the connection handler.

=============================================================================
SOCKET OPTIONS
=============================================================================

    SO_REUSEADDR   Restart immediately even while old sockets sit in
                   TIME_WAIT.
    TCP_NODELAY    Responses go out as soon as they are written.
    timeout 1.0s   accept() wakes up once a second so shutdown() is
                   noticed without needing a connection to arrive.

=============================================================================
"""

import signal
import socket
import threading
import time
import logging
from typing import Callable, Optional

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


# Pause after a failed accept(), so a persistent error (e.g. out of file
# descriptors) does not spin the loop.
ACCEPT_ERROR_BACKOFF = 0.1


class SocketServer:
    """
    Listening socket plus accept loop.

    Usage:
        def handle(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle)   # Blocks until shutdown()
    """

    def __init__(self, config: ServerConfig):
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False

        # Set once the socket is listening. Tests and embedders wait on it
        # before connecting.
        self.ready = threading.Event()

        self._original_handlers: dict = {}

    @property
    def address(self) -> tuple[str, int]:
        """
        The bound (host, port).

        Reports the real port once listening, which matters when the
        configured port is 0.
        """
        if self._socket is not None:
            host, port = self._socket.getsockname()[:2]
            return (host, port)
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        sock.settimeout(1.0)
        return sock

    def _setup_signals(self):
        """
        Shut down gracefully on SIGTERM / SIGINT.

        signal.signal() only works in the main thread. When the server runs
        in a background thread (tests, embedding) the caller is expected to
        call shutdown() itself.
        """
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not in main thread, skipping signal handlers")
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and accept until shutdown() is called.

        Args:
            connection_handler: Called with each accepted Connection. It
                                owns the connection from then on.

        Raises:
            OSError: If the socket cannot be bound or put into listening
                     mode.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
            self._socket.listen(self.config.backlog)
        except OSError as e:
            logger.error(f"Failed to listen on {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._running = True
        self._setup_signals()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")
        self.ready.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self._running:
                    break
                logger.error(f"Accept error: {e}")
                time.sleep(ACCEPT_ERROR_BACKOFF)
                continue

            logger.info(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
                max_header_size=self.config.max_header_size,
            )

            try:
                connection_handler(conn)
            except Exception as e:
                logger.exception(f"Error handling connection from "
                                 f"{client_address[0]}:{client_address[1]}: {e}")
                conn.close()

    def shutdown(self):
        """
        Stop the accept loop. Safe to call from any thread, and more than
        once.
        """
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self.ready.clear()
        logger.info("Socket server stopped")
