"""
=============================================================================
FILE SERVER
=============================================================================

The orchestrator: ties the acceptor, the worker pool, the parser and the
static file handler together.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │                        ┌─────────────────┐                          │
    │                        │   HTTPServer    │                          │
    │                        └────────┬────────┘                          │
    │                                 │                                    │
    │            ┌────────────────────┼────────────────────┐              │
    │            ▼                    ▼                    ▼              │
    │    ┌──────────────┐    ┌──────────────┐    ┌───────────────────┐   │
    │    │ SocketServer │    │  ThreadPool  │    │ StaticFileHandler │   │
    │    │  (accept)    │    │  (workers)   │    │   + FileStore     │   │
    │    └──────┬───────┘    └──────────────┘    └───────────────────┘   │
    │           ▼                                                          │
    │    ┌──────────────┐                                                  │
    │    │  Connection  │                                                  │
    │    └──────────────┘                                                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. CLIENT CONNECTS
       └── SocketServer accepts, wraps the socket in a Connection

    2. QUEUE FOR PROCESSING
       └── ThreadPool.submit(), or inline when workers == 0

    3. READ (worker thread)
       └── Connection.read_request(): up to "\\r\\n\\r\\n" or max_header_size
       └── nothing received → close, no response

    4. DISPATCH
       └── RequestParser          malformed → 400
       └── StaticFileHandler      405 / 403 / 404 / 200
       └── unexpected exception   500

    5. RESPOND AND CLOSE
       └── Connection.send_response(), access log line, Connection.close()

There is no keep-alive: one request, one response, one connection.

=============================================================================
"""

import logging
import time
from typing import Optional

from .access_log import RequestLog, common_log_timestamp, log_request
from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState, ThreadPool
from .handlers import StaticFileHandler
from .http import (
    HTTPRequest, RequestParser, HTTPParseError,
    HTTPResponse, bad_request, internal_error,
)
from .storage import FileStore


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Static file server.

    =========================================================================
    USAGE
    =========================================================================

        server = HTTPServer(ServerConfig(root_dir="./public", port=8080))
        server.run()            # Blocks until SIGINT / SIGTERM

    From another thread (tests, embedding):

        server = HTTPServer(ServerConfig(root_dir=tmp, port=0))
        threading.Thread(target=server.run, daemon=True).start()
        server.wait_until_ready()
        host, port = server.server_address
        ...
        server.shutdown()

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid or the document
                        root does not exist.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._store = FileStore(self.config.root_dir)
        self._handler = StaticFileHandler(
            self._store,
            index_file=self.config.index_file,
            serve_empty_files=self.config.serve_empty_files,
            server_name=self.config.server_name,
        )
        self._parser = RequestParser()

        self._socket_server = SocketServer(self.config)
        self._thread_pool: Optional[ThreadPool] = None
        if self.config.workers > 0:
            self._thread_pool = ThreadPool(workers=self.config.workers)

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    @property
    def server_address(self) -> tuple[str, int]:
        """The (host, port) actually bound. Meaningful once ready."""
        return self._socket_server.address

    def wait_until_ready(self, timeout: Optional[float] = 5.0) -> bool:
        """Block until the socket is listening. False on timeout."""
        return self._socket_server.ready.wait(timeout)

    def run(self, configure_logging: bool = True):
        """
        Start the server (blocking).

        Args:
            configure_logging: Install the console log format. Pass False
                               when the host application owns logging.

        Raises:
            OSError: If the listening socket cannot be set up.
        """
        if configure_logging:
            self._setup_logging()

        if self._thread_pool is not None:
            self._thread_pool.start()

        logger.info(f"Serving files from {self._store.root_dir}")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self):
        """Ask the accept loop to stop. run() returns shortly after."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("fileserver").setLevel(level)

    def _shutdown(self):
        logger.info("Shutting down server...")

        if self._thread_pool is not None:
            self._thread_pool.shutdown(wait=True, timeout=self.config.timeout or 5.0)

        logger.info("Server stopped")

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Called by SocketServer for each accepted connection."""
        if self._thread_pool is None:
            self._process_connection(conn)
        else:
            self._thread_pool.submit(self._process_connection, conn)

    def _process_connection(self, conn: Connection):
        """
        Serve exactly one request on a connection, then close it.

        Runs on a worker thread (or the accept loop when workers == 0).
        """
        with conn:
            raw_request = conn.read_request()
            if raw_request is None:
                return

            conn.state = ConnectionState.PROCESSING
            start_time = time.perf_counter()

            request, response = self._dispatch(raw_request, conn.address)
            response_bytes = response.to_bytes(self.config.server_name)

            duration_ms = (time.perf_counter() - start_time) * 1000

            if not conn.send_response(response_bytes):
                return

            log_request(
                RequestLog(
                    connection_id=conn.id,
                    request_line=str(request.line) if request else "-",
                    client_ip=conn.client_ip,
                    user_agent=(request.user_agent if request else "") or "-",
                    status_code=int(response.status),
                    content_length=response.content_length,
                    duration_ms=duration_ms,
                    timestamp=common_log_timestamp(),
                ),
                log_format=self.config.log_format,
            )

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def dispatch(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0),
    ) -> HTTPResponse:
        """
        Turn raw request bytes into the response to send back.

        Never raises: every outcome is a response.

        Args:
            data: The bytes read from the connection.
            client_address: Client's (ip, port), for logging.

        Returns:
            200, or a 400 / 403 / 404 / 405 / 500 error page.
        """
        return self._dispatch(data, client_address)[1]

    def _dispatch(
        self,
        data: bytes,
        client_address: tuple[str, int],
    ) -> tuple[Optional[HTTPRequest], HTTPResponse]:
        try:
            request = self._parser.parse(data, client_address)
        except HTTPParseError as e:
            logger.warning(f"Bad request from {client_address[0]}: {e}")
            return None, bad_request(server_name=self.config.server_name)

        logger.info(f"Request: {request.line}")

        try:
            response = self._handler.handle(request)
        except Exception as e:
            logger.exception(f"Handler error for {request.line}: {e}")
            response = internal_error(server_name=self.config.server_name)

        # HEAD gets the headers GET would get, error pages included.
        if request.method == "HEAD":
            response.send_body = False

        return request, response
