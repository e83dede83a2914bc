"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Decides what response a well-formed request gets.

=============================================================================
DECISION PIPELINE
=============================================================================

The request has already been parsed (malformed requests never get here,
they are answered with 400 by the server). From that point on, every step
either produces the final response or hands over to the next:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   method GET or HEAD? ──── no ──────────────────────► 405           │
    │          │                                                           │
    │         yes                                                          │
    │          ▼                                                           │
    │   target safe?  ("..", "//", "\\") ── no ───────────► 403           │
    │          │                                                           │
    │         yes                                                          │
    │          ▼                                                           │
    │   normalize ("/" → index.html), decode, re-check ── unsafe ─► 403   │
    │          │                                                           │
    │          ▼                                                           │
    │   FileStore.read()  ── None or empty ───────────────► 404           │
    │          │                                                           │
    │        bytes                                                         │
    │          ▼                                                           │
    │   200, Content-Type from the extension, body = file bytes           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

No step is ever revisited and exactly one response comes out.

=============================================================================
"""

import logging
from typing import Optional

from ..http.mime_types import get_content_type
from ..http.paths import UnsafePathError, resolve_target
from ..http.request import HTTPRequest
from ..http.response import (
    HTTPResponse,
    DEFAULT_SERVER_NAME,
    ok, forbidden, not_found, method_not_allowed,
)
from ..storage import FileStore


logger = logging.getLogger(__name__)


ALLOWED_METHODS = ("GET", "HEAD")


class StaticFileHandler:
    """
    Handler for serving static files from a FileStore.

    Holds no per-request state, so one instance serves every connection
    on every worker thread.

    Usage:
        handler = StaticFileHandler(FileStore("./public"))
        response = handler.handle(request)
    """

    def __init__(
        self,
        store: FileStore,
        index_file: str = "index.html",
        serve_empty_files: bool = False,
        server_name: str = DEFAULT_SERVER_NAME,
    ):
        """
        Args:
            store: Where file bytes come from.
            index_file: Served for "/" and the empty target.
            serve_empty_files: Serve zero-length files as 200 instead of 404.
            server_name: Shown on error pages.
        """
        self.store = store
        self.index_file = index_file
        self.serve_empty_files = serve_empty_files
        self.server_name = server_name

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Produce the response for a parsed request.

        Args:
            request: The parsed HTTP request.

        Returns:
            200 with the file, or a 403 / 404 / 405 error page.
        """
        # ─────────────────────────────────────────────────────────────────
        # METHOD CHECK
        # ─────────────────────────────────────────────────────────────────
        if request.method not in ALLOWED_METHODS:
            return method_not_allowed(list(ALLOWED_METHODS), server_name=self.server_name)

        # ─────────────────────────────────────────────────────────────────
        # SAFETY CHECK, NORMALIZE, DECODE
        # ─────────────────────────────────────────────────────────────────
        try:
            resolved = resolve_target(request.target, self.index_file)
        except UnsafePathError as e:
            logger.warning(f"Rejected unsafe path from {request.client_address[0]}: {e.path!r}")
            return forbidden(server_name=self.server_name)

        # ─────────────────────────────────────────────────────────────────
        # FILE LOOKUP
        # ─────────────────────────────────────────────────────────────────
        content = self._read(resolved)
        if content is None:
            return not_found(server_name=self.server_name)

        logger.info(f"Served {resolved} ({len(content)} bytes)")

        return ok(
            content,
            get_content_type(resolved),
            head_only=request.method == "HEAD",
        )

    def _read(self, resolved: str) -> Optional[bytes]:
        """Read a file, treating an empty one as missing unless configured."""
        content = self.store.read(resolved)
        if content is None:
            logger.debug(f"Not found: {resolved}")
            return None

        if not content and not self.serve_empty_files:
            logger.debug(f"Empty file treated as not found: {resolved}")
            return None

        return content
