"""
=============================================================================
FILESERVER - A Minimal HTTP/1.1 Static File Server
=============================================================================

Serves files from one directory over plain sockets. One request per
connection, GET and HEAD only, HTML error pages for everything else.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    fileserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m fileserver)
    ├── server.py            # HTTPServer: accept → read → dispatch → respond
    ├── config.py            # ServerConfig dataclass
    ├── storage.py           # FileStore: document root access
    ├── access_log.py        # One log line per request
    ├── core/                # Transport
    │   ├── socket_server.py # Listening socket and accept loop
    │   ├── connection.py    # One client socket
    │   └── thread_pool.py   # Worker threads
    ├── http/                # Protocol (no I/O)
    │   ├── request.py       # Request line and header parsing
    │   ├── response.py      # Response framing, error pages
    │   ├── paths.py         # Path safety check and percent-decoding
    │   ├── status_codes.py  # Status codes and reason phrases
    │   └── mime_types.py    # Extension → Content-Type
    └── handlers/
        └── static.py        # GET/HEAD → 200 / 403 / 404 / 405

=============================================================================
QUICK START
=============================================================================

    from fileserver import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(root_dir="./public", port=8080))
    server.run()

Or from the command line:

    python -m fileserver --root ./public --port 8080

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import HTTPServer
from .storage import FileStore
from .handlers import StaticFileHandler
from .http import (
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    HTTPParseError,
)

__all__ = [
    "__version__",
    "HTTPServer",
    "ServerConfig",
    "FileStore",
    "StaticFileHandler",
    "HTTPRequest",
    "HTTPResponse",
    "HTTPStatus",
    "HTTPParseError",
]
