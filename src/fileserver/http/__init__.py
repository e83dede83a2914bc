"""
=============================================================================
HTTP PROTOCOL IMPLEMENTATION
=============================================================================

The protocol side of the file server: everything between "raw bytes from
the socket" and "raw bytes back to the socket", with no I/O of its own.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ request.py       bytes → HTTPRequest (method, target, headers)      │
    │ paths.py         target → resolved path (safety check, decoding)    │
    │ mime_types.py    file name → Content-Type                           │
    │ status_codes.py  status code → reason phrase                        │
    │ response.py      HTTPResponse → bytes, HTML error pages             │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import (
    HTTPRequest,
    RequestLine,
    RequestParser,
    HTTPParseError,
    parse_request,
    parse_request_line,
)
from .response import (
    HTTPResponse,
    ResponseBuilder,
    error_page,
    error_response,
    format_http_date,
    ok,             # 200 OK
    bad_request,    # 400 Bad Request
    forbidden,      # 403 Forbidden
    not_found,      # 404 Not Found
    method_not_allowed,  # 405 Method Not Allowed
    internal_error,      # 500 Internal Server Error
)
from .paths import UnsafePathError, decode_path, is_safe_path, normalize_path, resolve_target
from .status_codes import HTTPStatus, status_text
from .mime_types import DEFAULT_MIME_TYPE, MIME_TYPES, get_content_type

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestLine",
    "RequestParser",
    "HTTPParseError",
    "parse_request",
    "parse_request_line",

    # Response framing
    "HTTPResponse",
    "ResponseBuilder",
    "error_page",
    "error_response",
    "format_http_date",
    "ok",
    "bad_request",
    "forbidden",
    "not_found",
    "method_not_allowed",
    "internal_error",

    # Paths
    "UnsafePathError",
    "decode_path",
    "is_safe_path",
    "normalize_path",
    "resolve_target",

    # Status codes
    "HTTPStatus",
    "status_text",

    # MIME types
    "DEFAULT_MIME_TYPE",
    "MIME_TYPES",
    "get_content_type",
]
