"""
=============================================================================
HTTP RESPONSE FRAMING
=============================================================================

Builds the bytes the server writes back: status line, a fixed set of
headers, a blank line, and the body.

=============================================================================
RESPONSE LAYOUT
=============================================================================

Every response this server sends has the same shape:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   HTTP/1.1 200 OK\r\n                         ◄── status line       │
    │   Server: PyFileServer/1.0\r\n                                       │
    │   Date: Mon, 19 Oct 2026 14:03:11 GMT\r\n                            │
    │   Content-Type: text/html; charset=utf-8\r\n                         │
    │   Content-Length: 1342\r\n                    ◄── always exact      │
    │   Connection: close\r\n                       ◄── always close      │
    │   \r\n                                                               │
    │   <!DOCTYPE html>...                          ◄── body bytes        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Extra headers (for example "Allow" on a 405) go between Content-Length and
Connection.

"Connection: close" is not a hint: the server closes the socket right
after writing the response, whatever the client asked for.

=============================================================================
ERROR PAGES
=============================================================================

Errors are never an abrupt close. Each one is a small HTML document whose
title is "<code> <reason>", e.g. "404 Not Found", served as text/html.

=============================================================================
HEAD REQUESTS
=============================================================================

A HEAD response carries the same headers as the GET response would,
including Content-Length of the full body, but no body bytes.

=============================================================================
"""

import html
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional, Union

from .status_codes import HTTPStatus, status_text


DEFAULT_SERVER_NAME = "PyFileServer/1.0"

ERROR_CONTENT_TYPE = "text/html"


@dataclass
class HTTPResponse:
    """
    A single HTTP response, constructed once per request.

    Attributes:
        status: Status code (HTTPStatus member or any int).
        content_type: Value of the Content-Type header.
        body: Body bytes. Content-Length is always len(body).
        headers: Extra headers, emitted after Content-Length.
        send_body: False for HEAD, which frames the headers only.
    """

    status: int = HTTPStatus.OK
    content_type: str = ERROR_CONTENT_TYPE
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)
    send_body: bool = True

    @property
    def status_text(self) -> str:
        return status_text(self.status)

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Example: "HTTP/1.1 404 Not Found"
        """
        return f"HTTP/1.1 {int(self.status)} {self.status_text}"

    @property
    def content_length(self) -> int:
        return len(self.body)

    def to_bytes(
        self,
        server_name: str = DEFAULT_SERVER_NAME,
        now: Optional[datetime] = None,
    ) -> bytes:
        """
        Serialize the response for socket.sendall().

        Args:
            server_name: Value of the Server header.
            now: Timestamp for the Date header. Defaults to the current
                 instant; tests pass a fixed value.

        Returns:
            Status line, headers, blank line and (unless HEAD) the body.
        """
        if now is None:
            now = datetime.now(timezone.utc)

        lines = [
            self.status_line,
            f"Server: {server_name}",
            f"Date: {format_http_date(now)}",
            f"Content-Type: {self.content_type}",
            f"Content-Length: {self.content_length}",
        ]
        lines.extend(f"{name}: {value}" for name, value in self.headers.items())
        lines.append("Connection: close")

        head = ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1")

        if not self.send_body:
            return head
        return head + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .content_type("image/png")
            .body(png_bytes)
            .build())
    """

    def __init__(self):
        self._status: int = HTTPStatus.OK
        self._content_type = ERROR_CONTENT_TYPE
        self._headers: Dict[str, str] = {}
        self._body = b""
        self._send_body = True

    def status(self, status: int) -> "ResponseBuilder":
        self._status = status
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        self._content_type = content_type
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """Add an extra header (emitted after Content-Length)."""
        self._headers[name] = value
        return self

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Set the body. Strings are encoded as UTF-8."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._body = body
        return self

    def html(self, document: str) -> "ResponseBuilder":
        """Set an HTML body with the error-page content type."""
        return self.content_type(ERROR_CONTENT_TYPE).body(document)

    def head_only(self, head_only: bool = True) -> "ResponseBuilder":
        """Frame headers only (HEAD request)."""
        self._send_body = not head_only
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            content_type=self._content_type,
            body=self._body,
            headers=dict(self._headers),
            send_body=self._send_body,
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Mon, 19 Oct 2026 14:03:11 GMT

    HTTP dates are always GMT, so aware datetimes are converted to UTC
    first. Naive datetimes are assumed to already be UTC.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)

    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# =============================================================================
# ERROR PAGES
# =============================================================================

_ERROR_PAGE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{title}</title>
    <style>
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: #f4f5f7;
            color: #333;
            margin: 0;
            padding: 60px 20px;
        }}
        .container {{
            max-width: 560px;
            margin: 0 auto;
            background: white;
            border-radius: 8px;
            padding: 32px 40px;
            box-shadow: 0 4px 16px rgba(0,0,0,0.08);
        }}
        h1 {{
            color: #c0392b;
            margin: 0 0 12px 0;
        }}
        p {{
            color: #666;
            margin: 0;
        }}
        hr {{
            border: none;
            border-top: 1px solid #eee;
            margin: 24px 0 12px 0;
        }}
        .server {{
            font-size: 0.85em;
            color: #999;
        }}
    </style>
</head>
<body>
    <div class="container">
        <h1>{title}</h1>
        <p>{message}</p>
        <hr>
        <div class="server">{server_name}</div>
    </div>
</body>
</html>
"""

_DEFAULT_MESSAGES = {
    HTTPStatus.BAD_REQUEST: "The server could not understand the request.",
    HTTPStatus.FORBIDDEN: "You don't have permission to access this resource.",
    HTTPStatus.NOT_FOUND: "The requested file was not found on this server.",
    HTTPStatus.METHOD_NOT_ALLOWED: "Only GET and HEAD requests are supported.",
    HTTPStatus.INTERNAL_SERVER_ERROR: "The server encountered an unexpected error.",
}


def error_page(
    status: int,
    message: Optional[str] = None,
    server_name: str = DEFAULT_SERVER_NAME,
) -> bytes:
    """
    Render the HTML body of an error response.

    Args:
        status: The status code; the page title is "<code> <reason>".
        message: Explanation shown under the title. HTML-escaped.
        server_name: Shown in the page footer.

    Returns:
        UTF-8 encoded HTML document.
    """
    title = f"{int(status)} {status_text(status)}"
    if message is None:
        message = _DEFAULT_MESSAGES.get(status, title)

    return _ERROR_PAGE.format(
        title=title,
        message=html.escape(message),
        server_name=html.escape(server_name),
    ).encode("utf-8")


def error_response(
    status: int,
    message: Optional[str] = None,
    server_name: str = DEFAULT_SERVER_NAME,
) -> HTTPResponse:
    """Build a text/html error response for a status code."""
    return (ResponseBuilder()
        .status(status)
        .html(error_page(status, message, server_name).decode("utf-8"))
        .build())


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def ok(body: bytes, content_type: str, head_only: bool = False) -> HTTPResponse:
    """Create a 200 OK response carrying file contents."""
    return (ResponseBuilder()
        .status(HTTPStatus.OK)
        .content_type(content_type)
        .body(body)
        .head_only(head_only)
        .build())


def bad_request(
    message: Optional[str] = None,
    server_name: str = DEFAULT_SERVER_NAME,
) -> HTTPResponse:
    """Create a 400 Bad Request page."""
    return error_response(HTTPStatus.BAD_REQUEST, message, server_name)


def forbidden(
    message: Optional[str] = None,
    server_name: str = DEFAULT_SERVER_NAME,
) -> HTTPResponse:
    """Create a 403 Forbidden page."""
    return error_response(HTTPStatus.FORBIDDEN, message, server_name)


def not_found(
    message: Optional[str] = None,
    server_name: str = DEFAULT_SERVER_NAME,
) -> HTTPResponse:
    """Create a 404 Not Found page."""
    return error_response(HTTPStatus.NOT_FOUND, message, server_name)


def method_not_allowed(
    allowed_methods: list[str],
    server_name: str = DEFAULT_SERVER_NAME,
) -> HTTPResponse:
    """
    Create a 405 Method Not Allowed page.

    Includes the Allow header listing valid methods (RFC 7231 requirement).
    """
    response = error_response(HTTPStatus.METHOD_NOT_ALLOWED, server_name=server_name)
    response.headers["Allow"] = ", ".join(allowed_methods)
    return response


def internal_error(
    message: Optional[str] = None,
    server_name: str = DEFAULT_SERVER_NAME,
) -> HTTPResponse:
    """Create a 500 Internal Server Error page."""
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, message, server_name)
