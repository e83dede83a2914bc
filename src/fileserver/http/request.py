"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Extracts what the file server needs from the raw bytes of one request:
the method and the target path.

=============================================================================
WHAT WE LOOK AT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   GET /css/site.css HTTP/1.1\r\n      ◄── request line (parsed)     │
    │   Host: localhost:8080\r\n            ◄── headers (logging only)    │
    │   User-Agent: curl/8.4.0\r\n                                         │
    │   \r\n                                ◄── header terminator         │
    │   ...anything else...                 ◄── ignored                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The request line is split on the FIRST TWO spaces:

    "GET /css/site.css HTTP/1.1"
     ─┬─ ──────┬─────── ───┬────
      │        │           │
    method   target     version (kept for logs, never validated)

Everything that can go wrong here is a 400 Bad Request:

    - no "\r\n\r\n" anywhere in the bytes
    - an empty first line
    - fewer than two spaces in the first line
    - an empty method or an empty target

Method policy (GET/HEAD only) is NOT the parser's business; the handler
turns other methods into 405.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict


HEADER_TERMINATOR = b"\r\n\r\n"


class HTTPParseError(Exception):
    """
    Raised when HTTP request parsing fails.

    Carries the HTTP status code that should be returned to the client.
    Every parse failure in this server is a 400.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class RequestLine:
    """The three parts of an HTTP request line."""

    method: str
    target: str
    version: str = ""

    def __str__(self) -> str:
        return f"{self.method} {self.target} {self.version}".rstrip()


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    Headers are stored with lower-case names. They are only used for
    logging; nothing in dispatch depends on them.
    """

    line: RequestLine
    headers: Dict[str, str] = field(default_factory=dict)
    client_address: tuple[str, int] = ("", 0)

    @property
    def method(self) -> str:
        return self.line.method

    @property
    def target(self) -> str:
        return self.line.target

    @property
    def version(self) -> str:
        return self.line.version

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    def get_header(self, name: str, default: str = "") -> str:
        """Get a header value by case-insensitive name."""
        return self.headers.get(name.lower(), default)


def parse_request_line(line: str) -> RequestLine:
    """
    Split a request line into method, target and version.

    Args:
        line: The first line of the request, without its CRLF.

    Returns:
        The parsed RequestLine.

    Raises:
        HTTPParseError: If the line has fewer than two spaces, or the
                        method or target is empty.

    Examples:
        >>> parse_request_line("GET /index.html HTTP/1.1")
        RequestLine(method='GET', target='/index.html', version='HTTP/1.1')
    """
    first_space = line.find(" ")
    if first_space == -1:
        raise HTTPParseError(f"Invalid request line: {line!r}")

    second_space = line.find(" ", first_space + 1)
    if second_space == -1:
        raise HTTPParseError(f"Invalid request line: {line!r}")

    method = line[:first_space]
    target = line[first_space + 1:second_space]
    version = line[second_space + 1:]

    if not method or not target:
        raise HTTPParseError(f"Invalid request line: {line!r}")

    return RequestLine(method=method, target=target, version=version)


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

    ┌───────────────────────────────────────────────────────────────────┐
    │  1. Find "\\r\\n\\r\\n"          missing? → HTTPParseError        │
    │  2. First line of header block  empty?   → HTTPParseError        │
    │  3. parse_request_line()        invalid? → HTTPParseError        │
    │  4. Remaining lines → headers   malformed lines are skipped      │
    └───────────────────────────────────────────────────────────────────┘
    """

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse raw HTTP request data into an HTTPRequest object.

        Args:
            data: Raw request bytes from the socket.
            client_address: Client's (ip, port) tuple for logging.

        Returns:
            Parsed HTTPRequest.

        Raises:
            HTTPParseError: If the request is malformed.
        """
        header_end = data.find(HEADER_TERMINATOR)
        if header_end == -1:
            raise HTTPParseError("Incomplete request: no header terminator")

        # surrogateescape keeps non-UTF-8 bytes recoverable when the target
        # is percent-decoded later.
        header_block = data[:header_end].decode("utf-8", errors="surrogateescape")

        request_line, _, header_lines = header_block.partition("\r\n")
        if not request_line:
            raise HTTPParseError("Empty request line")

        return HTTPRequest(
            line=parse_request_line(request_line),
            headers=self._parse_headers(header_lines.split("\r\n")),
            client_address=client_address,
        )

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Parse "Name: Value" lines into a dict with lower-case names.

        Lenient: lines without a colon are skipped, repeated headers are
        joined with ", ".
        """
        headers: Dict[str, str] = {}

        for line in lines:
            name, sep, value = line.partition(":")
            name = name.strip().lower()
            if not sep or not name:
                continue

            value = value.strip()
            if name in headers:
                headers[name] += ", " + value
            else:
                headers[name] = value

        return headers


def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0)
) -> HTTPRequest:
    """Parse raw request bytes with a default RequestParser."""
    return RequestParser().parse(data, client_address)
