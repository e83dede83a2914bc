"""
Unit tests for HTTP request parsing.
"""

import pytest

from fileserver.http.request import (
    HTTPRequest,
    RequestLine,
    RequestParser,
    HTTPParseError,
    parse_request,
    parse_request_line,
)


class TestParseRequestLine:
    """Tests for splitting the request line."""

    def test_three_parts(self):
        """Method, target and version are split on the first two spaces."""
        line = parse_request_line("GET /index.html HTTP/1.1")
        assert line == RequestLine("GET", "/index.html", "HTTP/1.1")

    def test_version_keeps_remaining_spaces(self):
        """Everything after the second space is the version."""
        line = parse_request_line("GET /a HTTP/1.1 extra")
        assert line.target == "/a"
        assert line.version == "HTTP/1.1 extra"

    def test_empty_version_accepted(self):
        """A trailing space with no version still parses."""
        line = parse_request_line("GET / ")
        assert line.method == "GET"
        assert line.target == "/"
        assert line.version == ""

    def test_method_not_validated(self):
        """Any method token parses; the handler decides what is allowed."""
        assert parse_request_line("BREW /pot HTTP/1.1").method == "BREW"

    @pytest.mark.parametrize("line", [
        "GET",
        "GET /index.html",
        "GARBAGE",
    ])
    def test_fewer_than_two_spaces(self, line):
        """A line with fewer than two spaces is rejected."""
        with pytest.raises(HTTPParseError):
            parse_request_line(line)

    def test_empty_target(self):
        """Two spaces in a row leave the target empty."""
        with pytest.raises(HTTPParseError):
            parse_request_line("GET  HTTP/1.1")

    def test_empty_method(self):
        """A leading space leaves the method empty."""
        with pytest.raises(HTTPParseError):
            parse_request_line(" / HTTP/1.1")

    def test_str(self):
        """str() rebuilds the line for logging."""
        assert str(RequestLine("GET", "/", "HTTP/1.1")) == "GET / HTTP/1.1"
        assert str(RequestLine("GET", "/")) == "GET /"


class TestRequestParser:
    """Tests for RequestParser class."""

    def test_parse_simple_get(self, sample_get_request: bytes):
        """Test parsing a simple GET request."""
        parser = RequestParser()
        request = parser.parse(sample_get_request, ("127.0.0.1", 12345))

        assert request.method == "GET"
        assert request.target == "/index.html"
        assert request.version == "HTTP/1.1"
        assert request.client_address == ("127.0.0.1", 12345)

    def test_parse_headers(self, sample_get_request: bytes):
        """Header names are lower-cased."""
        request = parse_request(sample_get_request)

        assert request.headers["host"] == "localhost:8080"
        assert request.user_agent == "pytest"
        assert request.get_header("Accept") == "text/html"
        assert request.get_header("X-Missing", "none") == "none"

    def test_no_headers(self):
        """A request line followed directly by the blank line is fine."""
        request = parse_request(b"GET / HTTP/1.1\r\n\r\n")
        assert request.target == "/"
        assert request.headers == {}

    def test_body_ignored(self):
        """Bytes after the header block are not looked at."""
        request = parse_request(b"GET / HTTP/1.1\r\nHost: x\r\n\r\nbody\r\n\r\nmore")
        assert request.target == "/"
        assert request.headers == {"host": "x"}

    def test_repeated_headers_joined(self):
        """Repeated header names are combined."""
        raw = b"GET / HTTP/1.1\r\nAccept: a\r\naccept: b\r\n\r\n"
        assert parse_request(raw).get_header("accept") == "a, b"

    def test_malformed_header_skipped(self):
        """Header lines without a colon are ignored."""
        raw = b"GET / HTTP/1.1\r\nnot a header\r\nHost: x\r\n\r\n"
        assert parse_request(raw).headers == {"host": "x"}

    def test_non_utf8_target_survives(self):
        """Raw non-UTF-8 bytes in the target are kept reversibly."""
        request = parse_request(b"GET /caf\xe9.html HTTP/1.1\r\n\r\n")
        raw_target = request.target.encode("utf-8", errors="surrogateescape")
        assert raw_target == b"/caf\xe9.html"

    def test_missing_terminator(self):
        """Without "\\r\\n\\r\\n" the request is incomplete."""
        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(b"GET / HTTP/1.1\r\nHost: x\r\n")

        assert exc_info.value.status_code == 400
        assert "terminator" in str(exc_info.value)

    def test_garbage_without_terminator(self):
        """Arbitrary bytes are rejected."""
        with pytest.raises(HTTPParseError):
            parse_request(b"GARBAGE")

    def test_empty_request_line(self):
        """A header block that starts with the terminator has no request line."""
        with pytest.raises(HTTPParseError):
            parse_request(b"\r\n\r\n")

    def test_unparseable_request_line(self):
        """A request line with one space is rejected."""
        with pytest.raises(HTTPParseError):
            parse_request(b"GET /\r\nHost: x\r\n\r\n")

    def test_parse_error_default_status(self):
        """HTTPParseError carries 400 unless told otherwise."""
        assert HTTPParseError("bad").status_code == 400
        assert HTTPParseError("bad", 413).status_code == 413


class TestHTTPRequest:
    """Tests for HTTPRequest accessors."""

    def test_user_agent_default(self):
        """A missing User-Agent is the empty string."""
        request = HTTPRequest(line=RequestLine("GET", "/"))
        assert request.user_agent == ""
