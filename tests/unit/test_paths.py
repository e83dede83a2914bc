"""
Unit tests for path safety checks and percent-decoding.
"""

import pytest

from fileserver.http.paths import (
    UnsafePathError,
    decode_path,
    is_safe_path,
    normalize_path,
    resolve_target,
)


class TestIsSafePath:
    """Tests for the substring deny-list."""

    @pytest.mark.parametrize("path", [
        "/index.html",
        "/css/site.css",
        "/",
        "",
        "/file.name.with.dots.txt",
        "/%2e%2e/etc/passwd",
    ])
    def test_safe(self, path):
        """Paths without "..", "//" or backslash are safe (before decoding)."""
        assert is_safe_path(path) is True

    @pytest.mark.parametrize("path", [
        "/../etc/passwd",
        "/docs/../../secret",
        "..",
        "/a..b",
        "//etc/passwd",
        "/a//b",
        "/a\\b",
        "\\windows",
    ])
    def test_unsafe(self, path):
        """Any occurrence of a forbidden substring is rejected."""
        assert is_safe_path(path) is False


class TestDecodePath:
    """Tests for percent- and plus-decoding."""

    def test_plain_text_unchanged(self):
        """Text without escapes passes through."""
        assert decode_path("docs/guide.html") == "docs/guide.html"

    def test_percent_escape(self):
        """%XY becomes the byte 0xXY."""
        assert decode_path("My%20Notes.txt") == "My Notes.txt"

    def test_lower_and_upper_hex(self):
        """Hex digits are accepted in either case."""
        assert decode_path("%2f%2F") == "//"

    def test_plus_is_space(self):
        """A plus sign decodes to a space."""
        assert decode_path("a+b+c") == "a b c"

    def test_escaped_plus_stays_plus(self):
        """%2B is a literal plus, not a space."""
        assert decode_path("a%2Bb") == "a+b"

    def test_multibyte_utf8(self):
        """Escaped UTF-8 sequences are reassembled into one character."""
        assert decode_path("caf%C3%A9.html") == "café.html"

    def test_non_ascii_passthrough(self):
        """Characters that were never escaped survive unchanged."""
        assert decode_path("café+menu") == "café menu"

    def test_invalid_utf8_is_reversible(self):
        """Bytes that are not UTF-8 survive as surrogate escapes."""
        decoded = decode_path("%FF.bin")
        assert decoded.encode("utf-8", errors="surrogateescape") == b"\xff.bin"

    def test_trailing_percent(self):
        """A percent at the end is kept."""
        assert decode_path("100%") == "100%"

    def test_percent_with_one_char(self):
        """A percent followed by a single character is kept."""
        assert decode_path("abc%4") == "abc%4"

    def test_escape_at_very_end(self):
        """A complete escape in the last three characters is decoded."""
        assert decode_path("abc%41") == "abcA"

    def test_malformed_hex_kept_literally(self):
        """%zz is not an escape; the three characters are kept."""
        assert decode_path("%zz") == "%zz"

    def test_half_hex_kept_literally(self):
        """Only one hex digit after the percent is not an escape either."""
        assert decode_path("%4g.txt") == "%4g.txt"

    def test_malformed_followed_by_valid(self):
        """Characters after a malformed escape are decoded normally."""
        assert decode_path("%%41") == "%A"

    def test_empty(self):
        """Empty input decodes to empty output."""
        assert decode_path("") == ""


class TestNormalizePath:
    """Tests for default document and leading slash handling."""

    def test_root_is_index(self):
        """"/" maps to the index file."""
        assert normalize_path("/") == "index.html"

    def test_empty_is_index(self):
        """An empty target maps to the index file."""
        assert normalize_path("") == "index.html"

    def test_custom_index(self):
        """The index file name is configurable."""
        assert normalize_path("/", "home.htm") == "home.htm"

    def test_strips_one_slash(self):
        """Exactly one leading slash is removed."""
        assert normalize_path("/img/logo.png") == "img/logo.png"

    def test_no_leading_slash(self):
        """Targets without a leading slash are left alone."""
        assert normalize_path("index.html") == "index.html"

    def test_directory_is_not_indexed(self):
        """Only the bare root gets the default document."""
        assert normalize_path("/docs/") == "docs/"


class TestResolveTarget:
    """Tests for the full check → normalize → decode → re-check chain."""

    def test_root(self):
        """"/" resolves to the index file."""
        assert resolve_target("/") == "index.html"

    def test_decodes(self):
        """The resolved path is decoded."""
        assert resolve_target("/My%20Notes.txt") == "My Notes.txt"

    def test_rejects_raw_traversal(self):
        """A literal ".." is rejected before decoding."""
        with pytest.raises(UnsafePathError):
            resolve_target("/../etc/passwd")

    def test_rejects_encoded_traversal(self):
        """An encoded ".." is caught after decoding."""
        with pytest.raises(UnsafePathError) as exc_info:
            resolve_target("/%2e%2e/etc/passwd")
        assert exc_info.value.path == "../etc/passwd"

    def test_rejects_encoded_backslash(self):
        """An encoded backslash is caught after decoding."""
        with pytest.raises(UnsafePathError):
            resolve_target("/a%5Cb")

    def test_rejects_double_slash_after_strip(self):
        """"///x" still contains "//" after one slash is stripped."""
        with pytest.raises(UnsafePathError):
            resolve_target("///x")

    def test_unsafe_path_error_is_value_error(self):
        """UnsafePathError can be caught as ValueError."""
        assert issubclass(UnsafePathError, ValueError)
