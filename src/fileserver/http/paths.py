"""
=============================================================================
URL PATH DECODING AND SAFETY CHECKS
=============================================================================

Turns the request target a client sent into the relative path we look up
on disk, and refuses targets that could escape the document root.

=============================================================================
FROM TARGET TO RESOLVED PATH
=============================================================================

    GET /docs/My%20Notes.txt HTTP/1.1
        ───────────┬────────
                   │
                   ▼
    1. is_safe_path()      "/docs/My%20Notes.txt"  ── unsafe? → 403
                   │
                   ▼
    2. normalize_path()    "docs/My%20Notes.txt"   ("/" → "index.html")
                   │
                   ▼
    3. decode_path()       "docs/My Notes.txt"
                   │
                   ▼
    4. is_safe_path()      again, on the decoded value ── unsafe? → 403

The first check runs on the ENCODED target, exactly as the client sent it.
The second one catches "%2e%2e" and friends, which only turn into ".." after
decoding. Together they guarantee that a resolved path never contains "..",
"//" or a backslash.

=============================================================================
PERCENT-DECODING RULES
=============================================================================

    %XY    X and Y hex digits    → the single byte 0xXY
    +                            → a space
    %      fewer than 2 chars    → kept literally ("a%4" stays "a%4")
    %XY    X or Y not hex        → kept literally ("%zz" stays "%zz")
    anything else                → unchanged

Decoded bytes are reassembled as UTF-8, so "%C3%A9" becomes "é". Byte
sequences that are not valid UTF-8 survive through surrogate escapes and
still name a unique file on disk.

=============================================================================
"""

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

# Substrings that make a target unsafe, wherever they appear.
_UNSAFE_SUBSTRINGS = ("..", "//", "\\")


class UnsafePathError(ValueError):
    """Raised when a path contains "..", "//" or a backslash."""

    def __init__(self, path: str):
        super().__init__(f"Unsafe path: {path!r}")
        self.path = path


def is_safe_path(path: str) -> bool:
    """
    Check a path against the deny-list.

    This is a plain substring match, not a path-segment-aware
    canonicalization: "a..b" is rejected too.

    Examples:
        >>> is_safe_path("/css/site.css")
        True
        >>> is_safe_path("/../etc/passwd")
        False
        >>> is_safe_path("/a//b")
        False
    """
    return not any(bad in path for bad in _UNSAFE_SUBSTRINGS)


def decode_path(encoded: str) -> str:
    """
    Percent- and plus-decode a URL path.

    Never raises: malformed escapes are passed through verbatim.

    Args:
        encoded: The path as it appeared in the request line.

    Returns:
        The decoded path.

    Examples:
        >>> decode_path("My%20Notes+v2.txt")
        'My Notes v2.txt'
        >>> decode_path("100%")
        '100%'
    """
    decoded = bytearray()
    size = len(encoded)
    i = 0

    while i < size:
        char = encoded[i]

        if (
            char == "%"
            and i + 2 < size
            and encoded[i + 1] in _HEX_DIGITS
            and encoded[i + 2] in _HEX_DIGITS
        ):
            decoded.append(int(encoded[i + 1:i + 3], 16))
            i += 3
            continue

        if char == "+":
            decoded += b" "
        else:
            decoded += char.encode("utf-8", errors="surrogateescape")
        i += 1

    return decoded.decode("utf-8", errors="surrogateescape")


def normalize_path(target: str, index_file: str = "index.html") -> str:
    """
    Map a request target to a path relative to the document root.

    "" and "/" become the default document; otherwise exactly one leading
    slash is stripped.

    Examples:
        >>> normalize_path("/")
        'index.html'
        >>> normalize_path("/img/logo.png")
        'img/logo.png'
    """
    if target in ("", "/"):
        return index_file
    if target.startswith("/"):
        return target[1:]
    return target


def resolve_target(target: str, index_file: str = "index.html") -> str:
    """
    Turn a raw request target into the resolved path used for file lookup.

    Args:
        target: The still-encoded target from the request line.
        index_file: Default document for "" and "/".

    Returns:
        The decoded, normalized relative path.

    Raises:
        UnsafePathError: If the target is unsafe before or after decoding.
    """
    if not is_safe_path(target):
        raise UnsafePathError(target)

    resolved = decode_path(normalize_path(target, index_file))

    if not is_safe_path(resolved):
        raise UnsafePathError(resolved)

    return resolved
