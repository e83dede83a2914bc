"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Maps file extensions to the Content-Type header sent with a served file.

=============================================================================
HOW THE EXTENSION IS FOUND
=============================================================================

The extension is everything from the LAST dot to the end of the name,
lower-cased:

    "index.html"        → ".html"
    "archive.tar.GZ"    → ".gz"
    "README"            → ""        (no dot at all)
    "noext."            → "."       (a dot with nothing after it)

Anything not in the table, including "" and ".", is served as
application/octet-stream, which tells browsers "unknown binary, download it".

Textual types carry "; charset=utf-8" so the browser does not have to guess
the encoding.

=============================================================================
"""

from types import MappingProxyType


# =============================================================================
# MIME TYPE TABLE
# =============================================================================
#
# Keys are lower-case extensions including the dot. Read-only after import.
#
# =============================================================================

MIME_TYPES = MappingProxyType({
    # -------------------------------------------------------------------------
    # TEXT TYPES
    # -------------------------------------------------------------------------
    ".html": "text/html; charset=utf-8",
    ".htm": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".txt": "text/plain; charset=utf-8",

    # -------------------------------------------------------------------------
    # IMAGE TYPES
    # -------------------------------------------------------------------------
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".ico": "image/x-icon",        # Favicon
    ".svg": "image/svg+xml",
})

DEFAULT_MIME_TYPE = "application/octet-stream"


def get_extension(filename: str) -> str:
    """
    Get the lower-cased extension of a file name, including the dot.

    Examples:
        >>> get_extension("style.CSS")
        '.css'
        >>> get_extension("Makefile")
        ''
    """
    dot = filename.rfind(".")
    if dot == -1:
        return ""
    return filename[dot:].lower()


def get_content_type(filename: str) -> str:
    """
    Get the Content-Type header value for a file name.

    Args:
        filename: File name or relative path with extension.

    Returns:
        The mapped content type, or application/octet-stream.

    Examples:
        >>> get_content_type("page.HTML")
        'text/html; charset=utf-8'

        >>> get_content_type("image.png")
        'image/png'

        >>> get_content_type("unknown.xyz")
        'application/octet-stream'
    """
    return MIME_TYPES.get(get_extension(filename), DEFAULT_MIME_TYPE)
