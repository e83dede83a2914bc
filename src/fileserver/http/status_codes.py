"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server can put on the wire, with their reason phrases.

A static file server only needs a handful of them:

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  200   │ OK                   - File found and sent                │
    │  400   │ Bad Request          - Could not parse the request        │
    │  403   │ Forbidden            - Target path failed the safety check│
    │  404   │ Not Found            - No readable file at that path      │
    │  405   │ Method Not Allowed   - Anything other than GET / HEAD     │
    │  500   │ Internal Server Error - Handler blew up unexpectedly      │
    └────────┴───────────────────────────────────────────────────────────┘

Any other code gets the reason phrase "Unknown".

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the file server.

    IntEnum, so members compare and format as plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200

    BAD_REQUEST = 400            # Missing terminator or unparseable request line
    FORBIDDEN = 403              # Path contains "..", "//" or a backslash
    NOT_FOUND = 404              # Missing, unreadable or empty file
    METHOD_NOT_ALLOWED = 405     # Only GET and HEAD are served

    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      │
                      │      └── Reason phrase
                      └───────── Status code
        """
        return status_text(self)


# =============================================================================
# REASON PHRASES
# =============================================================================
#
# Built once at import time and never mutated afterwards.
#
# =============================================================================

_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}


def status_text(code: int) -> str:
    """
    Get the reason phrase for any integer status code.

    Unmapped codes get "Unknown" rather than an error, so the framer can
    always produce a status line.

    Examples:
        >>> status_text(403)
        'Forbidden'
        >>> status_text(418)
        'Unknown'
    """
    return _STATUS_PHRASES.get(code, "Unknown")
