"""
=============================================================================
STATUS LINES
=============================================================================

The file host speaks just enough HTTP for browsers and curl to accept the
reply. A response is a bare status line, an empty line, then raw bytes:

    HTTP/1.1 200 OK\\r\\n
    \\r\\n
    <file contents>

              HTTP/1.1 200 OK
              ──┬───── ─┬─ ─┬
                │       │   └── Reason phrase
                │       └────── Status code
                └────────────── Protocol version

No headers are ever sent: no Content-Length, no Content-Type. The client
knows the body is complete when the connection closes.

Only four codes are used. 200 is the only one sent by default;
the error codes are sent only when error responses are turned on.

=============================================================================
"""

from enum import IntEnum


PROTOCOL_VERSION = "HTTP/1.1"


class HTTPStatus(IntEnum):
    """
    Status codes the file host can put on the wire.

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200                        # File found, bytes follow
    BAD_REQUEST = 400               # No request line, or missing path token
    NOT_FOUND = 404                 # Virtual path not registered
    INTERNAL_SERVER_ERROR = 500     # Registered file could not be opened

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line."""
        return _STATUS_PHRASES[self]

    @property
    def status_line(self) -> bytes:
        """
        The full status line plus the blank line that ends the (empty)
        header section.
        """
        return f"{PROTOCOL_VERSION} {self.value} {self.phrase}\r\n\r\n".encode("ascii")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}


# The exact bytes every successful response starts with.
SUCCESS_STATUS_LINE = HTTPStatus.OK.status_line
