"""
=============================================================================
REQUEST LINE PARSING
=============================================================================

The file host looks at exactly one thing in a request: the path token of
the first line. Everything else (headers, body, the HTTP version) is read
off the socket and ignored.

    GET /notes.txt HTTP/1.1\\r\\n
    ─┬─ ────┬───── ────┬───
     │      │          └── ignored (may be missing)
     │      └───────────── looked up verbatim in the route table
     └──────────────────── ignored, any word is accepted

=============================================================================
WHAT COUNTS AS MALFORMED?
=============================================================================

    b""                         → MalformedRequest (no line at all)
    b"GET\\r\\n"                → MalformedRequest (one token)
    b"GET /a.txt\\r\\n"         → path "/a.txt"
    b"GET /a.txt HTTP/1.1\\r\\n"→ path "/a.txt"
    b"GET  /a.txt HTTP/1.1"     → path "" (empty field, will not be found)

Splitting is done on single spaces, not on runs of whitespace, so the path
is always the field between the first and second space.

Bytes that are not valid UTF-8 are replaced rather than rejected; such a
path simply won't match any registered route.

=============================================================================
"""

from dataclasses import dataclass

from ..errors import MalformedRequest


@dataclass(frozen=True)
class RequestLine:
    """
    The parsed first line of a request.

    Attributes:
        method: First token (e.g. "GET"). Not validated.
        path: Second token, used verbatim for route lookup.
        raw: The whole line, without the line terminator.
    """
    method: str
    path: str
    raw: str


def decode_request(data: bytes) -> str:
    """Decode request bytes, replacing invalid UTF-8 sequences."""
    return data.decode("utf-8", errors="replace")


def first_line(text: str) -> str:
    """
    Return the first line of `text` without its terminator.

    Lines end at LF; a trailing CR is stripped so CRLF and bare LF both work.

    Raises:
        MalformedRequest: If `text` is empty.
    """
    if not text:
        raise MalformedRequest("Request line was missing")
    line = text.split("\n", 1)[0]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def parse_request_line(data: bytes) -> RequestLine:
    """
    Parse the request line out of raw request bytes.

    Args:
        data: Everything that was read from the connection.

    Returns:
        The parsed RequestLine.

    Raises:
        MalformedRequest: If there is no line, or it has fewer than two
            space-separated tokens, or the path token is empty.
    """
    line = first_line(decode_request(data))

    tokens = line.split(" ")
    if len(tokens) < 2 or not tokens[1]:
        raise MalformedRequest(f"Request line was malformed: {line!r}")

    return RequestLine(method=tokens[0], path=tokens[1], raw=line)
