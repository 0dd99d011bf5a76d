"""
=============================================================================
FILE HANDLER
=============================================================================

Serves exactly one request per connection:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     READ → PARSE → RESOLVE → STREAM → CLOSE          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. read      Everything the client sends within the deadline       │
    │   2. parse     Path token from the first line   (MalformedRequest)   │
    │   3. resolve   Exact lookup in the route table  (NotFound)           │
    │   4. open      Open the local file              (FileOpenError)      │
    │   5. stream    "HTTP/1.1 200 OK\\r\\n\\r\\n" + file bytes in chunks     │
    │                                                 (FileReadError)      │
    │   6. close     Both directions, on EVERY exit path                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHAT THE CLIENT SEES WHEN SOMETHING GOES WRONG
=============================================================================

By default, nothing: the connection just closes. This is the historical
behaviour and what existing scripts expect.

With HostConfig(error_responses=True) a bare status line is sent instead:

    MalformedRequest   → HTTP/1.1 400 Bad Request
    NotFound           → HTTP/1.1 404 Not Found
    FileOpenError      → HTTP/1.1 500 Internal Server Error

The file is opened BEFORE the 200 line is written, so a registered but
missing file never produces a success line. A read error in the middle of
streaming is different: the 200 line and some bytes are already out, so the
client gets a truncated body. That is logged and accepted.

=============================================================================
"""

import logging
from typing import BinaryIO, Optional

from ..config import HostConfig
from ..core.connection import Connection
from ..errors import FileOpenError, FileReadError, RequestError
from ..http.request import parse_request_line, decode_request
from ..http.routes import RouteTable
from ..http.status_codes import HTTPStatus, SUCCESS_STATUS_LINE


logger = logging.getLogger(__name__)


class FileHandler:
    """
    Connection handler that serves files from a RouteTable.

    One instance is shared by every connection on every listener. It holds
    no per-request state, so no locking is needed.

    Usage:
        handler = FileHandler(routes, HostConfig())
        listener = Listener(endpoint, handler.handle)
    """

    def __init__(self, routes: RouteTable, config: Optional[HostConfig] = None):
        self.routes = routes
        self.config = config or HostConfig()

    def handle(self, conn: Connection) -> None:
        """
        Serve one request on `conn`, then close it.

        Request errors are logged here and never propagate.
        """
        with conn:
            try:
                self._serve(conn)
            except RequestError as e:
                self._reject(conn, e)

    # ─────────────────────────────────────────────────────────────────────
    # THE PIPELINE
    # ─────────────────────────────────────────────────────────────────────

    def _serve(self, conn: Connection) -> None:
        data = conn.read_until_deadline()
        logger.debug(f"[{conn.id}] Received {len(data)} bytes:\n{decode_request(data)}")

        request_line = parse_request_line(data)
        local_path = self.routes.resolve(request_line.path)
        logger.info(f"[{conn.id}] Requested: {local_path}")

        try:
            file = open(local_path, "rb")
        except OSError as e:
            logger.error(f"[{conn.id}] No such file \"{local_path}\".")
            raise FileOpenError(f"Cannot open {local_path}: {e}") from e

        with file:
            if not conn.send(SUCCESS_STATUS_LINE):
                return
            if self._stream(conn, file):
                logger.info(
                    f"[{conn.id}] Successfully sent {local_path} "
                    f"({conn.bytes_sent - len(SUCCESS_STATUS_LINE)} bytes)"
                )

    def _stream(self, conn: Connection, file: BinaryIO) -> bool:
        """
        Copy `file` to the connection in chunk_size pieces.

        Returns:
            True if the whole file was sent, False if the client went away.

        Raises:
            FileReadError: If reading the file fails partway.
        """
        while True:
            try:
                chunk = file.read(self.config.chunk_size)
            except OSError as e:
                raise FileReadError(f"Read failed after {conn.bytes_sent} bytes: {e}") from e

            if not chunk:
                return True
            if not conn.send(chunk):
                logger.warning(f"[{conn.id}] Client disconnected mid-stream")
                return False

    # ─────────────────────────────────────────────────────────────────────
    # ERRORS
    # ─────────────────────────────────────────────────────────────────────

    def _reject(self, conn: Connection, error: RequestError) -> None:
        """Log a failed request and optionally tell the client why."""
        log = logger.error if error.status_code >= 500 else logger.warning
        log(f"[{conn.id}] {type(error).__name__}: {error}")

        if not self.config.error_responses:
            return
        if conn.response_started:
            return  # Too late, a 200 line is already out
        conn.send(HTTPStatus(error.status_code).status_line)
