"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket for the lifetime of one request.

=============================================================================
READING WITHOUT KNOWING WHERE THE REQUEST ENDS
=============================================================================

TCP is a byte stream. It does not tell us where a request ends, and the
file host deliberately does not parse headers to find out. Instead it reads
whatever arrives before a fixed DEADLINE:

    ┌─────────────────────────────────────────────────────────────────┐
    │                  read_until_deadline() Flow                      │
    ├─────────────────────────────────────────────────────────────────┤
    │                                                                  │
    │   deadline = now + read_timeout (100 ms)                         │
    │                                                                  │
    │   while True:                                                    │
    │       remaining = deadline - now                                 │
    │       remaining <= 0        → stop, use what we have             │
    │       recv() with remaining → chunk                              │
    │           timeout           → stop, use what we have             │
    │           b"" (peer closed) → stop, use what we have             │
    │           error             → stop, use what we have             │
    │       buffer += chunk                                            │
    │       buffer >= max size    → stop                               │
    │                                                                  │
    └─────────────────────────────────────────────────────────────────┘

The deadline is for the whole read, not per recv(). A client that trickles
one byte every 50 ms still gets cut off after 100 ms. A client that sends its
request and then half-closes (shutdown(SHUT_WR)) is answered immediately.

=============================================================================
CLOSING BOTH DIRECTIONS
=============================================================================

The response has no Content-Length, so the client only knows the body is
complete when the connection ends. close() therefore always does:

    1. shutdown(SHUT_RDWR)   FIN to the client, stop reading
    2. close()               release the file descriptor

Connection is a context manager so that this happens on every exit path,
including exceptions.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──► READING ──► WRITING ──► CLOSED
              │                       ▲
              └───────────────────────┘
                 (request rejected)

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Tuple
import uuid


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states, used in logs and by the handler."""
    NEW = "new"              # Just accepted
    READING = "reading"      # Collecting the request
    WRITING = "writing"      # At least one response byte has been sent
    CLOSED = "closed"        # Socket released


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client's address tuple (ip, port, ...).
        id: Short unique id, used as a log prefix.
        state: Current ConnectionState.
        created_at: Timestamp when the connection was accepted.
        bytes_sent: Response bytes written so far.
    """

    # Required parameters
    socket: socket.socket
    address: Tuple

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    bytes_sent: int = 0

    # Configuration (passed from HostConfig)
    read_timeout: float = 0.1
    recv_size: int = 4096
    max_request_size: int = 64 * 1024

    # ─────────────────────────────────────────────────────────────────────
    # PROPERTIES
    # ─────────────────────────────────────────────────────────────────────

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def response_started(self) -> bool:
        """True once any response byte has gone out."""
        return self.bytes_sent > 0

    @property
    def is_closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    # ─────────────────────────────────────────────────────────────────────
    # READING
    # ─────────────────────────────────────────────────────────────────────

    def read_until_deadline(self) -> bytes:
        """
        Read everything the client sends before the read deadline.

        Never raises for timeouts or socket errors: the read is best-effort
        and whatever was received is returned (possibly b"").

        Returns:
            The accumulated request bytes.
        """
        self.state = ConnectionState.READING
        deadline = time.monotonic() + self.read_timeout
        buffer = bytearray()

        while len(buffer) < self.max_request_size:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break

            try:
                self.socket.settimeout(remaining)
                chunk = self.socket.recv(min(self.recv_size, self.max_request_size - len(buffer)))
            except socket.timeout:
                break
            except OSError as e:
                logger.debug(f"[{self.id}] Read stopped early: {e}")
                break

            if not chunk:
                break  # Client closed its write side
            buffer += chunk

        return bytes(buffer)

    # ─────────────────────────────────────────────────────────────────────
    # WRITING
    # ─────────────────────────────────────────────────────────────────────

    def send(self, data: bytes) -> bool:
        """
        Send bytes to the client.

        sendall() blocks until everything is written. There is no write
        timeout.

        Returns:
            True if the data was sent, False if the client went away.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.settimeout(None)
            self.socket.sendall(data)
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False
        self.bytes_sent += len(data)
        return True

    # ─────────────────────────────────────────────────────────────────────
    # CLOSING
    # ─────────────────────────────────────────────────────────────────────

    def close(self) -> None:
        """
        Shut down both directions and release the socket.

        Safe to call more than once.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(
            f"[{self.id}] Connection closed after sending {self.bytes_sent} bytes "
            f"in {self.age:.3f}s"
        )

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
