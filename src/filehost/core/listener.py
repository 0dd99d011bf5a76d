"""
=============================================================================
LISTENER
=============================================================================

One Listener per configured endpoint. It binds a TCP socket, then accepts
connections forever, handing each one to its own thread.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       THREAD-PER-CONNECTION                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Listener thread (127.0.0.1:8080)                                   │
    │       │                                                              │
    │       ├── accept() ──► Thread "127.0.0.1:8080-3f2a9c1e" ──► handle  │
    │       ├── accept() ──► Thread "127.0.0.1:8080-b81d07aa" ──► handle  │
    │       └── accept() ──► ...                                           │
    │                                                                      │
    │   Listener thread ([::1]:9000)                                       │
    │       └── accept() ──► ...                                           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The accept loop never waits for a handler. There is no thread pool and no
cap on concurrent handlers: every accepted connection gets a thread.

=============================================================================
FAILURE MODES
=============================================================================

    bind() fails           → BindError for this endpoint only.
                             Other endpoints keep running.
    Thread.start() fails   → SpawnError logged, this connection closed,
                             accept loop continues.
    accept() fails         → logged, accept loop continues.
    close() was called     → accept loop exits.

=============================================================================
"""

import socket
import logging
import threading
from typing import Callable, Optional, Tuple

from ..config import HostConfig, ListenEndpoint
from ..errors import BindError, SpawnError
from .connection import Connection


logger = logging.getLogger(__name__)


ConnectionHandler = Callable[[Connection], None]


class Listener:
    """
    Accept loop for one endpoint.

    Usage:
        listener = Listener(ListenEndpoint("127.0.0.1", 8080), handler.handle)
        listener.bind()            # raises BindError
        listener.serve_forever()   # blocks
    """

    def __init__(
        self,
        endpoint: ListenEndpoint,
        handler: ConnectionHandler,
        config: Optional[HostConfig] = None,
    ):
        self.endpoint = endpoint
        self.handler = handler
        self.config = config or HostConfig()

        self._socket: Optional[socket.socket] = None
        self._closed = False

    @property
    def is_bound(self) -> bool:
        return self._socket is not None

    @property
    def address(self) -> Tuple[str, int]:
        """
        The bound (host, port). With port 0 this is the port the OS picked.
        Before bind() it is the configured endpoint.
        """
        if self._socket is None:
            return (self.endpoint.host, self.endpoint.port)
        host, port = self._socket.getsockname()[:2]
        return (host, port)

    def bind(self) -> None:
        """
        Create, bind and listen on the endpoint's socket.

        Raises:
            BindError: With the kind of failure and an operator-facing
                diagnostic.
        """
        sock = None
        try:
            sock = socket.socket(self.endpoint.family, socket.SOCK_STREAM)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.endpoint.host, self.endpoint.port))
            sock.listen(self.config.backlog)
        except OSError as e:
            if sock is not None:
                sock.close()
            raise BindError.from_os_error(str(self.endpoint), e) from e

        self._socket = sock
        logger.info(f"Listening on {self.endpoint}")

    def serve_forever(self) -> None:
        """
        Accept connections until the listening socket is closed.

        Each connection is wrapped and handed to `self.handler` on a new
        thread. This call never returns on its own.
        """
        sock = self._socket
        if sock is None:
            raise RuntimeError("serve_forever() called before bind()")

        while not self._closed:
            try:
                client_socket, client_address = sock.accept()
            except OSError as e:
                if self._closed:
                    break
                logger.error(f"Accept error on {self.endpoint}: {e}")
                continue

            conn = Connection(
                socket=client_socket,
                address=client_address,
                read_timeout=self.config.read_timeout,
                max_request_size=self.config.max_request_size,
            )
            logger.debug(f"[{conn.id}] Accepted connection from {conn.client_ip}:{conn.client_port}")

            try:
                self._spawn(conn)
            except SpawnError as e:
                logger.error(f"[{conn.id}] {e}, continuing.")
                conn.close()

    def _spawn(self, conn: Connection) -> threading.Thread:
        """
        Start a handler thread for one connection.

        Raises:
            SpawnError: If the interpreter cannot start another thread.
        """
        thread = threading.Thread(
            target=self._run_handler,
            args=(conn,),
            name=f"{self.endpoint}-{conn.id}",
            daemon=True,
        )
        try:
            thread.start()
        except RuntimeError as e:
            raise SpawnError(f"Failed to spawn a thread to host a file: {e}") from e
        return thread

    def _run_handler(self, conn: Connection) -> None:
        """Thread target: run the handler, never let an exception escape."""
        try:
            self.handler(conn)
        except Exception:
            logger.exception(f"[{conn.id}] Unhandled error in connection handler")
        finally:
            conn.close()

    def run(self) -> None:
        """
        bind() then serve_forever(), reporting a BindError in the log
        instead of raising it.
        """
        try:
            self.bind()
        except BindError as e:
            logger.error(str(e))
            return
        self.serve_forever()

    def close(self) -> None:
        """Close the listening socket, which ends the accept loop."""
        self._closed = True
        if self._socket is None:
            return

        # accept() in another thread is not woken by close() alone on Linux
        try:
            self._socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        try:
            self._socket.close()
        except OSError:
            pass
        self._socket = None
        logger.info(f"Stopped listening on {self.endpoint}")
