"""
=============================================================================
FILE HOST
=============================================================================

Ties the pieces together:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   RouteTable ───────────────┐   (built once, shared read-only)       │
    │                             ▼                                        │
    │                       FileHandler                                    │
    │                             │                                        │
    │        ┌────────────────────┼────────────────────┐                   │
    │        ▼                    ▼                    ▼                   │
    │   Listener A           Listener B           Listener C               │
    │   (own thread)         (own thread)         (own thread)             │
    │        │                    │                    │                   │
    │   thread/conn          thread/conn          thread/conn              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Startup binds every endpoint first, synchronously, so bind failures are
reported before the "Press [ENTER]" prompt. A failed endpoint is skipped;
the rest keep serving.

All threads are daemons. When the main thread returns (operator pressed
ENTER, stdin closed, or Ctrl+C) the process exits and takes every listener
and in-flight handler with it. There is no graceful drain.

=============================================================================
"""

import sys
import logging
import threading
from typing import List, Optional, Sequence, TextIO

from .config import HostConfig, ListenEndpoint
from .core.listener import Listener
from .errors import BindError
from .handlers.file_handler import FileHandler
from .http.routes import RouteTable


logger = logging.getLogger(__name__)


class FileHost:
    """
    Serve a RouteTable on one or more endpoints.

    Usage:
        routes = build_route_table(["notes.txt", "/notes.txt"])
        host = FileHost(routes, [ListenEndpoint.parse("0.0.0.0:8080")])
        host.run()   # blocks until ENTER
    """

    def __init__(
        self,
        routes: RouteTable,
        endpoints: Sequence[ListenEndpoint],
        config: Optional[HostConfig] = None,
    ):
        self.config = config or HostConfig()
        self.config.validate()  # Fail-fast on invalid config

        self.routes = routes
        self.endpoints = list(endpoints)
        self.handler = FileHandler(routes, self.config)

        self.listeners: List[Listener] = []
        self._threads: List[threading.Thread] = []

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self) -> List[Listener]:
        """
        Bind every endpoint and start its accept loop on a daemon thread.

        Endpoints that fail to bind are logged and skipped.

        Returns:
            The listeners that are now accepting connections.
        """
        for endpoint in self.endpoints:
            listener = Listener(endpoint, self.handler.handle, self.config)
            try:
                listener.bind()
            except BindError as e:
                logger.error(str(e))
                continue

            thread = threading.Thread(
                target=listener.serve_forever,
                name=str(endpoint),
                daemon=True,
            )
            thread.start()

            self.listeners.append(listener)
            self._threads.append(thread)

        if self.endpoints and not self.listeners:
            logger.error("No endpoint could be bound; nothing is being served")

        return self.listeners

    def run(self, stdin: Optional[TextIO] = None) -> None:
        """
        Start serving, print the summary, and block until the operator
        presses ENTER (or stdin reaches EOF, or Ctrl+C).
        """
        self.setup_logging()
        self.print_summary()
        self.start()

        print("\nPress [ENTER] to close server.")
        try:
            (stdin or sys.stdin).readline()
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self.close()

    def close(self) -> None:
        """Close every listening socket. In-flight handlers are not waited for."""
        for listener in self.listeners:
            listener.close()
        for thread in self._threads:
            thread.join(timeout=1.0)
        self.listeners.clear()
        self._threads.clear()

    # =========================================================================
    # CONSOLE OUTPUT
    # =========================================================================

    def print_summary(self) -> None:
        """
        Print what is hosted and where.

            Hosting:
                /home/me/a.txt  as  /a.txt

            On:
                127.0.0.1:8080
        """
        self.routes.print_routes()
        print("\nOn:")
        for endpoint in self.endpoints:
            print(f"    {endpoint}")

    def setup_logging(self) -> None:
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("filehost").setLevel(level)
