"""
=============================================================================
FILE HOST CONFIGURATION
=============================================================================

Two kinds of configuration exist:

1. WHAT to serve and WHERE: the route pairs and listen endpoints.
   These come from the command line and have no defaults.

2. HOW to serve it: timeouts, chunk sizes, logging. These live in the
   HostConfig dataclass below and all have sensible defaults.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── filehost --read-timeout 0.5 ...                           │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── FILEHOST_READ_TIMEOUT=0.5 filehost ...                    │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Configuration is validated eagerly at startup. A bad value is a
ConfigError before any socket is opened.

=============================================================================
"""

import os
import socket
from dataclasses import dataclass

from .errors import ConfigError


_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class HostConfig:
    """
    Tunables for listeners and connection handlers.

    Development:
        HostConfig(log_level="DEBUG")    # Dump every raw request

    Slow clients (e.g. typing requests by hand in telnet):
        HostConfig(read_timeout=10.0)
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONNECTION SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    read_timeout: float = 0.1
    """
    Read deadline in seconds for the whole request.
    This is the only timeout in the system: it bounds how long an idle or
    slow client can hold a handler thread. Whatever arrived before the
    deadline is treated as the request.
    """

    chunk_size: int = 1024
    """
    Bytes read from the local file and written to the socket per step.
    """

    max_request_size: int = 64 * 1024
    """
    Stop reading the request once this many bytes are buffered.
    Only the first line is ever used, so anything past this is noise.
    """

    backlog: int = 128
    """
    Listen queue length for each endpoint.
    """

    # ─────────────────────────────────────────────────────────────────────
    # PROTOCOL
    # ─────────────────────────────────────────────────────────────────────

    error_responses: bool = False
    """
    Send a bare error status line (400/404/500) when a request fails
    before any bytes were written.
    Off by default: failed requests just see the connection close.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR).
    DEBUG also logs the raw text of every request.
    """

    @classmethod
    def from_env(cls) -> "HostConfig":
        """
        Create configuration from environment variables.

        FILEHOST_LOG_LEVEL        Logging level (default: INFO)
        FILEHOST_READ_TIMEOUT     Read deadline in seconds (default: 0.1)
        FILEHOST_CHUNK_SIZE       Streaming chunk size (default: 1024)
        FILEHOST_ERROR_RESPONSES  1/true/yes/on to send error status lines
        """
        try:
            return cls(
                read_timeout=float(os.getenv("FILEHOST_READ_TIMEOUT", "0.1")),
                chunk_size=int(os.getenv("FILEHOST_CHUNK_SIZE", "1024")),
                error_responses=os.getenv("FILEHOST_ERROR_RESPONSES", "").lower() in _TRUTHY,
                log_level=os.getenv("FILEHOST_LOG_LEVEL", "INFO"),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid environment configuration: {e}") from e

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigError: On the first invalid value.
        """
        if self.read_timeout <= 0:
            raise ConfigError(f"read_timeout must be > 0, got {self.read_timeout}")

        if self.chunk_size < 1:
            raise ConfigError(f"chunk_size must be >= 1, got {self.chunk_size}")

        if self.max_request_size < 1:
            raise ConfigError(f"max_request_size must be >= 1, got {self.max_request_size}")

        if self.backlog < 1:
            raise ConfigError(f"backlog must be >= 1, got {self.backlog}")

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(f"Unknown log level: {self.log_level}")


@dataclass(frozen=True)
class ListenEndpoint:
    """
    One address to listen on.

    Text form is "host:port"; IPv6 hosts are bracketed: "[::1]:8080".

        >>> ListenEndpoint.parse("127.0.0.1:8080")
        ListenEndpoint(host='127.0.0.1', port=8080)
        >>> str(ListenEndpoint.parse("[::1]:8080"))
        '[::1]:8080'
    """
    host: str
    port: int

    @property
    def family(self) -> socket.AddressFamily:
        """AF_INET6 for IPv6 literals, AF_INET otherwise."""
        return socket.AF_INET6 if ":" in self.host else socket.AF_INET

    def __str__(self) -> str:
        if self.family == socket.AF_INET6:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    @classmethod
    def parse(cls, text: str) -> "ListenEndpoint":
        """
        Parse "host:port" or "[v6-host]:port".

        Raises:
            ConfigError: If the text is not a valid endpoint.
        """
        if text.startswith("["):
            host, sep, port_text = text[1:].partition("]:")
            if not sep:
                raise ConfigError(f"Invalid listen address {text!r}, expected [host]:port")
        else:
            host, sep, port_text = text.rpartition(":")
            if not sep or ":" in host:
                raise ConfigError(f"Invalid listen address {text!r}, expected host:port")

        if not host:
            raise ConfigError(f"Listen address {text!r} is missing a host")

        try:
            port = int(port_text)
        except ValueError:
            raise ConfigError(f"Invalid port in listen address {text!r}") from None

        if not 0 <= port < 65536:
            raise ConfigError(f"Invalid port: {port}. Must be 0-65535.")

        return cls(host=host, port=port)
