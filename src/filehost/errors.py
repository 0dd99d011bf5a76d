"""
=============================================================================
ERROR TAXONOMY
=============================================================================

Every failure the file host can run into has its own exception class.

    FileHostError
    ├── ConfigError          Startup configuration is unusable (fatal)
    ├── BindError            One listen endpoint could not be bound
    ├── SpawnError           A handler thread could not be started
    └── RequestError         One request could not be served
        ├── MalformedRequest     400 - no request line / not enough tokens
        ├── NotFound             404 - virtual path not in the route table
        ├── FileOpenError        500 - file registered but cannot be opened
        └── FileReadError        500 - read failed while streaming

Only ConfigError is allowed to stop the process. Everything else is caught
at the listener or handler boundary, logged, and the endpoint or connection
is abandoned.

Custom exceptions with metadata (status code, bind kind) keep the handler
code free of tuples and string matching.

=============================================================================
"""

import errno
from enum import Enum
from typing import Optional


class FileHostError(Exception):
    """Base class for all file host errors."""


class ConfigError(FileHostError):
    """Raised when startup configuration is invalid."""


# =============================================================================
# BIND ERRORS
# =============================================================================

class BindErrorKind(Enum):
    """Why a listen endpoint could not be bound."""
    PERMISSION_DENIED = "permission_denied"
    ADDRESS_IN_USE = "address_in_use"
    ADDRESS_UNAVAILABLE = "address_unavailable"
    OTHER = "other"

    @classmethod
    def from_os_error(cls, error: OSError) -> "BindErrorKind":
        """
        Classify an OSError raised by bind().

        EACCES/EPERM show up for privileged ports (< 1024) when not root.
        EADDRINUSE means another socket holds the port.
        EADDRNOTAVAIL means the IP is not assigned to any local interface.
        """
        if isinstance(error, PermissionError) or error.errno in (errno.EACCES, errno.EPERM):
            return cls.PERMISSION_DENIED
        if error.errno == errno.EADDRINUSE:
            return cls.ADDRESS_IN_USE
        if error.errno == errno.EADDRNOTAVAIL:
            return cls.ADDRESS_UNAVAILABLE
        return cls.OTHER


class BindError(FileHostError):
    """
    Raised when a listener cannot bind its endpoint.

    The message is the operator-facing diagnostic for the failure kind.

    Attributes:
        kind: The BindErrorKind.
        endpoint: Text form of the endpoint (host:port).
        cause: The underlying OSError, if any.
    """

    def __init__(self, kind: BindErrorKind, endpoint: str, cause: Optional[OSError] = None):
        self.kind = kind
        self.endpoint = endpoint
        self.cause = cause
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.kind is BindErrorKind.PERMISSION_DENIED:
            return (
                f"Failed to bind to address {self.endpoint} due to insufficient "
                f"permission. Try running as sudo/administrator."
            )
        if self.kind is BindErrorKind.ADDRESS_IN_USE:
            return (
                f"Failed to bind to address {self.endpoint} since it is already in use. "
                f"Try stopping the process already using this address."
            )
        if self.kind is BindErrorKind.ADDRESS_UNAVAILABLE:
            return (
                f"Failed to bind to address {self.endpoint} since it doesn't exist. "
                f"Try setting the address to a real interface that is owned by this device."
            )
        return f"Failed to bind to address {self.endpoint}: {self.cause}"

    @classmethod
    def from_os_error(cls, endpoint: str, error: OSError) -> "BindError":
        return cls(BindErrorKind.from_os_error(error), endpoint, error)


class SpawnError(FileHostError):
    """Raised when a handler thread cannot be started for a connection."""


# =============================================================================
# REQUEST ERRORS
# =============================================================================

class RequestError(FileHostError):
    """
    A single request could not be served.

    `status_code` is only put on the wire when error responses are enabled;
    by default the client just sees the connection close.
    """

    status_code: int = 500


class MalformedRequest(RequestError):
    """No request line, or the request line has fewer than two tokens."""
    status_code = 400


class NotFound(RequestError):
    """The requested virtual path is not in the route table."""
    status_code = 404


class FileOpenError(RequestError):
    """The resolved local file could not be opened."""
    status_code = 500


class FileReadError(RequestError):
    """Reading the local file failed partway through the response."""
    status_code = 500
