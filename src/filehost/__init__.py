"""
=============================================================================
FILEHOST - Host Local Files Over a Bare-Bones HTTP
=============================================================================

Point it at some local files, give each a URL-style name, pick one or more
addresses, and anything that can speak `GET /name HTTP/1.1` can download
them: curl, a browser, wget, netcat.

    $ filehost -f ./build/app.zip /app.zip -a 0.0.0.0:8080
    Hosting:
        /home/me/project/build/app.zip  as  /app.zip

    On:
        0.0.0.0:8080

    Press [ENTER] to close server.

=============================================================================
WHAT IT DOES (AND DOESN'T)
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   ✓ Exact-match lookup of the request path                          │
    │   ✓ One thread per listen address, one thread per connection        │
    │   ✓ 100 ms read deadline so idle clients can't pin a thread         │
    │   ✓ Streams files in small chunks (no full-file buffering)          │
    │                                                                      │
    │   ✗ No headers (no Content-Length, no Content-Type)                 │
    │   ✗ No keep-alive: one request, then the connection closes          │
    │   ✗ No TLS, no directory listings, no patterns or prefixes          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    filehost/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m filehost)
    ├── server.py            # FileHost: wires routes, listeners, console
    ├── config.py            # HostConfig, ListenEndpoint
    ├── errors.py            # Error taxonomy
    ├── core/
    │   ├── connection.py    # Deadline reads, sends, close both halves
    │   └── listener.py      # Bind + accept loop, thread per connection
    ├── http/
    │   ├── request.py       # Request line → path token
    │   ├── routes.py        # RouteTable (virtual path → local file)
    │   └── status_codes.py  # Status lines
    └── handlers/
        └── file_handler.py  # read → parse → resolve → stream → close

=============================================================================
EMBEDDING
=============================================================================

    from filehost import FileHost, HostConfig, ListenEndpoint, build_route_table

    routes = build_route_table(["notes.txt", "/notes.txt"])
    host = FileHost(routes, [ListenEndpoint("127.0.0.1", 0)], HostConfig())
    listeners = host.start()
    print(listeners[0].address)   # ('127.0.0.1', 54321)
    ...
    host.close()

=============================================================================
"""

__version__ = "1.0.0"

from .config import HostConfig, ListenEndpoint
from .errors import (
    FileHostError,
    ConfigError,
    BindError,
    BindErrorKind,
    SpawnError,
    RequestError,
    MalformedRequest,
    NotFound,
    FileOpenError,
    FileReadError,
)
from .http.routes import RouteTable, build_route_table
from .server import FileHost

__all__ = [
    "FileHost",
    "HostConfig",
    "ListenEndpoint",
    "RouteTable",
    "build_route_table",
    "FileHostError",
    "ConfigError",
    "BindError",
    "BindErrorKind",
    "SpawnError",
    "RequestError",
    "MalformedRequest",
    "NotFound",
    "FileOpenError",
    "FileReadError",
    "__version__",
]
