"""
=============================================================================
HTTP MODULE
=============================================================================

The sliver of HTTP the file host needs:

- status_codes.py: The status lines we can send
- request.py:      Pulling the path token out of the request line
- routes.py:       The virtual path → local file table

=============================================================================
"""

from .status_codes import HTTPStatus, SUCCESS_STATUS_LINE
from .request import RequestLine, parse_request_line
from .routes import RouteTable, build_route_table

__all__ = [
    "HTTPStatus",
    "SUCCESS_STATUS_LINE",
    "RequestLine",
    "parse_request_line",
    "RouteTable",
    "build_route_table",
]
