"""
=============================================================================
CORE MODULE
=============================================================================

Low-level networking:

- connection.py: Deadline-bounded reads, sends, closing both directions
- listener.py:   Bind one endpoint, accept forever, thread per connection

=============================================================================
"""

from .connection import Connection, ConnectionState
from .listener import Listener

__all__ = ["Connection", "ConnectionState", "Listener"]
