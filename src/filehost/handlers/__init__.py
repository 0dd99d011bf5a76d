"""
Connection handlers.

A handler is any callable taking a Connection. Listeners call it on a fresh
thread for every accepted connection and close the connection afterwards.
"""

from .file_handler import FileHandler

__all__ = ["FileHandler"]
