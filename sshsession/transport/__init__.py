"""
Transport providers - the SSH primitives a session client drives.
"""

from .base import TransportProvider
from .memory import InMemoryTransport, MemoryHandle, MemoryStream

__all__ = [
    "TransportProvider",
    "InMemoryTransport",
    "MemoryHandle",
    "MemoryStream",
]
