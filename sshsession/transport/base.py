"""
Transport provider interface.

The session client never speaks SSH itself. It drives a provider that
knows how to probe a host, open and authenticate a secure channel, run
commands and copy files.

Each primitive reports refusal with a falsy return. A provider may raise
TransportError instead when it has an underlying cause worth keeping;
the client handles both the same way.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Optional


class TransportProvider(ABC):
    """Capability surface consumed by SSHClient."""

    @abstractmethod
    def probe_reachable(self, address: str, port: int, timeout: float) -> bool:
        """Can a bare TCP connection reach address:port within timeout?"""
        pass

    @abstractmethod
    def open_handshake(self, address: str) -> Optional[Any]:
        """Open a secure channel. Returns an opaque handle or None."""
        pass

    @abstractmethod
    def auth_password(self, handle: Any, username: str, password: str) -> bool:
        pass

    @abstractmethod
    def auth_public_key(
        self,
        handle: Any,
        username: str,
        public_key_path: str,
        private_key_path: str,
        passphrase: Optional[str] = None,
    ) -> bool:
        pass

    @abstractmethod
    def exec(self, handle: Any, command: str) -> Optional[Any]:
        """Start a command. Returns a stream handle or None."""
        pass

    @abstractmethod
    def drain(self, stream: Any) -> str:
        """Block until the stream is exhausted and return its text."""
        pass

    @abstractmethod
    def send_file(
        self,
        handle: Any,
        local_path: str,
        remote_path: str,
        permissions: Optional[int] = None,
    ) -> bool:
        pass

    @abstractmethod
    def receive_file(self, handle: Any, remote_path: str, local_path: str) -> bool:
        pass

    @abstractmethod
    def close(self, handle: Any) -> bool:
        pass
