"""
Abstract session client interface.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Optional, Iterable


class SessionState(Enum):
    """Session lifecycle states."""
    DISCONNECTED = auto()
    CONNECTED = auto()
    AUTHENTICATED = auto()


class SessionClient(ABC):
    """
    Abstract session client.

    One logical session to one remote host. Scripts talk to this,
    so a test double can stand in for a real SSH client.

    Mutating operations return the client itself so calls can be chained:

        client.authenticate_with_password("admin", "secret") \\
              .run_command("uname -a") \\
              .disconnect()
    """

    @property
    @abstractmethod
    def server(self) -> str:
        """Hostname or IP this client is bound to."""
        pass

    @property
    @abstractmethod
    def authenticated(self) -> bool:
        """Did the last authentication on the open connection succeed?"""
        pass

    @property
    @abstractmethod
    def state(self) -> SessionState:
        """Current session state."""
        pass

    @property
    @abstractmethod
    def last_output(self) -> str:
        """Output of the most recent command."""
        pass

    @property
    @abstractmethod
    def session_transcript(self) -> str:
        """Every command and its output, in the order they ran."""
        pass

    @abstractmethod
    def authenticate_with_password(self, username: str, password: str) -> SessionClient:
        """(Re)connect and authenticate with a plain password."""
        pass

    @abstractmethod
    def authenticate_with_public_key(
        self,
        username: str,
        public_key_path: str,
        private_key_path: str,
        passphrase: Optional[str] = None,
    ) -> SessionClient:
        """(Re)connect and authenticate with a key pair."""
        pass

    @abstractmethod
    def disconnect(self) -> SessionClient:
        """Close the connection if one is open."""
        pass

    @abstractmethod
    def run_command(self, command: str) -> SessionClient:
        """Run a command and block until its output is complete."""
        pass

    def run_commands(self, commands: Iterable[str]) -> SessionClient:
        """Run commands one after another."""
        for command in commands:
            self.run_command(command)
        return self

    @abstractmethod
    def send_file(
        self,
        local_path: str,
        remote_path: str,
        permissions: Optional[int] = None,
    ) -> SessionClient:
        """Copy a local file to the remote host."""
        pass

    @abstractmethod
    def receive_file(self, remote_path: str, local_path: str) -> SessionClient:
        """Copy a remote file to the local machine."""
        pass

    @abstractmethod
    def clear_last_output(self) -> SessionClient:
        """Reset last_output without touching the transcript."""
        pass
