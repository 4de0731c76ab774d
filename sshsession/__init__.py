"""
sshsession - A session-oriented SSH client for automation scripts.

One object per authenticated session with one host:
- Reachability probe before every connect
- Password or key pair authentication (always on a fresh connection)
- Serial command execution with last-output and whole-session transcript
- SFTP file transfer
- Deterministic disconnect (explicit, context manager, or on collection)

Transports:
- ParamikoTransport: real SSH via Paramiko
- InMemoryTransport: scripted double for tests
"""

__version__ = "0.1.0"

from .connection.profile import AuthConfig, AuthMethod
from .config import ClientSettings, SettingsManager, get_settings
from .session.base import SessionClient, SessionState
from .session.client import SSHClient
from .session.errors import (
    ErrorKind,
    SSHSessionError,
    SSHConnectionError,
    SSHAuthenticationError,
    SSHCommandError,
    TransportError,
)
from .transport.base import TransportProvider
from .transport.memory import InMemoryTransport

__all__ = [
    # Connection
    "AuthConfig",
    "AuthMethod",
    # Settings
    "ClientSettings",
    "SettingsManager",
    "get_settings",
    # Sessions
    "SessionClient",
    "SessionState",
    "SSHClient",
    # Errors
    "ErrorKind",
    "SSHSessionError",
    "SSHConnectionError",
    "SSHAuthenticationError",
    "SSHCommandError",
    "TransportError",
    # Transports
    "TransportProvider",
    "InMemoryTransport",
]
