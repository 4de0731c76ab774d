"""
Error taxonomy for session operations.

Every failure raised by a session client carries an ErrorKind so callers
can branch on it instead of on the message text.
"""

from __future__ import annotations
from enum import Enum, auto


class ErrorKind(Enum):
    """Which part of the session lifecycle failed."""
    CONNECTION = auto()
    AUTHENTICATION = auto()
    COMMAND = auto()


class SSHSessionError(Exception):
    """Base class for session errors."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"<{type(self).__name__} kind={self.kind.name} {self.message!r}>"


class SSHConnectionError(SSHSessionError, ConnectionError):
    """Host unreachable, handshake failed, or the channel would not close."""
    kind = ErrorKind.CONNECTION

    UNREACHABLE = "Server is unreachable."
    CONNECT_FAILED = "Unable to connect to server."
    DISCONNECT_FAILED = "Unable to disconnect from server."


class SSHAuthenticationError(SSHSessionError):
    """Credentials rejected by the server."""
    kind = ErrorKind.AUTHENTICATION

    PASSWORD_REJECTED = "Unable to authenticate with the server using plain password."
    PUBLIC_KEY_REJECTED = "Unable to authenticate with the server using public ssh key."


class SSHCommandError(SSHSessionError):
    """Command execution or file transfer failed."""
    kind = ErrorKind.COMMAND

    EXEC_FAILED = "Unable to process command on the remote server."
    SEND_FAILED = "Unable to send file to remote server."
    RECEIVE_FAILED = "Unable to receive file from remote server."


class TransportError(Exception):
    """
    Raised by a transport provider when the underlying library fails.

    The session client wraps it into one of the errors above, keeping it
    as __cause__.
    """
    pass
