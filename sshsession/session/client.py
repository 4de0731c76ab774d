"""
SSH session client.

Owns one transport handle to one host and the authentication state that
goes with it. Everything is synchronous: each call blocks until the
transport provider finishes or fails.
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Optional, Type

from .base import SessionClient, SessionState
from .errors import (
    SSHSessionError,
    SSHConnectionError,
    SSHAuthenticationError,
    SSHCommandError,
    TransportError,
)
from .output import OutputAggregator
from ..config import ClientSettings
from ..connection.profile import AuthConfig, AuthMethod
from ..transport.base import TransportProvider

logger = logging.getLogger(__name__)


class SSHClient(SessionClient):
    """
    Session with a single remote host.

    Usage:
        client = SSHClient("10.0.0.5")
        client.authenticate_with_password("admin", "secret")
        client.run_command("uptime")
        print(client.last_output)
        client.disconnect()

        # Context manager (disconnects on exit, raising if it can't)
        with SSHClient("10.0.0.5", auth=AuthConfig.password_auth("admin", "secret")) as c:
            c.authenticate().run_command("uptime")

    Not thread-safe. Use one client per concurrent session.
    """

    def __init__(
        self,
        server: str,
        auth: AuthConfig = None,
        transport: TransportProvider = None,
        settings: ClientSettings = None,
    ):
        """
        Args:
            server: Hostname or IP, fixed for the life of the client
            auth: Optional credentials used by authenticate()
            transport: Transport provider (Paramiko if omitted)
            settings: Connection settings (defaults if omitted)
        """
        self._server = server
        self.auth = auth
        self.settings = settings or ClientSettings()

        if transport is None:
            from ..transport.paramiko_transport import ParamikoTransport
            transport = ParamikoTransport(self.settings)
        self._transport = transport

        self._handle: Optional[Any] = None
        self._authenticated = False
        self._output = OutputAggregator()

    def __repr__(self) -> str:
        return f"<SSHClient {self._server} {self.state.name.lower()}>"

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def server(self) -> str:
        return self._server

    @property
    def authenticated(self) -> bool:
        return self._authenticated

    @property
    def state(self) -> SessionState:
        if self._handle is None:
            return SessionState.DISCONNECTED
        if self._authenticated:
            return SessionState.AUTHENTICATED
        return SessionState.CONNECTED

    @property
    def is_connected(self) -> bool:
        return self._handle is not None

    @property
    def transport(self) -> TransportProvider:
        return self._transport

    def _set_connection(self, handle: Optional[Any], authenticated: bool) -> None:
        """Update handle and auth flag together and log the transition."""
        old_state = self.state
        self._handle = handle
        self._authenticated = authenticated and handle is not None
        new_state = self.state
        if old_state != new_state:
            logger.info(f"Session state: {old_state.name} -> {new_state.name} ({self._server})")

    def _invoke(
        self,
        error: Type[SSHSessionError],
        message: str,
        primitive: Callable[..., Any],
        *args: Any,
    ) -> Any:
        """Call a transport primitive, raising `error` if it refuses or fails."""
        try:
            result = primitive(*args)
        except TransportError as e:
            logger.debug(f"{getattr(primitive, '__name__', primitive)} failed: {e}")
            raise error(message) from e
        if not result:
            raise error(message)
        return result

    # -------------------------------------------------------------------------
    # Connection
    # -------------------------------------------------------------------------

    def connect(self) -> SSHClient:
        """
        Open a fresh connection to the server.

        An existing connection is closed first; if that fails the new
        connection is never attempted. The new connection is not
        authenticated.

        Raises:
            SSHConnectionError: disconnect failed, server unreachable,
                or the handshake failed
        """
        if self._handle is not None:
            self.disconnect()

        port = self.settings.port
        timeout = self.settings.probe_timeout
        logger.debug(f"Probing {self._server}:{port} (timeout {timeout}s)")
        self._invoke(
            SSHConnectionError, SSHConnectionError.UNREACHABLE,
            self._transport.probe_reachable, self._server, port, timeout,
        )

        handle = self._invoke(
            SSHConnectionError, SSHConnectionError.CONNECT_FAILED,
            self._transport.open_handshake, self._server,
        )
        self._set_connection(handle, authenticated=False)
        return self

    def disconnect(self) -> SSHClient:
        """
        Close the connection. Does nothing when not connected.

        Raises:
            SSHConnectionError: the transport could not close the handle;
                state is left as it was so the call can be retried
        """
        if self._handle is None:
            return self

        self._invoke(
            SSHConnectionError, SSHConnectionError.DISCONNECT_FAILED,
            self._transport.close, self._handle,
        )
        self._set_connection(None, authenticated=False)
        return self

    def close(self) -> None:
        """Alias for disconnect(), for contextlib.closing()."""
        self.disconnect()

    def __enter__(self) -> SSHClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None:
            self.disconnect()
            return

        # Keep the body's exception; a failed close is only logged.
        try:
            self.disconnect()
        except SSHSessionError:
            logger.exception(f"Failed to disconnect from {self._server} after error")

    def __del__(self):
        # Finalizers can't raise; a failed close is logged.
        if getattr(self, "_handle", None) is None:
            return
        try:
            self.disconnect()
        except SSHSessionError:
            logger.exception(f"Failed to disconnect from {self._server} during cleanup")

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    def authenticate_with_password(self, username: str, password: str) -> SSHClient:
        """
        Reconnect and log in with a password.

        Raises:
            SSHConnectionError: the connection could not be (re)opened
            SSHAuthenticationError: the password was rejected; the
                connection stays open but unauthenticated
        """
        self.connect()
        self._invoke(
            SSHAuthenticationError, SSHAuthenticationError.PASSWORD_REJECTED,
            self._transport.auth_password, self._handle, username, password,
        )
        self._set_connection(self._handle, authenticated=True)
        return self

    def authenticate_with_public_key(
        self,
        username: str,
        public_key_path: str,
        private_key_path: str,
        passphrase: Optional[str] = None,
    ) -> SSHClient:
        """
        Reconnect and log in with a key pair.

        Raises:
            SSHConnectionError: the connection could not be (re)opened
            SSHAuthenticationError: the key was rejected; the connection
                stays open but unauthenticated
        """
        self.connect()
        self._invoke(
            SSHAuthenticationError, SSHAuthenticationError.PUBLIC_KEY_REJECTED,
            self._transport.auth_public_key,
            self._handle, username, public_key_path, private_key_path, passphrase,
        )
        self._set_connection(self._handle, authenticated=True)
        return self

    def authenticate(self) -> SSHClient:
        """Log in with the credentials given at construction."""
        auth = self.auth
        if auth is None:
            raise ValueError(f"No credentials bound to client for {self._server}")

        if auth.method == AuthMethod.PASSWORD:
            return self.authenticate_with_password(auth.username, auth.password)
        return self.authenticate_with_public_key(
            auth.username,
            auth.public_key_path,
            auth.key_path,
            auth.key_passphrase,
        )

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def run_command(self, command: str) -> SSHClient:
        """
        Run a command and wait for all of its output.

        The command is labelled in the transcript before it runs, so a
        failed command still shows up there. last_output only changes
        when output was read.

        Raises:
            SSHCommandError: the transport could not start or read the command
        """
        self._output.record_command(command)

        stream = self._invoke(
            SSHCommandError, SSHCommandError.EXEC_FAILED,
            self._transport.exec, self._handle, command,
        )
        try:
            output = self._transport.drain(stream)
        except TransportError as e:
            raise SSHCommandError(SSHCommandError.EXEC_FAILED) from e

        self._output.record_output(output)
        logger.debug(f"Ran '{command}' on {self._server}: {len(output)} chars")
        return self

    # -------------------------------------------------------------------------
    # File transfer
    # -------------------------------------------------------------------------

    def send_file(
        self,
        local_path: str,
        remote_path: str,
        permissions: Optional[int] = None,
    ) -> SSHClient:
        """
        Copy a local file to the server.

        Args:
            permissions: Mode for the remote file, e.g. 0o600
                (settings.default_file_permissions if omitted)

        Raises:
            SSHCommandError: the transfer failed
        """
        if permissions is None:
            permissions = self.settings.default_file_permissions
        self._invoke(
            SSHCommandError, SSHCommandError.SEND_FAILED,
            self._transport.send_file, self._handle, local_path, remote_path, permissions,
        )
        logger.info(f"Sent {local_path} -> {self._server}:{remote_path}")
        return self

    def receive_file(self, remote_path: str, local_path: str) -> SSHClient:
        """
        Copy a file from the server.

        Raises:
            SSHCommandError: the transfer failed
        """
        self._invoke(
            SSHCommandError, SSHCommandError.RECEIVE_FAILED,
            self._transport.receive_file, self._handle, remote_path, local_path,
        )
        logger.info(f"Received {self._server}:{remote_path} -> {local_path}")
        return self

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    @property
    def last_output(self) -> str:
        return self._output.last_output

    @property
    def session_transcript(self) -> str:
        return self._output.session_transcript

    def clear_last_output(self) -> SSHClient:
        self._output.clear_last_output()
        return self
