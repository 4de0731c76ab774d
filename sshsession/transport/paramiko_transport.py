"""
Transport provider using Paramiko.
"""

from __future__ import annotations
import os
import socket
import logging
import warnings
from typing import Optional

import paramiko

from .base import TransportProvider
from ..config import ClientSettings
from ..session.errors import TransportError

logger = logging.getLogger(__name__)


# =============================================================================
# Legacy Device Support - Algorithm Configuration
# =============================================================================
# Broad compatibility with older servers while still preferring modern
# algorithms.

PREFERRED_CIPHERS = (
    "aes128-ctr",
    "aes192-ctr",
    "aes256-ctr",
    "aes128-gcm@openssh.com",
    "aes256-gcm@openssh.com",
    "chacha20-poly1305@openssh.com",
    "aes128-cbc",
    "aes192-cbc",
    "aes256-cbc",
    "3des-cbc",
)

PREFERRED_KEX = (
    "curve25519-sha256",
    "curve25519-sha256@libssh.org",
    "ecdh-sha2-nistp256",
    "ecdh-sha2-nistp384",
    "ecdh-sha2-nistp521",
    "diffie-hellman-group14-sha256",
    "diffie-hellman-group16-sha512",
    "diffie-hellman-group-exchange-sha256",
    "diffie-hellman-group14-sha1",
    "diffie-hellman-group-exchange-sha1",
    "diffie-hellman-group1-sha1",
)

PREFERRED_KEYS = (
    "rsa-sha2-512",
    "rsa-sha2-256",
    "ssh-rsa",
    "ecdsa-sha2-nistp256",
    "ecdsa-sha2-nistp384",
    "ecdsa-sha2-nistp521",
    "ssh-ed25519",
)

# Disabled algorithms to force RSA SHA-1 signatures
# Required for old OpenSSH servers (< 7.2) that don't support rsa-sha2-*
RSA_SHA1_DISABLED_ALGORITHMS = {
    'pubkeys': ['rsa-sha2-256', 'rsa-sha2-512']
}

KEY_CLASSES = (
    paramiko.RSAKey,
    paramiko.Ed25519Key,
    paramiko.ECDSAKey,
)

READ_CHUNK = 32768
# Seconds to wait on stdout before checking stderr again
POLL_INTERVAL = 0.1

# Flag to track if we've applied global transport settings
_transport_configured = False


def _apply_global_transport_settings() -> None:
    """
    Apply algorithm preferences globally to Paramiko for legacy servers.

    Modifies the Paramiko Transport class, so it only runs once per process.
    """
    global _transport_configured

    if _transport_configured:
        return

    # Suppress deprecation warnings for legacy algorithms
    warnings.filterwarnings('ignore', category=DeprecationWarning, module='paramiko')

    try:
        available_ciphers = set(paramiko.Transport._cipher_info.keys())
        available_kex = set(paramiko.Transport._kex_info.keys())
        available_keys = set(paramiko.Transport._key_info.keys())

        ciphers = tuple(c for c in PREFERRED_CIPHERS if c in available_ciphers)
        kex = tuple(k for k in PREFERRED_KEX if k in available_kex)
        keys = tuple(k for k in PREFERRED_KEYS if k in available_keys)

        paramiko.Transport._preferred_ciphers = ciphers
        paramiko.Transport._preferred_kex = kex
        paramiko.Transport._preferred_keys = keys

        logger.info(
            f"Applied global transport settings: "
            f"{len(ciphers)} ciphers, {len(kex)} kex, {len(keys)} keys"
        )
        logger.debug(f"Ciphers: {ciphers}")
        logger.debug(f"KEX: {kex}")
        logger.debug(f"Keys: {keys}")

    except AttributeError as e:
        logger.warning(f"Could not apply global transport settings: {e}")

    _transport_configured = True


def load_private_key(path: str, passphrase: Optional[str] = None) -> paramiko.PKey:
    """
    Load a private key file, trying each supported key type.

    Raises:
        TransportError: key is encrypted and no passphrase was given,
            or the file is not a key Paramiko understands
    """
    path = os.path.expanduser(path)

    for key_class in KEY_CLASSES:
        try:
            return key_class.from_private_key_file(path, password=passphrase)
        except paramiko.PasswordRequiredException as e:
            raise TransportError(f"Private key {path} requires a passphrase") from e
        except (paramiko.SSHException, ValueError):
            continue
        except OSError as e:
            raise TransportError(f"Unable to read private key {path}: {e}") from e

    raise TransportError(f"Unable to parse private key {path}")


class ParamikoTransport(TransportProvider):
    """
    Transport provider backed by paramiko.Transport.

    Uses a bare Transport rather than paramiko.SSHClient so the handshake
    and the login are separate steps. The handle is the Transport itself.
    """

    def __init__(self, settings: ClientSettings = None):
        self.settings = settings or ClientSettings()
        self._use_rsa_sha1 = self.settings.rsa_sha1

        if self.settings.legacy_algorithms:
            _apply_global_transport_settings()

    def probe_reachable(self, address: str, port: int, timeout: float) -> bool:
        try:
            sock = socket.create_connection((address, port), timeout=timeout)
        except OSError as e:
            logger.debug(f"Probe {address}:{port} failed: {e}")
            return False
        sock.close()
        return True

    def open_handshake(self, address: str) -> Optional[paramiko.Transport]:
        port = self.settings.port
        try:
            sock = socket.create_connection(
                (address, port), timeout=self.settings.connect_timeout
            )
        except OSError as e:
            raise TransportError(f"Socket connect to {address}:{port} failed: {e}") from e

        kwargs = {}
        if self._use_rsa_sha1:
            kwargs['disabled_algorithms'] = RSA_SHA1_DISABLED_ALGORITHMS
            logger.debug("Using RSA SHA-1 mode")

        try:
            transport = paramiko.Transport(sock, **kwargs)
        except Exception as e:
            sock.close()
            raise TransportError(f"Unable to set up transport for {address}: {e}") from e
        transport.banner_timeout = self.settings.banner_timeout

        try:
            transport.start_client(timeout=self.settings.connect_timeout)
        except (paramiko.SSHException, OSError) as e:
            transport.close()
            raise TransportError(f"SSH handshake with {address} failed: {e}") from e

        if self.settings.verify_host_key and not self._host_key_known(address, transport):
            transport.close()
            return None

        transport.set_keepalive(self.settings.keepalive_interval)
        logger.debug(
            f"Negotiated: cipher={transport.remote_cipher}, "
            f"mac={transport.remote_mac}"
        )
        return transport

    def _host_key_known(self, address: str, transport: paramiko.Transport) -> bool:
        """Check the server key against the known_hosts file."""
        path = os.path.expanduser(self.settings.known_hosts_path)
        host_keys = paramiko.HostKeys()
        try:
            host_keys.load(path)
        except OSError as e:
            logger.warning(f"Cannot read known hosts {path}: {e}")
            return False

        lookup = address if self.settings.port == 22 else f"[{address}]:{self.settings.port}"
        key = transport.get_remote_server_key()
        if host_keys.check(lookup, key):
            return True

        logger.warning(
            f"Host key for {lookup} ({key.get_name()}) not found in {path}"
        )
        return False

    def auth_password(self, handle: paramiko.Transport, username: str, password: str) -> bool:
        try:
            handle.auth_password(username, password)
        except paramiko.AuthenticationException as e:
            logger.debug(f"Password auth for {username} rejected: {e}")
            return False
        except paramiko.SSHException as e:
            raise TransportError(f"Password auth failed: {e}") from e
        return handle.is_authenticated()

    def auth_public_key(
        self,
        handle: paramiko.Transport,
        username: str,
        public_key_path: str,
        private_key_path: str,
        passphrase: Optional[str] = None,
    ) -> bool:
        pkey = load_private_key(private_key_path, passphrase)

        if public_key_path and not self._attach_public_key(pkey, public_key_path):
            return False

        try:
            handle.auth_publickey(username, pkey)
        except paramiko.AuthenticationException as e:
            logger.debug(f"Key auth for {username} rejected: {e}")
            return False
        except paramiko.SSHException as e:
            raise TransportError(f"Key auth failed: {e}") from e
        return handle.is_authenticated()

    def _attach_public_key(self, pkey: paramiko.PKey, public_key_path: str) -> bool:
        """
        Check the public half against the private key.

        A certificate is loaded onto the key instead. A missing public key
        file is fine, the private key is enough to sign.
        """
        path = os.path.expanduser(public_key_path)
        if not os.path.exists(path):
            return True

        try:
            blob = paramiko.PublicBlob.from_file(path)
        except (ValueError, OSError) as e:
            raise TransportError(f"Unable to read public key {path}: {e}") from e

        if blob.key_type.endswith("-cert-v01@openssh.com"):
            pkey.load_certificate(path)
            return True

        if blob.key_blob != pkey.asbytes():
            logger.warning(f"Public key {path} does not match the private key")
            return False
        return True

    def _require_handle(self, handle: Optional[paramiko.Transport]) -> paramiko.Transport:
        if handle is None or not handle.is_active():
            raise TransportError("No open connection")
        return handle

    def exec(self, handle: paramiko.Transport, command: str) -> Optional[paramiko.Channel]:
        handle = self._require_handle(handle)
        channel = None
        try:
            channel = handle.open_session()
            if self.settings.combine_stderr:
                channel.set_combine_stderr(True)
            channel.exec_command(command)
        except (paramiko.SSHException, OSError) as e:
            if channel is not None:
                channel.close()
            raise TransportError(f"exec '{command}' failed: {e}") from e
        return channel

    def drain(self, stream: paramiko.Channel) -> str:
        """
        Read the command's output until it finishes.

        stdout and stderr share one channel window, and Paramiko only
        reopens it for bytes that are read, so stderr is consumed while
        waiting on stdout.
        """
        out, err = [], []
        try:
            stream.settimeout(POLL_INTERVAL)
            while True:
                while stream.recv_stderr_ready():
                    err.append(stream.recv_stderr(READ_CHUNK))
                try:
                    chunk = stream.recv(READ_CHUNK)
                except socket.timeout:
                    continue
                if not chunk:
                    break
                out.append(chunk)

            # stdout is at EOF; take whatever stderr is still in flight
            stream.settimeout(None)
            while True:
                chunk = stream.recv_stderr(READ_CHUNK)
                if not chunk:
                    break
                err.append(chunk)
            status = stream.recv_exit_status()
        except (paramiko.SSHException, OSError) as e:
            raise TransportError(f"Reading command output failed: {e}") from e
        finally:
            stream.close()

        logger.debug(f"Command exited with status {status}")
        if err:
            text = b"".join(err).decode("utf-8", errors="replace").rstrip()
            logger.debug(f"stderr: {text}")
        return b"".join(out).decode("utf-8", errors="replace")

    def send_file(
        self,
        handle: paramiko.Transport,
        local_path: str,
        remote_path: str,
        permissions: Optional[int] = None,
    ) -> bool:
        handle = self._require_handle(handle)
        mode = self.settings.default_file_permissions if permissions is None else permissions
        try:
            with paramiko.SFTPClient.from_transport(handle) as sftp:
                sftp.put(os.path.expanduser(local_path), remote_path)
                sftp.chmod(remote_path, mode)
        except (paramiko.SSHException, OSError) as e:
            raise TransportError(f"Upload {local_path} -> {remote_path} failed: {e}") from e
        logger.debug(f"Uploaded {local_path} -> {remote_path} ({oct(mode)})")
        return True

    def receive_file(self, handle: paramiko.Transport, remote_path: str, local_path: str) -> bool:
        handle = self._require_handle(handle)
        try:
            with paramiko.SFTPClient.from_transport(handle) as sftp:
                sftp.get(remote_path, os.path.expanduser(local_path))
        except (paramiko.SSHException, OSError) as e:
            raise TransportError(f"Download {remote_path} -> {local_path} failed: {e}") from e
        logger.debug(f"Downloaded {remote_path} -> {local_path}")
        return True

    def close(self, handle: paramiko.Transport) -> bool:
        try:
            handle.close()
        except (paramiko.SSHException, OSError) as e:
            raise TransportError(f"Close failed: {e}") from e
        return True
