"""
In-memory transport provider.

Scripted stand-in for a real SSH server so session logic can be exercised
without a network:

    transport = InMemoryTransport(outputs=["A\\n", "B\\n"])
    client = SSHClient("h", transport=transport)
    client.authenticate_with_password("u", "p").run_command("one")
"""

from __future__ import annotations
import itertools
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Tuple, Any

from .base import TransportProvider


@dataclass
class MemoryHandle:
    """Handle for an open in-memory connection."""
    id: int
    address: str
    username: Optional[str] = None
    open: bool = True


@dataclass
class MemoryStream:
    """Result stream for one executed command."""
    command: str
    output: str


@dataclass
class InMemoryTransport(TransportProvider):
    """
    Transport provider whose every outcome is a plain attribute.

    Flip a flag to make the matching primitive refuse. Command outputs are
    consumed in order; once exhausted, commands produce empty output.
    `calls` records every primitive invoked as (name, args).
    """
    reachable: bool = True
    handshake: bool = True
    password_ok: bool = True
    public_key_ok: bool = True
    exec_ok: bool = True
    send_ok: bool = True
    receive_ok: bool = True
    close_ok: bool = True
    outputs: List[str] = field(default_factory=list)

    # Remote and local file systems, path -> (content, mode)
    remote_files: Dict[str, Tuple[bytes, Optional[int]]] = field(default_factory=dict)
    local_files: Dict[str, bytes] = field(default_factory=dict)

    calls: List[Tuple[str, tuple]] = field(default_factory=list)
    handles: List[MemoryHandle] = field(default_factory=list)

    def __post_init__(self):
        self._ids = itertools.count(1)

    @property
    def live_handles(self) -> List[MemoryHandle]:
        return [h for h in self.handles if h.open]

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))

    def probe_reachable(self, address: str, port: int, timeout: float) -> bool:
        self._record("probe_reachable", address, port, timeout)
        return self.reachable

    def open_handshake(self, address: str) -> Optional[MemoryHandle]:
        self._record("open_handshake", address)
        if not self.handshake:
            return None
        handle = MemoryHandle(id=next(self._ids), address=address)
        self.handles.append(handle)
        return handle

    def auth_password(self, handle: MemoryHandle, username: str, password: str) -> bool:
        self._record("auth_password", handle, username)
        if self.password_ok:
            handle.username = username
        return self.password_ok

    def auth_public_key(
        self,
        handle: MemoryHandle,
        username: str,
        public_key_path: str,
        private_key_path: str,
        passphrase: Optional[str] = None,
    ) -> bool:
        self._record("auth_public_key", handle, username, public_key_path, private_key_path)
        if self.public_key_ok:
            handle.username = username
        return self.public_key_ok

    def exec(self, handle: Optional[MemoryHandle], command: str) -> Optional[MemoryStream]:
        self._record("exec", handle, command)
        if handle is None or not handle.open or not self.exec_ok:
            return None
        output = self.outputs.pop(0) if self.outputs else ""
        return MemoryStream(command=command, output=output)

    def drain(self, stream: MemoryStream) -> str:
        self._record("drain", stream)
        return stream.output

    def send_file(
        self,
        handle: Optional[MemoryHandle],
        local_path: str,
        remote_path: str,
        permissions: Optional[int] = None,
    ) -> bool:
        self._record("send_file", handle, local_path, remote_path, permissions)
        if handle is None or not handle.open or not self.send_ok:
            return False
        if local_path not in self.local_files:
            return False
        self.remote_files[remote_path] = (self.local_files[local_path], permissions)
        return True

    def receive_file(self, handle: Optional[MemoryHandle], remote_path: str, local_path: str) -> bool:
        self._record("receive_file", handle, remote_path, local_path)
        if handle is None or not handle.open or not self.receive_ok:
            return False
        if remote_path not in self.remote_files:
            return False
        self.local_files[local_path] = self.remote_files[remote_path][0]
        return True

    def close(self, handle: MemoryHandle) -> bool:
        self._record("close", handle)
        if not self.close_ok:
            return False
        handle.open = False
        return True
