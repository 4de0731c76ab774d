"""
Credentials a session client can be bound to at construction.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AuthMethod(Enum):
    PASSWORD = "password"
    KEY_FILE = "key_file"


@dataclass
class AuthConfig:
    """
    Authentication settings for one login.

    Use the factory methods rather than filling fields by hand:

        AuthConfig.password_auth("admin", "secret")
        AuthConfig.key_file_auth("deploy", "~/.ssh/id_ed25519")
    """
    method: AuthMethod
    username: str
    password: Optional[str] = None
    public_key_path: Optional[str] = None
    key_path: Optional[str] = None
    key_passphrase: Optional[str] = None

    @classmethod
    def password_auth(cls, username: str, password: str) -> AuthConfig:
        return cls(method=AuthMethod.PASSWORD, username=username, password=password)

    @classmethod
    def key_file_auth(
        cls,
        username: str,
        key_path: str,
        public_key_path: Optional[str] = None,
        passphrase: Optional[str] = None,
    ) -> AuthConfig:
        """Key pair login. public_key_path defaults to key_path + '.pub'."""
        return cls(
            method=AuthMethod.KEY_FILE,
            username=username,
            key_path=key_path,
            public_key_path=public_key_path or f"{key_path}.pub",
            key_passphrase=passphrase,
        )

    def to_dict(self) -> dict:
        """Serialize without secrets."""
        return {
            "method": self.method.value,
            "username": self.username,
            "public_key_path": self.public_key_path,
            "key_path": self.key_path,
            "has_password": bool(self.password),
            "has_passphrase": bool(self.key_passphrase),
        }

    def __repr__(self) -> str:
        return f"AuthConfig({self.method.value}, user={self.username})"
