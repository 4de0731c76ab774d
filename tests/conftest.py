"""Shared pytest fixtures."""

import pytest

from sshsession import SSHClient, InMemoryTransport, ClientSettings


SERVER = "kiln.example.test"
USERNAME = "gwyn"
PASSWORD = "apowerfulthingindeed"
PUBLIC_KEY = "/path/to/id_ed25519.pub"
PRIVATE_KEY = "/path/to/id_ed25519"


@pytest.fixture
def transport():
    """Transport that accepts everything."""
    return InMemoryTransport()


@pytest.fixture
def settings():
    return ClientSettings()


@pytest.fixture
def client(transport, settings):
    """Client bound to SERVER, not yet connected."""
    return SSHClient(SERVER, transport=transport, settings=settings)


@pytest.fixture
def authed(client):
    """Client logged in with a password."""
    return client.authenticate_with_password(USERNAME, PASSWORD)
