"""Tests for sshsession.connection.profile."""

from sshsession.connection.profile import AuthConfig, AuthMethod


def test_password_auth():
    auth = AuthConfig.password_auth("gwyn", "secret")
    assert auth.method is AuthMethod.PASSWORD
    assert auth.password == "secret"


def test_key_file_auth_defaults_public_key():
    auth = AuthConfig.key_file_auth("gwyn", "/keys/id_ed25519", passphrase="pp")
    assert auth.method is AuthMethod.KEY_FILE
    assert auth.public_key_path == "/keys/id_ed25519.pub"
    assert auth.key_passphrase == "pp"


def test_key_file_auth_explicit_public_key():
    auth = AuthConfig.key_file_auth("gwyn", "/keys/id", public_key_path="/keys/other.pub")
    assert auth.public_key_path == "/keys/other.pub"


def test_secrets_not_serialized_or_shown():
    auth = AuthConfig.password_auth("gwyn", "secret")
    assert "secret" not in repr(auth)
    assert "secret" not in str(auth.to_dict())
    assert auth.to_dict()["has_password"] is True
