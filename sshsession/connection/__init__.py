from .profile import AuthConfig, AuthMethod

__all__ = ["AuthConfig", "AuthMethod"]
