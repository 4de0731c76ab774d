"""
Session management - connection lifecycle, authentication and output.
"""

from .base import SessionClient, SessionState
from .client import SSHClient
from .output import OutputAggregator

__all__ = [
    "SessionClient",
    "SessionState",
    "SSHClient",
    "OutputAggregator",
]
