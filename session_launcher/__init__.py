"""
Session Launcher - interactive authenticated remote shell sessions

Resolves the target host and down-level username, prompts for credentials
until the remote side accepts them, then hands back a named session or
attaches the terminal to it.
"""

from .config import LauncherConfig
from .errors import (
    LauncherError,
    ValidationError,
    UserCancelled,
    AuthenticationError,
    ParameterError,
    TransportError,
)
from .launcher import SessionLauncher
from .models import SessionHandle, SessionRequest, Credential, ErrorKind, LaunchState
from .transport import SSHTransport

__version__ = "0.1.0"
__all__ = [
    "SessionLauncher",
    "SSHTransport",
    "LauncherConfig",
    "SessionRequest",
    "SessionHandle",
    "Credential",
    "ErrorKind",
    "LaunchState",
    "LauncherError",
    "ValidationError",
    "UserCancelled",
    "AuthenticationError",
    "ParameterError",
    "TransportError",
]
