"""
Launcher error taxonomy.

Every error carries an ``ErrorKind`` so callers (and the retry loop) can
branch on the kind instead of the class hierarchy.
"""

from .models import ErrorKind


class LauncherError(Exception):
    """Base class for all launcher failures"""

    kind: ErrorKind = ErrorKind.TRANSPORT

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LauncherError):
    """Malformed username, malformed host or unreachable host"""

    kind = ErrorKind.VALIDATION


class UserCancelled(LauncherError):
    """Credential prompt dismissed without input"""

    kind = ErrorKind.USER_CANCELLED

    def __init__(self, message: str = "Credential prompt was cancelled"):
        super().__init__(message)


class AuthenticationError(LauncherError):
    """Transport rejected the supplied credentials"""

    kind = ErrorKind.AUTHENTICATION


class ParameterError(LauncherError):
    """Connect arguments could not be bound"""

    kind = ErrorKind.PARAMETER


class TransportError(LauncherError):
    """Any other connection failure"""

    kind = ErrorKind.TRANSPORT


EXIT_CODES = {
    ErrorKind.VALIDATION: 2,
    ErrorKind.USER_CANCELLED: 3,
    ErrorKind.AUTHENTICATION: 4,
    ErrorKind.PARAMETER: 5,
    ErrorKind.TRANSPORT: 6,
}
