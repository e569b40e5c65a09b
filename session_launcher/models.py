from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, SecretStr

DEFAULT_SESSION_NAME = "viaStart-RemoteSession"


class LaunchState(str, Enum):
    RESOLVING_PARAMS = "resolving_params"
    PROMPTING_CREDENTIAL = "prompting_credential"
    CONNECTING = "connecting"
    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"
    FAILED = "failed"


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    USER_CANCELLED = "user_cancelled"
    AUTHENTICATION = "authentication"
    PARAMETER = "parameter"
    TRANSPORT = "transport"


class SessionRequest(BaseModel):
    username: str = Field(default="", description="Down-level username (domain\\user)")
    host_fqdn: str = Field(default="", description="Remote host FQDN")
    attach_immediately: bool = Field(
        default=False, description="Attach the terminal instead of returning a handle"
    )


class Credential(BaseModel):
    username: str = Field(..., description="Down-level username")
    secret: SecretStr = Field(..., description="Password, never logged")

    @property
    def is_empty(self) -> bool:
        return not self.username or not self.secret.get_secret_value()

    def clear(self):
        """Drop the secret so it does not outlive the connect attempt"""
        self.secret = SecretStr("")


class SessionHandle(BaseModel):
    name: str = Field(default=DEFAULT_SESSION_NAME, description="Logical session name")
    host: str = Field(..., description="Connected host")
    username: str = Field(default="", description="Authenticated username")
    connection: Optional[Any] = Field(
        default=None, exclude=True, repr=False, description="Underlying connection"
    )

    def summary(self) -> dict:
        return {"name": self.name, "host": self.host, "username": self.username}


class ConnectOutcome(BaseModel):
    """Result of one connect attempt; ``kind`` is None on success"""

    kind: Optional[ErrorKind] = None
    handle: Optional[SessionHandle] = None
    error: Optional[Exception] = None

    class Config:
        arbitrary_types_allowed = True

    @property
    def succeeded(self) -> bool:
        return self.kind is None
