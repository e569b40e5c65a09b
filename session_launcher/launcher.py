"""
Session launcher.

Resolves the username and host for a remote session, validates them, asks
for credentials until the transport accepts them (or the user gives up) and
then either hands the session back or attaches the terminal to it.

The credential loop is a small state machine::

    resolving_params -> prompting_credential -> connecting
        connecting -> succeeded
        connecting -> prompting_credential   (authentication rejected)
        connecting -> failed                 (parameter / transport error)
        prompting_credential -> cancelled    (prompt dismissed)
"""

import logging
from typing import Any, List, Optional, Union

from .config import LauncherConfig
from .errors import (
    LauncherError,
    ParameterError,
    TransportError,
    UserCancelled,
)
from .models import (
    ConnectOutcome,
    Credential,
    ErrorKind,
    LaunchState,
    SessionHandle,
    SessionRequest,
)
from .prompts import Prompter
from .transport import Transport
from .validation import validate_host, validate_username

logger = logging.getLogger(__name__)

CREDENTIAL_TITLE = "Remote session credentials"


class SessionLauncher:
    """Establishes one authenticated remote session per launch"""

    def __init__(
        self,
        transport: Transport,
        prompter: Prompter,
        config: Optional[LauncherConfig] = None,
    ):
        self.transport = transport
        self.prompter = prompter
        self.config = config or LauncherConfig()
        self.state: Optional[LaunchState] = None
        self.transitions: List[LaunchState] = []
        self.connect_attempts = 0

    @property
    def session_name(self) -> str:
        return self.config.session_name

    def _set_state(self, state: LaunchState):
        self.state = state
        self.transitions.append(state)
        logger.debug(f"Launcher state: {state.value}")

    def _fail(self, error: LauncherError, state: LaunchState = LaunchState.FAILED):
        """Report the error to the user, then raise it to the caller"""
        self._set_state(state)
        self.prompter.error(error.message)
        logger.error(f"Launch failed ({error.kind.value}): {error.message}")
        raise error

    def _prompt_until_filled(self, label: str) -> str:
        value = ""
        while not value:
            value = self.prompter.prompt_value(label)
        return value

    def resolve_parameters(self, request: SessionRequest) -> tuple:
        """Resolve username and host; explicit values, then defaults, then prompts"""
        self._set_state(LaunchState.RESOLVING_PARAMS)

        try:
            username = validate_username(
                request.username or self.config.default_username
            )
            host = request.host_fqdn or self.config.default_host
            if host:
                validate_host(host, self.transport.probe_reachable)

            if not username:
                username = validate_username(
                    self._prompt_until_filled("Username (domain\\user)")
                )
            if not host:
                host = validate_host(
                    self._prompt_until_filled("Host FQDN"),
                    self.transport.probe_reachable,
                )
        except LauncherError as e:
            self._fail(e)

        logger.info(f"Resolved session parameters: {username}@{host}")
        return username, host

    def _attempt_connect(self, host: str, credential: Credential) -> ConnectOutcome:
        self.connect_attempts += 1
        try:
            handle = self.transport.connect(host, credential, self.session_name)
        except LauncherError as e:
            return ConnectOutcome(kind=e.kind, error=e)
        except Exception as e:
            error = TransportError(f"Connection to {host} failed: {e}")
            error.__cause__ = e
            return ConnectOutcome(kind=ErrorKind.TRANSPORT, error=error)

        return ConnectOutcome(handle=handle)

    def acquire_session(self, username: str, host: str) -> SessionHandle:
        """Prompt for credentials and connect until accepted or cancelled"""
        message = f"Enter credentials for {host}"
        credential: Optional[Credential] = None

        try:
            while True:
                self._set_state(LaunchState.PROMPTING_CREDENTIAL)
                credential = self.prompter.prompt_credential(
                    username, CREDENTIAL_TITLE, message
                )
                if credential is None or credential.is_empty:
                    self._fail(UserCancelled(), LaunchState.CANCELLED)

                self._set_state(LaunchState.CONNECTING)
                outcome = self._attempt_connect(host, credential)

                if outcome.succeeded:
                    self._set_state(LaunchState.SUCCEEDED)
                    return outcome.handle

                if outcome.kind == ErrorKind.AUTHENTICATION:
                    self.prompter.warn(outcome.error.message)
                    message = (
                        f"The username or password was incorrect. "
                        f"Enter credentials for {host} again"
                    )
                    credential.clear()
                    continue

                # parameter and transport errors are terminal
                self._fail(outcome.error)
        finally:
            if credential is not None:
                credential.clear()

    def launch(self, request: SessionRequest) -> Optional[SessionHandle]:
        """Run a full launch; returns the handle unless the terminal was attached"""
        self.transitions = []
        self.connect_attempts = 0

        username, host = self.resolve_parameters(request)
        handle = self.acquire_session(username, host)

        self.prompter.info(
            f"Remember to tear down session '{handle.name}' by name when finished."
        )

        if request.attach_immediately:
            self.prompter.info(
                f"Attaching to session '{handle.name}' on {handle.host}. "
                f"Press Ctrl-] to detach."
            )
            self.attach(handle)
            return None

        self.prompter.info(
            f"Session '{handle.name}' to {handle.host} is running in the background."
        )
        return handle

    def launch_from(self, source: Any, **overrides) -> Optional[SessionHandle]:
        """Launch with parameters bound from a mapping or an object's attributes"""

        def bind(name, default):
            if name in overrides and overrides[name] is not None:
                return overrides[name]
            if isinstance(source, dict):
                return source.get(name, default)
            return getattr(source, name, default)

        request = SessionRequest(
            username=bind("session_username", "") or "",
            host_fqdn=bind("session_host", "") or "",
            attach_immediately=bool(bind("attach", False)),
        )
        return self.launch(request)

    def attach(self, target: Union[SessionHandle, str]) -> None:
        """Attach the terminal to a session by handle or name"""
        name = target.name if isinstance(target, SessionHandle) else target
        try:
            self.transport.attach(name)
        except LauncherError as e:
            self.prompter.error(e.message)
            raise

    def teardown(self, target: Union[SessionHandle, str]) -> bool:
        """Close a session by handle or name"""
        name = target.name if isinstance(target, SessionHandle) else target
        if not name:
            raise ParameterError("A session name is required for teardown")

        removed = self.transport.disconnect(name)
        if removed:
            self.prompter.info(f"Session '{name}' torn down.")
        else:
            self.prompter.warn(f"No session named '{name}' to tear down.")
        return removed
