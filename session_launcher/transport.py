"""
SSH transport.

Wraps paramiko behind the small contract the launcher needs: probe a host,
connect with a credential under a logical session name, attach the terminal
to a named session and tear it down again.
"""

import os
import sys
import socket
import shutil
import platform
import selectors
import threading
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import logging

import paramiko

from .errors import AuthenticationError, ParameterError, TransportError
from .models import Credential, SessionHandle
from .validation import probe_reachable

logger = logging.getLogger(__name__)

DETACH_KEY = b"\x1d"  # Ctrl-]
POLL_INTERVAL = 0.01


class Transport(ABC):
    """Remote-session collaborator used by the launcher"""

    @abstractmethod
    def probe_reachable(self, host: str) -> bool:
        pass

    @abstractmethod
    def connect(
        self, host: str, credential: Credential, session_name: str
    ) -> SessionHandle:
        """Open a session; raises AuthenticationError, ParameterError or TransportError"""
        pass

    @abstractmethod
    def attach(self, session_name: str) -> None:
        """Bind the terminal to the named session until the user detaches"""
        pass

    @abstractmethod
    def disconnect(self, session_name: str) -> bool:
        pass


class SSHTransport(Transport):
    """paramiko-backed transport with a registry of named sessions"""

    def __init__(self, port: int = 22, ping_count: int = 1):
        self.port = port
        self.ping_count = ping_count
        self.sessions: Dict[str, paramiko.SSHClient] = {}
        self._lock = threading.Lock()

    def probe_reachable(self, host: str) -> bool:
        return probe_reachable(host, self.ping_count)

    def connect(
        self, host: str, credential: Credential, session_name: str
    ) -> SessionHandle:
        if not host or not session_name:
            raise ParameterError("Host and session name are required to connect")
        if not isinstance(self.port, int) or not 0 < self.port < 65536:
            raise ParameterError(f"Invalid SSH port: {self.port!r}")

        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        connect_kwargs = {
            "hostname": host,
            "port": self.port,
            "username": credential.username,
            "password": credential.secret.get_secret_value(),
            "look_for_keys": False,
            "allow_agent": False,
        }

        try:
            client.connect(**connect_kwargs)
        except paramiko.AuthenticationException as e:
            client.close()
            logger.warning(f"Authentication failed for {credential.username}@{host}")
            raise AuthenticationError(
                f"Username or password is incorrect for {host}"
            ) from e
        except (ValueError, TypeError) as e:
            client.close()
            raise ParameterError(f"Invalid connection parameters: {e}") from e
        except (socket.error, paramiko.SSHException, OSError) as e:
            client.close()
            logger.error(f"Failed to connect to {host}: {e}")
            raise TransportError(f"SSH connection to {host} failed: {e}") from e

        with self._lock:
            previous = self.sessions.pop(session_name, None)
            self.sessions[session_name] = client

        if previous is not None:
            logger.warning(f"Session {session_name} already existed, closing the old one")
            previous.close()

        logger.info(f"Connected to {host}:{self.port} as {credential.username}")
        return SessionHandle(
            name=session_name,
            host=host,
            username=credential.username,
            connection=client,
        )

    def get_session(self, session_name: str) -> Optional[paramiko.SSHClient]:
        with self._lock:
            return self.sessions.get(session_name)

    def list_sessions(self) -> List[str]:
        with self._lock:
            return list(self.sessions.keys())

    def attach(self, session_name: str) -> None:
        client = self.get_session(session_name)
        if client is None:
            raise ParameterError(f"No session named {session_name}")

        columns, rows = shutil.get_terminal_size()
        try:
            channel = client.invoke_shell(
                term=os.getenv("TERM", "xterm"), width=columns, height=rows
            )
        except paramiko.SSHException as e:
            raise TransportError(f"Could not open a shell on {session_name}: {e}") from e

        logger.info(f"Attached to session {session_name}")
        try:
            if platform.system() == "Windows":
                _windows_shell(channel)
            else:
                _posix_shell(channel)
        finally:
            channel.close()
            logger.info(f"Detached from session {session_name}")

    def disconnect(self, session_name: str) -> bool:
        with self._lock:
            client = self.sessions.pop(session_name, None)

        if client is None:
            return False

        client.close()
        logger.info(f"Session {session_name} removed")
        return True

    def close_all(self):
        for session_name in self.list_sessions():
            self.disconnect(session_name)


def _set_nodelay(channel: paramiko.Channel) -> None:
    transport = channel.get_transport()
    if transport and transport.sock:
        transport.sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)


def _posix_shell(channel: paramiko.Channel) -> None:
    """Forward stdin/stdout in raw mode until the remote closes or Ctrl-] is pressed"""
    import termios
    import tty

    _set_nodelay(channel)
    selector = selectors.DefaultSelector()
    selector.register(channel, selectors.EVENT_READ)
    selector.register(sys.stdin, selectors.EVENT_READ)

    raw = sys.stdin.isatty()
    original_tty = termios.tcgetattr(sys.stdin) if raw else None
    if raw:
        tty.setraw(sys.stdin.fileno())

    try:
        while True:
            for key, _ in selector.select():
                if key.fileobj is channel:
                    data = channel.recv(32768)
                    if not data:
                        return
                    sys.stdout.buffer.write(data)
                    sys.stdout.flush()
                else:
                    data = os.read(sys.stdin.fileno(), 1024)
                    if not data or DETACH_KEY in data:
                        return
                    channel.send(data)
    finally:
        selector.close()
        if original_tty is not None:
            termios.tcsetattr(sys.stdin, termios.TCSADRAIN, original_tty)


def _windows_shell(channel: paramiko.Channel) -> None:
    import msvcrt

    _set_nodelay(channel)
    channel.settimeout(0.0)

    while True:
        if channel.recv_ready():
            sys.stdout.buffer.write(channel.recv(32768))
            sys.stdout.flush()

        if msvcrt.kbhit():
            char = msvcrt.getwch()
            if char.encode() == DETACH_KEY:
                return
            channel.send(char.encode())

        if channel.closed or channel.exit_status_ready():
            return

        time.sleep(POLL_INTERVAL)
