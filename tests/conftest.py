import pytest
import os
import sys

# Add project root to Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from session_launcher.config import LauncherConfig
from session_launcher.launcher import SessionLauncher
from session_launcher.models import Credential, SessionHandle
from session_launcher.prompts import Prompter
from session_launcher.transport import Transport


class FakeTransport(Transport):
    """Scripted transport: each connect pops the next outcome"""

    def __init__(self, reachable=True, outcomes=None):
        self.reachable = reachable
        self.outcomes = list(outcomes or [])
        self.probe_calls = []
        self.connect_calls = []
        self.attach_calls = []
        self.disconnect_calls = []
        self.sessions = {}

    def probe_reachable(self, host):
        self.probe_calls.append(host)
        return self.reachable

    def connect(self, host, credential, session_name):
        self.connect_calls.append((credential.username, host, session_name))
        outcome = self.outcomes.pop(0) if self.outcomes else None
        if isinstance(outcome, Exception):
            raise outcome
        handle = SessionHandle(
            name=session_name, host=host, username=credential.username
        )
        self.sessions[session_name] = handle
        return handle

    def attach(self, session_name):
        self.attach_calls.append(session_name)

    def disconnect(self, session_name):
        self.disconnect_calls.append(session_name)
        return self.sessions.pop(session_name, None) is not None


class FakePrompter(Prompter):
    """Scripted prompter; a None credential entry means the prompt was dismissed"""

    def __init__(self, values=None, credentials=None):
        self.values = list(values or [])
        self.credentials = list(credentials or [])
        self.value_prompts = []
        self.credential_prompts = []
        self.issued = []
        self.messages = {"info": [], "warn": [], "error": []}

    def prompt_value(self, label):
        self.value_prompts.append(label)
        return self.values.pop(0)

    def prompt_credential(self, username_hint, title, message):
        self.credential_prompts.append((username_hint, title, message))
        entry = self.credentials.pop(0)
        if entry is None:
            return None
        username, password = entry
        credential = Credential(username=username, secret=password)
        self.issued.append(credential)
        return credential

    def info(self, message):
        self.messages["info"].append(message)

    def warn(self, message):
        self.messages["warn"].append(message)

    def error(self, message):
        self.messages["error"].append(message)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def prompter():
    return FakePrompter(credentials=[("corp\\alice", "s3cret")])


@pytest.fixture
def config():
    return LauncherConfig()


@pytest.fixture
def launcher(transport, prompter, config):
    return SessionLauncher(transport, prompter, config)
