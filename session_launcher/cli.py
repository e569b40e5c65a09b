"""
session_launcher/cli.py

Command-line entry point.

Usage:
    session-launcher
    session-launcher --session-username 'corp\\alice' --session-host host.corp.example
    session-launcher --session-host host.corp.example --attach
"""

import sys
import json
import logging

import click

from .config import LauncherConfig
from .errors import EXIT_CODES, LauncherError
from .launcher import SessionLauncher
from .models import SessionRequest
from .prompts import ConsolePrompter
from .transport import SSHTransport

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


@click.command()
@click.option("-u", "--session-username", default="", help="Down-level username (domain\\user)")
@click.option("-H", "--session-host", default="", help="Remote host FQDN")
@click.option("-a", "--attach", is_flag=True, help="Attach the terminal to the new session")
@click.option("-p", "--port", type=int, default=None, help="SSH port (overrides config)")
@click.option("-c", "--config", "config_path", default=None, help="JSON config file")
@click.option("--log-level", default=None, help="Logging level (overrides config)")
def cli(session_username, session_host, attach, port, config_path, log_level):
    """Open an authenticated remote shell session."""
    config = LauncherConfig.load(config_path)
    if port is not None:
        config.port = port
    setup_logging(log_level or config.log_level)

    transport = SSHTransport(port=config.port, ping_count=config.ping_count)
    launcher = SessionLauncher(transport, ConsolePrompter(), config)
    request = SessionRequest(
        username=session_username,
        host_fqdn=session_host,
        attach_immediately=attach,
    )

    try:
        handle = launcher.launch(request)
        if handle is not None:
            click.echo(json.dumps(handle.summary()))
            # the session lives as long as this process does
            launcher.prompter.prompt_value(
                f"Press Enter to tear down session '{handle.name}'"
            )
            launcher.teardown(handle)
    except LauncherError as e:
        sys.exit(EXIT_CODES[e.kind])
    finally:
        if transport.list_sessions():
            logger.info("Closing sessions on exit")
            transport.close_all()


if __name__ == "__main__":
    cli()
