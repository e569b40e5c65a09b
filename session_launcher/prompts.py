"""
Interactive surface.

Everything the user sees outside the structured output goes through a
Prompter: missing-parameter prompts, the credential prompt and diagnostics.
"""

from abc import ABC, abstractmethod
from typing import Optional
import logging

import click

from .models import Credential

logger = logging.getLogger(__name__)


class Prompter(ABC):
    """Interactive collaborator used by the launcher"""

    @abstractmethod
    def prompt_value(self, label: str) -> str:
        """Ask for a single plain value; may return an empty string"""
        pass

    @abstractmethod
    def prompt_credential(
        self, username_hint: str, title: str, message: str
    ) -> Optional[Credential]:
        """Ask for credentials; None means the prompt was dismissed"""
        pass

    @abstractmethod
    def info(self, message: str) -> None:
        pass

    @abstractmethod
    def warn(self, message: str) -> None:
        pass

    @abstractmethod
    def error(self, message: str) -> None:
        pass


class ConsolePrompter(Prompter):
    """Terminal prompter; messages go to stderr so stdout stays structured"""

    def prompt_value(self, label: str) -> str:
        value = click.prompt(label, default="", show_default=False, err=True)
        return value.strip()

    def prompt_credential(
        self, username_hint: str, title: str, message: str
    ) -> Optional[Credential]:
        click.secho(title, bold=True, err=True)
        click.echo(message, err=True)

        try:
            username = click.prompt(
                "Username", default=username_hint or "", err=True
            ).strip()
            password = click.prompt(
                "Password",
                default="",
                show_default=False,
                hide_input=True,
                err=True,
            )
        except click.Abort:
            click.echo("", err=True)
            logger.debug("Credential prompt aborted")
            return None

        if not username or not password:
            return None

        return Credential(username=username, secret=password)

    def info(self, message: str) -> None:
        click.secho(message, fg="green", err=True)

    def warn(self, message: str) -> None:
        click.secho(f"WARNING: {message}", fg="yellow", err=True)

    def error(self, message: str) -> None:
        click.secho(f"ERROR: {message}", fg="red", err=True)
