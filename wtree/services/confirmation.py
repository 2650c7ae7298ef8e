"""Confirmation providers.

The lifecycle engine never reads the terminal itself; it asks a provider.
"""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm

from wtree.exceptions import ConfirmationUnavailable


class ConfirmationProvider:
    """Answers yes/no questions for the lifecycle engine."""

    def confirm(self, prompt: str) -> bool:
        raise NotImplementedError


class ConsoleConfirmation(ConfirmationProvider):
    """Asks on the controlling terminal. Anything but yes means no.

    A closed stdin raises ConfirmationUnavailable rather than answering.
    """

    def __init__(self, console: Optional[Console] = None, hint: Optional[str] = None):
        self.console = console or Console()
        self.hint = hint

    def confirm(self, prompt: str) -> bool:
        try:
            return Confirm.ask(escape(prompt), console=self.console, default=False)
        except EOFError:
            raise ConfirmationUnavailable(prompt, self.hint)


class StaticConfirmation(ConfirmationProvider):
    """Always gives the same answer."""

    def __init__(self, answer: bool):
        self.answer = answer

    def confirm(self, prompt: str) -> bool:
        return self.answer


class NonInteractiveConfirmation(ConfirmationProvider):
    """Refuses to guess: raises so the caller is told which flag to pass."""

    def __init__(self, hint: Optional[str] = None):
        self.hint = hint

    def confirm(self, prompt: str) -> bool:
        raise ConfirmationUnavailable(prompt, self.hint)
