"""Interactive prompt sequence.

Collects the three scaffolding parameters (project name, npm init mode and
server port) from an explicit :class:`InputSource`, applying defaults for
blank answers.
"""

from __future__ import annotations

from typing import TextIO

from pydantic import ValidationError
from rich.console import Console

from .config import (
    DEFAULT_PORT,
    DEFAULT_PROJECT_NAME,
    InitMode,
    ProjectParameters,
)
from .utils import console as default_console
from .utils import print_warning

MAX_PORT_ATTEMPTS = 3


class InvalidParameterError(ValueError):
    """Raised when an answer cannot be turned into a valid parameter."""


class InputSource:
    """Line-oriented interactive input.

    Reads from *stream* when one is given, otherwise from the terminal via
    ``input()``. The console prints the question. End of input is treated as
    a blank answer.
    """

    def __init__(self, stream: TextIO | None = None, console: Console | None = None) -> None:
        self.stream = stream
        self.console = console or default_console

    def ask(self, question: str, default: str, *, show_default: bool = True) -> str:
        """Ask *question* and return the stripped answer, or *default* if blank."""
        prompt = f"{question} (default: {default}): " if show_default else f"{question}: "
        try:
            answer = self.console.input(prompt, markup=False, stream=self.stream)
        except EOFError:
            answer = ""
        return answer.strip() or default


def parse_port(raw: str) -> int:
    """Parse a port answer.

    Raises:
        InvalidParameterError: If *raw* is not an integer in 1-65535.
    """
    try:
        port = int(raw)
    except ValueError:
        raise InvalidParameterError(f"Port must be a number, got {raw!r}") from None
    if not 1 <= port <= 65535:
        raise InvalidParameterError(f"Port must be between 1 and 65535, got {port}")
    return port


def parse_project_name(raw: str) -> str:
    """Validate a project name answer.

    Raises:
        InvalidParameterError: If *raw* is not a single directory name.
    """
    try:
        return ProjectParameters(name=raw).name
    except ValidationError as exc:
        raise InvalidParameterError(exc.errors()[0]["msg"]) from None


def parse_init_mode(raw: str) -> InitMode:
    """Only an explicit ``n`` opts into the interactive ``npm init``."""
    return InitMode.INTERACTIVE if raw.strip().lower() == "n" else InitMode.DEFAULT


def ask_port(source: InputSource, attempts: int = MAX_PORT_ATTEMPTS) -> int:
    """Ask for the port, re-asking on invalid input.

    Raises:
        InvalidParameterError: After *attempts* invalid answers.
    """
    last_error: InvalidParameterError | None = None
    for _ in range(attempts):
        raw = source.ask("Enter port number", str(DEFAULT_PORT))
        try:
            return parse_port(raw)
        except InvalidParameterError as exc:
            print_warning(f"{exc}. Please try again.")
            last_error = exc
    raise InvalidParameterError(
        f"No valid port after {attempts} attempts: {last_error}"
    )


def collect_parameters(source: InputSource) -> ProjectParameters:
    """Run the three prompts in order and build :class:`ProjectParameters`."""
    name = parse_project_name(source.ask("Enter project name", DEFAULT_PROJECT_NAME))
    init_answer = source.ask("Use default npm init? (Y/n)", "y", show_default=False)
    port = ask_port(source)
    return ProjectParameters(
        name=name,
        init_mode=parse_init_mode(init_answer),
        port=port,
    )
