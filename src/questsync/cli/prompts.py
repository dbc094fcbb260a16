"""Interactive prompts on the terminal."""

from typing import Any, Optional, Sequence

import click
from rich.console import Console

from ..core.sync import PromptOption


class ConsolePrompter:
    """Asks questions as a numbered list and reads the chosen number."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize prompter.

        Args:
            console: Rich console to print to
        """
        self.console = console or Console()

    def ask(self, question: str, options: Sequence[PromptOption]) -> Any:
        """Return the value of the option the user picks."""
        if not options:
            raise ValueError("Cannot ask a question without options")

        self.console.print(f"\n[bold yellow]?[/bold yellow] {question}")
        for number, option in enumerate(options, start=1):
            self.console.print(f"  [cyan]{number})[/cyan] {option.label}")
        choice = click.prompt(
            "Choose",
            type=click.IntRange(1, len(options)),
            default=1,
        )
        return options[choice - 1].value
