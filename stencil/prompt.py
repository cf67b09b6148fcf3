"""Question prompting for template variables.

The answer resolver only talks to a :class:`Prompter`.  Two implementations
ship with stencil:

* :class:`ConsolePrompter` asks on the terminal through ``rich.prompt``.
* :class:`DefaultsPrompter` never asks and answers every question with its
  default, for ``--no-input`` runs.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Protocol, Sequence

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt

from .utils import console as default_console


class Prompter(Protocol):
    """What the answer resolver needs from a prompting backend."""

    def ask_boolean(self, prompt: str, default: bool) -> bool: ...

    def ask_string(
        self, prompt: str, default: str, validation: Optional[re.Pattern[str]] = None
    ) -> str: ...

    def ask_integer(self, prompt: str, default: int) -> int: ...

    def ask_choice(self, prompt: str, default: Any, choices: Sequence[Any]) -> Any: ...


class ConsolePrompter:
    """Interactive prompter backed by ``rich.prompt``."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    def ask_boolean(self, prompt: str, default: bool) -> bool:
        return Confirm.ask(prompt, default=default, console=self.console)

    def ask_string(
        self, prompt: str, default: str, validation: Optional[re.Pattern[str]] = None
    ) -> str:
        """Ask for free text, re-asking until the answer matches *validation*."""
        while True:
            answer = Prompt.ask(prompt, default=default, console=self.console)
            if validation is None or validation.fullmatch(answer):
                return answer
            self.console.print(
                f"[prompt.invalid]'{answer}' does not match the pattern "
                f"[bold]{validation.pattern}[/bold]"
            )

    def ask_integer(self, prompt: str, default: int) -> int:
        return IntPrompt.ask(prompt, default=default, console=self.console)

    def ask_choice(self, prompt: str, default: Any, choices: Sequence[Any]) -> Any:
        """Show a numbered list and return the selected choice.

        The default choice is pre-selected by its number.
        """
        self.console.print(prompt)
        default_index = 1
        for index, choice in enumerate(choices, start=1):
            if choice == default and type(choice) is type(default):
                default_index = index
            self.console.print(f"  {index}. {_format_choice(choice)}")
        selected = IntPrompt.ask(
            "Choose an option",
            default=default_index,
            choices=[str(i) for i in range(1, len(choices) + 1)],
            show_choices=False,
            console=self.console,
        )
        return choices[selected - 1]


class DefaultsPrompter:
    """Non-interactive prompter that accepts every default."""

    def ask_boolean(self, prompt: str, default: bool) -> bool:
        return default

    def ask_string(
        self, prompt: str, default: str, validation: Optional[re.Pattern[str]] = None
    ) -> str:
        return default

    def ask_integer(self, prompt: str, default: int) -> int:
        return default

    def ask_choice(self, prompt: str, default: Any, choices: Sequence[Any]) -> Any:
        return default


def _format_choice(choice: Any) -> str:
    if isinstance(choice, bool):
        return "yes" if choice else "no"
    return str(choice)
