"""User interaction capability used by the sync engine.

The engine never renders prompts itself. It asks an ``InteractionProvider``
for the few things it cannot decide alone (an address, a destination folder)
and treats ``None`` as a cancelled prompt.
"""

from pathlib import Path
from typing import Callable, Optional, Protocol, Sequence

import click


class InteractionProvider(Protocol):
    """Capability the engine uses to ask the user for input."""

    def choose_one(
        self, options: Sequence[tuple[str, str]], placeholder: str = ""
    ) -> Optional[str]:
        """Let the user pick one of ``(label, description)`` options.

        Returns:
            The chosen label, or None if cancelled
        """
        ...

    def prompt_text(
        self,
        prompt: str,
        default: Optional[str] = None,
        validate: Optional[Callable[[str], bool]] = None,
    ) -> Optional[str]:
        """Ask for free text.

        Returns:
            The entered text, or None if cancelled
        """
        ...

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question. Cancelling counts as no."""
        ...

    def choose_folder(self, prompt: str = "") -> Optional[Path]:
        """Ask for a local folder.

        Returns:
            The chosen folder, or None if cancelled
        """
        ...


class ClickInteraction:
    """Terminal implementation of InteractionProvider built on click prompts."""

    def choose_one(
        self, options: Sequence[tuple[str, str]], placeholder: str = ""
    ) -> Optional[str]:
        if not options:
            return None
        if placeholder:
            click.echo(placeholder, err=True)
        for index, (label, description) in enumerate(options, start=1):
            suffix = f"  ({description})" if description else ""
            click.echo(f"  {index}. {label}{suffix}", err=True)

        try:
            index = click.prompt(
                "Select",
                type=click.IntRange(1, len(options)),
                default=1,
                err=True,
            )
        except click.Abort:
            return None
        return options[index - 1][0]

    def prompt_text(
        self,
        prompt: str,
        default: Optional[str] = None,
        validate: Optional[Callable[[str], bool]] = None,
    ) -> Optional[str]:
        def value_proc(value: str) -> str:
            value = value.strip()
            if validate is not None and value and not validate(value):
                raise click.UsageError(f"Invalid value: {value}")
            return value

        try:
            value = click.prompt(
                prompt,
                default=default,
                value_proc=value_proc,
                show_default=default is not None,
                err=True,
            )
        except click.Abort:
            return None
        return value or None

    def confirm(self, message: str) -> bool:
        try:
            return click.confirm(message, default=False, err=True)
        except click.Abort:
            return False

    def choose_folder(self, prompt: str = "") -> Optional[Path]:
        try:
            value = click.prompt(
                prompt or "Destination folder",
                type=click.Path(file_okay=False, path_type=Path),
                err=True,
            )
        except click.Abort:
            return None
        return value
