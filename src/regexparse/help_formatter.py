from __future__ import annotations

import argparse
import shutil

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .command_help import CommandHelp


class RichHelpFormatter(argparse.HelpFormatter):
    """
    Argparse help formatter that appends Rich-rendered examples, environment
    variables and tips after the standard help text.

    Falls back to plain argparse output when the console is not a terminal.
    """

    command_help: CommandHelp | None = None

    def __init__(
        self,
        prog: str,
        indent_increment: int = 2,
        max_help_position: int = 28,
        width: int | None = None,
        console: Console | None = None,
    ) -> None:
        if width is None:
            width = min(shutil.get_terminal_size().columns, 120)
        super().__init__(
            prog=prog,
            indent_increment=indent_increment,
            max_help_position=max_help_position,
            width=width,
        )
        self.console = console or Console()

    def format_help(self) -> str:
        standard_help = super().format_help()
        if not self.console.is_terminal or self.command_help is None:
            return standard_help

        parts = [standard_help]
        if self.command_help.brief_examples:
            parts.append(self._render_examples())
        if self.command_help.env_vars:
            parts.append(self._render_env_vars())
        if self.command_help.tips:
            parts.append(self._render_tips())
        return "\n".join(parts)

    def _render_examples(self) -> str:
        assert self.command_help is not None
        with self.console.capture() as capture:
            self.console.print(Text("Examples:", style="bold bright_cyan"))
            for i, (description, command) in enumerate(self.command_help.brief_examples, 1):
                desc_text = Text()
                desc_text.append(f"  {i}. ", style="dim cyan")
                desc_text.append(description, style="bright_white")
                self.console.print(desc_text)
                self.console.print(Text(f"     $ {command}", style="bright_yellow"))
            self.console.print(Text("  Run with --examples to see more", style="dim italic"))
        return capture.get()

    def _render_env_vars(self) -> str:
        assert self.command_help is not None
        with self.console.capture() as capture:
            self.console.print(Text("Environment Variables:", style="bold bright_cyan"))
            table = Table(show_header=False, box=None, padding=(0, 2))
            table.add_column("Variable", style="bright_green bold", no_wrap=True)
            table.add_column("Description", style="bright_white")
            for var_name, description in self.command_help.env_vars:
                table.add_row(var_name, description)
            self.console.print(table)
        return capture.get()

    def _render_tips(self) -> str:
        assert self.command_help is not None
        with self.console.capture() as capture:
            self.console.print(Text("Tips:", style="bold bright_cyan"))
            for tip in self.command_help.tips:
                self.console.print(Text(f"  * {tip}", style="bright_white"))
        return capture.get()


def formatter_for(command_help: CommandHelp) -> type[RichHelpFormatter]:
    """Return a RichHelpFormatter subclass bound to ``command_help`` for use as ``formatter_class``."""
    return type("BoundRichHelpFormatter", (RichHelpFormatter,), {"command_help": command_help})


def render_extended_examples(
    command_name: str,
    examples: list[tuple[str, str]],
    console: Console | None = None,
) -> None:
    """Print the full example list for ``command_name`` inside a titled panel."""
    console = console or Console()

    title = Text()
    title.append("Extended Examples: ", style="bold bright_white")
    title.append(f"regexparse {command_name}", style="bold bright_cyan")
    console.print(Panel(title, border_style="bright_cyan"))

    for i, (description, command) in enumerate(examples, 1):
        desc_text = Text()
        desc_text.append(f"  {i}. ", style="dim bright_cyan")
        desc_text.append(description, style="bright_white")
        console.print(desc_text)
        console.print(Text(f"     $ {command}", style="bright_green"))
        console.print()
