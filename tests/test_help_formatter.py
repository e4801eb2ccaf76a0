from __future__ import annotations

import argparse
from io import StringIO

import pytest
from rich.console import Console

from regexparse.command_help import COMMAND_HELP, CommandHelp, get_command_help
from regexparse.help_formatter import RichHelpFormatter, formatter_for, render_extended_examples


def _parser_with(formatter_class) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="regexparse parse", formatter_class=formatter_class)
    parser.add_argument("--flag", help="A flag")
    return parser


class TestCommandHelp:
    def test_every_command_has_help(self):
        for command in ("parse", "inspect", "validate-config"):
            help_content = get_command_help(command)
            assert help_content.brief_examples
            assert help_content.extended_examples
            assert help_content.env_vars

    def test_unknown_command(self):
        with pytest.raises(KeyError):
            get_command_help("serve")

    def test_examples_use_the_cli_name(self):
        for help_content in COMMAND_HELP.values():
            for _, command in help_content.extended_examples:
                assert "regexparse" in command

    def test_logging_variables_documented_everywhere(self):
        for help_content in COMMAND_HELP.values():
            names = {name for name, _ in help_content.env_vars}
            assert {"LOG_LEVEL", "CONSOLE_LEVEL", "LOG_FILE"} <= names


class TestRichHelpFormatter:
    def test_plain_help_when_not_a_terminal(self):
        bound = formatter_for(CommandHelp(brief_examples=[("Example", "regexparse parse x")]))
        text = _parser_with(lambda prog: bound(prog, console=Console(file=StringIO()))).format_help()

        assert "--flag" in text
        assert "Examples:" not in text

    def test_sections_appended_on_terminal(self):
        help_content = CommandHelp(
            brief_examples=[("Parse numbers", "regexparse parse '(\\d+)' a1")],
            env_vars=[("REGEX_PATTERN", "Default pattern")],
            tips=["Records go to stdout"],
        )
        bound = formatter_for(help_content)
        console = Console(file=StringIO(), force_terminal=True, width=100)
        text = _parser_with(lambda prog: bound(prog, console=console)).format_help()

        assert "--flag" in text
        assert "Examples:" in text
        assert "Parse numbers" in text
        assert "REGEX_PATTERN" in text
        assert "Tips:" in text

    def test_formatter_for_binds_content(self):
        help_content = CommandHelp(tips=["tip"])
        bound = formatter_for(help_content)

        assert issubclass(bound, RichHelpFormatter)
        assert bound.command_help is help_content
        assert RichHelpFormatter.command_help is None


def test_render_extended_examples():
    buffer = StringIO()
    render_extended_examples(
        "inspect",
        get_command_help("inspect").extended_examples,
        console=Console(file=buffer, width=120),
    )

    rendered = buffer.getvalue()
    assert "Extended Examples" in rendered
    assert "regexparse inspect" in rendered
    assert "1." in rendered
