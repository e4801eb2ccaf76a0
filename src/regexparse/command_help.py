from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass
class CommandHelp:
    """
    Structured help content for a CLI command.

    Provides examples, environment variable documentation, and helpful tips
    for use with the RichHelpFormatter.
    """

    brief_examples: List[Tuple[str, str]] = field(default_factory=list)
    """Brief examples shown in --help (2-3 most common use cases)."""

    extended_examples: List[Tuple[str, str]] = field(default_factory=list)
    """Extended examples shown in --examples."""

    env_vars: List[Tuple[str, str]] = field(default_factory=list)
    """List of (variable_name, description) tuples documenting environment variables."""

    tips: List[str] = field(default_factory=list)


_LOGGING_ENV_VARS = [
    ("LOG_LEVEL", "File log level: CRITICAL, ERROR, WARNING, INFO, DEBUG (default: INFO)"),
    ("CONSOLE_LEVEL", "Console log level on stderr (default: WARNING)"),
    ("LOG_FILE", "Path to a persistent log file (disabled when unset)"),
    ("VERBOSE", "Enable debug-level console logging (true/false/1/0)"),
    ("PLAIN_CONSOLE_LOGS", "Force plain text console logs without Rich formatting (true/false/1/0)"),
]


PARSE_COMMAND_HELP = CommandHelp(
    brief_examples=[
        (
            "Parse two values, emitting named and ordinal fields as JSON lines",
            "regexparse parse '(?<alpha>[a-z]+) ([0-9]+)' 'abc 123 efg 456'",
        ),
        (
            "Read one payload per line from standard input, keeping only named groups",
            "tail -f app.log | regexparse parse --named-only '(?<level>[A-Z]+): (?<msg>.*)'",
        ),
    ],
    extended_examples=[
        (
            "Parse two values, emitting named and ordinal fields as JSON lines",
            "regexparse parse '(?<alpha>[a-z]+) ([0-9]+)' 'abc 123 efg 456'",
        ),
        (
            "Legacy form: the regex is the first argument, values follow",
            "regexparse '([a-z]+)=([0-9]+)' 'a=1 b=2'",
        ),
        (
            "Keep only named groups",
            "regexparse parse --named-only '(?<key>\\w+)=(?<value>\\w+)' 'a=1 b=2'",
        ),
        (
            "Case-insensitive match rendered as a table",
            "regexparse parse --flag IGNORECASE --format table '(?<word>hello)' 'Hello HELLO'",
        ),
        (
            "Use the standard library engine (named groups must use (?P<name>...))",
            "regexparse parse --engine re '(?P<num>\\d+)' 'a1b22'",
        ),
        (
            "Guard against runaway patterns with a match timeout",
            "regexparse parse --timeout 0.5 '(a+)+$' 'aaaaaaaaaaaaaaaaaaaaaaaa!'",
        ),
        (
            "Take the pattern and output settings from a config file",
            "cat access.log | regexparse parse --config ./regexparse.yaml",
        ),
        (
            "Python module: run from a source checkout",
            "python -m regexparse parse '(\\d+)' 'a1b2'",
        ),
    ],
    env_vars=[
        ("REGEXPARSE_CONFIG", "Path to the YAML configuration file"),
        ("REGEX_PATTERN", "Regular expression to use when none is given on the command line"),
        ("INCLUDE_ALL_GROUPS", "Emit ordinal fields for every group (true/false, default: true)"),
        ("REGEX_ENGINE", "Regex engine: regex or re (default: regex)"),
        ("REGEX_FLAGS", "Comma separated regex flags, e.g. IGNORECASE,MULTILINE"),
        ("REGEX_TIMEOUT", "Per-payload match timeout in seconds (regex engine only)"),
        ("OUTPUT_FORMAT", "Record output format: json, yaml or table (default: json)"),
        *_LOGGING_ENV_VARS,
    ],
    tips=[
        "Records go to stdout and logs to stderr, so output can be piped safely",
        "Groups that did not take part in a match are emitted as null, empty captures as \"\"",
        "Patterns without named groups always emit ordinal fields, even with --named-only",
        "Command-line flags override environment variables, which override the config file",
        "For a regex starting with \"-\" use --regex=REGEX, or put -- before the regex",
    ],
)


INSPECT_COMMAND_HELP = CommandHelp(
    brief_examples=[
        (
            "Show the named groups and group count of a pattern",
            "regexparse inspect '(?<alpha>[a-z]+) ([0-9]+)'",
        ),
    ],
    extended_examples=[
        (
            "Show the named groups and group count of a pattern",
            "regexparse inspect '(?<alpha>[a-z]+) ([0-9]+)'",
        ),
        (
            "Check how the standard library engine sees the same pattern",
            "regexparse inspect --engine re '(?P<alpha>[a-z]+) ([0-9]+)'",
        ),
    ],
    env_vars=list(_LOGGING_ENV_VARS),
    tips=[
        "Group count includes group 0, the whole match",
        "Use inspect to debug compile errors before wiring a pattern into a pipeline",
    ],
)


VALIDATE_CONFIG_COMMAND_HELP = CommandHelp(
    brief_examples=[
        (
            "Validate a configuration file",
            "regexparse validate-config --config ./regexparse.yaml",
        ),
    ],
    extended_examples=[
        (
            "Validate a configuration file",
            "regexparse validate-config --config ./regexparse.yaml",
        ),
        (
            "Validate the file referenced by REGEXPARSE_CONFIG",
            "REGEXPARSE_CONFIG=/etc/regexparse.yaml regexparse validate-config",
        ),
    ],
    env_vars=[("REGEXPARSE_CONFIG", "Path to the YAML configuration file"), *_LOGGING_ENV_VARS],
    tips=[
        "Validation compiles the configured regex, so syntax errors show up before any input is read",
        "Unknown keys are rejected to catch typos early",
    ],
)


COMMAND_HELP: Dict[str, CommandHelp] = {
    "parse": PARSE_COMMAND_HELP,
    "inspect": INSPECT_COMMAND_HELP,
    "validate-config": VALIDATE_CONFIG_COMMAND_HELP,
}


def get_command_help(command: str) -> CommandHelp:
    """
    Retrieve help content for a specific command.

    Raises:
        KeyError: If command is not recognized
    """
    return COMMAND_HELP[command]
