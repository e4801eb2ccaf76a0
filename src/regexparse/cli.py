from __future__ import annotations

import argparse
import logging
import os
import re
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from rich.console import Console

from .banner import build_banner_info, print_pattern_banner
from .command_help import get_command_help
from .config import (
    DEFAULT_CONFIG_ENV,
    OUTPUT_FORMATS,
    AppConfig,
    apply_env_overrides,
    load_config,
)
from .engines import ENGINES, SUPPORTED_FLAGS
from .errors import ConfigError, RegexParseError
from .help_formatter import formatter_for, render_extended_examples
from .logging_utils import LOG_LEVELS, configure_logging, parse_level, render_fields_block
from .output import RecordEmitter
from .parser import RegexParser
from .payloads import iter_payloads
from .validation import validate_config_file
from .validation_output import ValidationFormatter
from .version import __version__

LOGGER = logging.getLogger(__name__)

COMMANDS = ("parse", "inspect", "validate-config")

# Shape of an option such as "-e", "--named-only" or "--format=json".
_OPTION_SHAPE = re.compile(r"^--?[A-Za-z][A-Za-z0-9-]*(=.*)?$")

USAGE_HINT = (
    "A regular expression is required as the first argument. Any following arguments are "
    "separate text values to run through the expression, producing one record per match. "
    "With no values, each line of standard input is treated as a separate value."
)


def _add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("logging")
    group.add_argument("--verbose", "-v", action="store_true", default=None, help="Enable debug console logging")
    group.add_argument("--log-level", choices=LOG_LEVELS, type=str.upper, help="File log level")
    group.add_argument("--console-level", choices=LOG_LEVELS, type=str.upper, help="Console (stderr) log level")
    group.add_argument("--log-file", type=Path, help="Write logs to this file")


def _add_engine_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--engine", choices=sorted(ENGINES), help="Regex engine (default: regex)")
    parser.add_argument(
        "--flag",
        dest="flags",
        action="append",
        metavar="NAME",
        help=f"Regex flag, repeatable ({', '.join(SUPPORTED_FLAGS)})",
    )
    parser.add_argument("--timeout", type=float, metavar="SECONDS", help="Match timeout per payload (regex engine)")


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to a YAML config file (default: ${DEFAULT_CONFIG_ENV} when set)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="regexparse",
        description="Turn text into structured records, one per regular expression match.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    parse_parser = subparsers.add_parser(
        "parse",
        help="Parse values (or stdin lines) into records",
        description=USAGE_HINT,
        formatter_class=formatter_for(get_command_help("parse")),
    )
    parse_parser.add_argument(
        "arguments",
        nargs="*",
        metavar="REGEX [VALUE ...]",
        help="Regular expression followed by values to parse",
    )
    parse_parser.add_argument(
        "-e",
        "--regex",
        dest="regex_option",
        metavar="REGEX",
        help="Regular expression; all positional arguments are then values",
    )
    parse_parser.add_argument(
        "--named-only",
        action="store_true",
        default=None,
        help="Emit only named-group fields (ordinal fields are kept when there are no named groups)",
    )
    parse_parser.add_argument("--format", dest="output_format", choices=OUTPUT_FORMATS, help="Output format")
    parse_parser.add_argument("--examples", action="store_true", help="Show extended examples and exit")
    _add_engine_arguments(parse_parser)
    _add_config_argument(parse_parser)
    _add_logging_arguments(parse_parser)
    parse_parser.set_defaults(handler=run_parse_command)

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Show the capture groups of a regular expression",
        formatter_class=formatter_for(get_command_help("inspect")),
    )
    inspect_parser.add_argument("regex", nargs="?", help="Regular expression to inspect")
    inspect_parser.add_argument("--examples", action="store_true", help="Show extended examples and exit")
    _add_engine_arguments(inspect_parser)
    _add_config_argument(inspect_parser)
    _add_logging_arguments(inspect_parser)
    inspect_parser.set_defaults(handler=run_inspect_command)

    validate_parser = subparsers.add_parser(
        "validate-config",
        help="Validate a YAML configuration file",
        formatter_class=formatter_for(get_command_help("validate-config")),
    )
    validate_parser.add_argument("--no-suggestions", action="store_true", help="Hide fix suggestions")
    validate_parser.add_argument("--examples", action="store_true", help="Show extended examples and exit")
    _add_config_argument(validate_parser)
    _add_logging_arguments(validate_parser)
    validate_parser.set_defaults(handler=run_validate_config_command)

    return parser


def _resolve_config_path(args: argparse.Namespace) -> Path | None:
    if args.config is not None:
        return args.config
    env_path = os.getenv(DEFAULT_CONFIG_ENV)
    return Path(env_path).expanduser() if env_path else None


def load_app_config(args: argparse.Namespace) -> AppConfig:
    """Config file, then environment overrides, then command-line flags."""
    config_path = _resolve_config_path(args)
    config = load_config(config_path) if config_path else AppConfig()
    config = apply_env_overrides(config)

    parser_settings = config.parser
    if getattr(args, "engine", None):
        parser_settings = replace(parser_settings, engine=args.engine)
    if getattr(args, "flags", None):
        parser_settings = replace(parser_settings, flags=list(args.flags))
    if getattr(args, "timeout", None) is not None:
        parser_settings = replace(parser_settings, timeout=args.timeout)
    if getattr(args, "named_only", None):
        parser_settings = replace(parser_settings, include_all_groups=False)

    output_settings = config.output
    if getattr(args, "output_format", None):
        output_settings = replace(output_settings, format=args.output_format)

    log = config.logging
    if args.verbose:
        log = replace(log, verbose=True)
    if args.log_level:
        log = replace(log, level=parse_level(args.log_level))
    if args.console_level:
        log = replace(log, console_level=parse_level(args.console_level))
    if args.log_file:
        log = replace(log, file=args.log_file)

    return AppConfig(parser=parser_settings, output=output_settings, logging=log)


def _setup_logging(config: AppConfig) -> None:
    log = config.logging
    console_level = log.console_level
    if console_level is None:
        console_level = logging.DEBUG if log.verbose else logging.WARNING
    configure_logging(console_level, log.level, log.file, plain=log.plain)


def _prepare(args: argparse.Namespace) -> AppConfig | None:
    try:
        config = load_app_config(args)
    except ConfigError as exc:
        configure_logging(logging.WARNING, logging.INFO, None)
        LOGGER.error("Failed to load configuration: %s", exc)
        return None
    _setup_logging(config)
    return config


def _build_regex_parser(regex: str, config: AppConfig) -> RegexParser:
    settings = config.parser
    return RegexParser(
        regex,
        settings.include_all_groups,
        engine=settings.engine,
        flags=settings.flags,
        timeout=settings.timeout,
    )


def run_parse_command(args: argparse.Namespace) -> int:
    if args.examples:
        render_extended_examples("parse", get_command_help("parse").extended_examples)
        return 0

    config = _prepare(args)
    if config is None:
        return 1

    values = list(args.arguments)
    if args.regex_option is not None:
        regex = args.regex_option
    elif values:
        regex = values.pop(0)
    else:
        regex = config.parser.regex
    if not regex:
        LOGGER.error(USAGE_HINT)
        return 2

    try:
        parser = _build_regex_parser(regex, config)
    except RegexParseError as exc:
        LOGGER.error("%s", exc)
        return 1

    emitter = RecordEmitter(config.output.format)
    try:
        for payload in iter_payloads(values, sys.stdin):
            emitter.emit(parser.parse(payload), payload=payload)
    except TimeoutError as exc:
        LOGGER.error("Matching aborted after payload #%d: %s", emitter.payload_count + 1, exc)
        return 1

    LOGGER.info(
        render_fields_block(
            "Parse Complete",
            {
                "Pattern": regex,
                "Payloads": emitter.payload_count,
                "Records": emitter.record_count,
            },
        )
    )
    return 0


def run_inspect_command(args: argparse.Namespace) -> int:
    if args.examples:
        render_extended_examples("inspect", get_command_help("inspect").extended_examples)
        return 0

    config = _prepare(args)
    if config is None:
        return 1

    regex = args.regex or config.parser.regex
    if not regex:
        LOGGER.error("A regular expression is required (argument, config file or REGEX_PATTERN)")
        return 2

    try:
        parser = _build_regex_parser(regex, config)
    except RegexParseError as exc:
        LOGGER.error("%s", exc)
        return 1

    print_pattern_banner(build_banner_info(parser), Console())
    return 0


def run_validate_config_command(args: argparse.Namespace) -> int:
    if args.examples:
        render_extended_examples("validate-config", get_command_help("validate-config").extended_examples)
        return 0

    config_path = _resolve_config_path(args)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING, logging.INFO, args.log_file)
    if config_path is None:
        LOGGER.error("No configuration file given; use --config or set %s", DEFAULT_CONFIG_ENV)
        return 2

    report = validate_config_file(config_path)
    ValidationFormatter(Console(), show_suggestions=not args.no_suggestions).format_report(report)
    return 0 if report.is_valid else 1


def _legacy_arguments(arguments: list[str]) -> list[str]:
    """Rewrite a bare "REGEX [VALUE ...]" command line as a parse command."""
    first = arguments[0]
    if first.startswith("-") and not _OPTION_SHAPE.match(first):
        # A regex such as "-?[0-9]+" must not be read as an option.
        return ["parse", "--", *arguments]
    return ["parse", *arguments]


def main(argv: Sequence[str] | None = None) -> int:
    arguments = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()

    if not arguments:
        parser.print_usage(sys.stderr)
        sys.stderr.write(USAGE_HINT + "\n")
        return 2

    # Bare "regexparse REGEX [VALUE ...]" is shorthand for the parse command.
    if arguments[0] not in COMMANDS and arguments[0] not in ("-h", "--help", "--version"):
        arguments = _legacy_arguments(arguments)

    args = parser.parse_args(arguments)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
