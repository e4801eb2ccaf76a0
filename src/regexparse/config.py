from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from .engines import DEFAULT_ENGINE, ENGINES, normalize_flag_names
from .errors import ConfigError
from .logging_utils import parse_level
from .utils import env_bool, env_list, env_str, expand_env, load_yaml_file, parse_env_bool

OUTPUT_FORMATS = ("json", "yaml", "table")

DEFAULT_CONFIG_ENV = "REGEXPARSE_CONFIG"


@dataclass
class ParserSettings:
    regex: str | None = None
    include_all_groups: bool = True
    engine: str = DEFAULT_ENGINE
    flags: list[str] = field(default_factory=list)
    timeout: float | None = None


@dataclass
class OutputSettings:
    format: str = "json"  # json | yaml | table


@dataclass
class LoggingSettings:
    level: int = logging.INFO  # file handler level
    console_level: int | None = None  # defaults to WARNING, or DEBUG when verbose
    file: Path | None = None
    verbose: bool = False
    plain: bool | None = None


@dataclass
class AppConfig:
    parser: ParserSettings = field(default_factory=ParserSettings)
    output: OutputSettings = field(default_factory=OutputSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


def _ensure_mapping(value: Any, *, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{field_name}' must be provided as a mapping when specified")
    return value


def _coerce_bool(value: Any, *, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        parsed = parse_env_bool(value)
        if parsed is not None:
            return parsed
    raise ConfigError(f"'{field_name}' must be a boolean (true/false)")


def _coerce_timeout(value: Any, *, field_name: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigError(f"'{field_name}' must be a number")
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{field_name}' must be a number") from exc
    if timeout <= 0:
        raise ConfigError(f"'{field_name}' must be greater than 0")
    return timeout


def _coerce_engine(value: Any, *, field_name: str) -> str:
    engine = str(value).strip().lower()
    if engine not in ENGINES:
        supported = ", ".join(sorted(ENGINES))
        raise ConfigError(f"'{field_name}' must be one of: {supported} (got '{value}')")
    return engine


def _coerce_flags(value: Any, *, field_name: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        raise ConfigError(f"'{field_name}' must be provided as a list of flag names")
    try:
        return list(normalize_flag_names(value))
    except ValueError as exc:
        raise ConfigError(f"'{field_name}': {exc}") from exc


def _coerce_format(value: Any, *, field_name: str) -> str:
    output_format = str(value).strip().lower()
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError(f"'{field_name}' must be one of: {', '.join(OUTPUT_FORMATS)} (got '{value}')")
    return output_format


def _coerce_level(value: Any, *, field_name: str) -> int:
    try:
        return parse_level(value)
    except ValueError as exc:
        raise ConfigError(f"'{field_name}': {exc}") from exc


def _build_parser_settings(data: dict[str, Any]) -> ParserSettings:
    regex = data.get("regex")
    if regex is not None and not isinstance(regex, str):
        raise ConfigError("'parser.regex' must be a string")

    # Only the regex itself is kept verbatim; '$' is significant in patterns.
    expanded = expand_env({key: value for key, value in data.items() if key != "regex"})

    return ParserSettings(
        regex=regex,
        include_all_groups=_coerce_bool(
            expanded.get("include_all_groups", True), field_name="parser.include_all_groups"
        ),
        engine=_coerce_engine(expanded.get("engine", DEFAULT_ENGINE), field_name="parser.engine"),
        flags=_coerce_flags(expanded.get("flags"), field_name="parser.flags"),
        timeout=_coerce_timeout(expanded.get("timeout"), field_name="parser.timeout"),
    )


def _build_output_settings(data: dict[str, Any]) -> OutputSettings:
    data = expand_env(data)
    return OutputSettings(format=_coerce_format(data.get("format", "json"), field_name="output.format"))


def _build_logging_settings(data: dict[str, Any]) -> LoggingSettings:
    data = expand_env(data)
    console_raw = data.get("console_level")
    file_raw = data.get("file")
    return LoggingSettings(
        level=_coerce_level(data.get("level", "INFO"), field_name="logging.level"),
        console_level=_coerce_level(console_raw, field_name="logging.console_level") if console_raw else None,
        file=Path(str(file_raw)).expanduser() if file_raw else None,
        verbose=_coerce_bool(data.get("verbose", False), field_name="logging.verbose"),
    )


def build_config(data: dict[str, Any]) -> AppConfig:
    """Build an ``AppConfig`` from already-parsed YAML data."""
    data = _ensure_mapping(data, field_name="<root>")
    return AppConfig(
        parser=_build_parser_settings(_ensure_mapping(data.get("parser"), field_name="parser")),
        output=_build_output_settings(_ensure_mapping(data.get("output"), field_name="output")),
        logging=_build_logging_settings(_ensure_mapping(data.get("logging"), field_name="logging")),
    )


def load_config(path: Path) -> AppConfig:
    try:
        data = load_yaml_file(path, expand=False)
    except OSError as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc
    except (yaml.YAMLError, ValueError) as exc:
        raise ConfigError(f"Unable to parse config file {path}: {exc}") from exc
    return build_config(data)


def apply_env_overrides(config: AppConfig) -> AppConfig:
    """Return a copy of ``config`` with environment variable overrides applied."""
    parser = config.parser
    output = config.output
    log = config.logging

    regex = os.getenv("REGEX_PATTERN")
    if regex:
        parser = replace(parser, regex=regex)
    include_all = env_bool("INCLUDE_ALL_GROUPS")
    if include_all is not None:
        parser = replace(parser, include_all_groups=include_all)
    engine = env_str("REGEX_ENGINE")
    if engine:
        parser = replace(parser, engine=_coerce_engine(engine, field_name="REGEX_ENGINE"))
    flags = env_list("REGEX_FLAGS")
    if flags is not None:
        parser = replace(parser, flags=_coerce_flags(flags, field_name="REGEX_FLAGS"))
    timeout = env_str("REGEX_TIMEOUT")
    if timeout:
        parser = replace(parser, timeout=_coerce_timeout(timeout, field_name="REGEX_TIMEOUT"))

    output_format = env_str("OUTPUT_FORMAT")
    if output_format:
        output = replace(output, format=_coerce_format(output_format, field_name="OUTPUT_FORMAT"))

    level = env_str("LOG_LEVEL")
    if level:
        log = replace(log, level=_coerce_level(level, field_name="LOG_LEVEL"))
    console_level = env_str("CONSOLE_LEVEL")
    if console_level:
        log = replace(log, console_level=_coerce_level(console_level, field_name="CONSOLE_LEVEL"))
    log_file = env_str("LOG_FILE")
    if log_file:
        log = replace(log, file=Path(log_file).expanduser())
    verbose = env_bool("VERBOSE")
    if verbose is None:
        verbose = env_bool("DEBUG")
    if verbose is not None:
        log = replace(log, verbose=verbose)
    plain = env_bool("PLAIN_CONSOLE_LOGS")
    if plain is not None:
        log = replace(log, plain=plain)

    return AppConfig(parser=parser, output=output, logging=log)
