from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml
from jsonschema import Draft7Validator

from .config import OUTPUT_FORMATS
from .engines import DEFAULT_ENGINE, ENGINES, SUPPORTED_FLAGS, normalize_flag_names
from .errors import IntrospectionError, PatternCompileError
from .logging_utils import LOG_LEVELS
from .parser import RegexParser
from .utils import load_yaml_file, parse_env_bool


@dataclass(slots=True)
class ValidationIssue:
    """Represents a single validation problem."""

    severity: str
    path: str
    message: str
    code: str
    fix_suggestion: Optional[str] = None


@dataclass(slots=True)
class ValidationReport:
    """Aggregates validation warnings and errors."""

    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


_FLAG_NAMES = list(SUPPORTED_FLAGS) + [name.lower() for name in SUPPORTED_FLAGS] + list("IMSXAimsxa")
_LEVEL_NAMES = list(LOG_LEVELS) + [name.lower() for name in LOG_LEVELS]

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "parser": {
            "type": "object",
            "properties": {
                "regex": {"type": "string", "minLength": 1},
                "include_all_groups": {"type": ["boolean", "string"]},
                "engine": {"type": "string", "enum": sorted(ENGINES)},
                "flags": {
                    "oneOf": [
                        {"type": "array", "items": {"type": "string", "enum": _FLAG_NAMES}},
                        {"type": "string"},
                    ]
                },
                "timeout": {"type": ["number", "string", "null"], "exclusiveMinimum": 0},
            },
            "additionalProperties": False,
        },
        "output": {
            "type": "object",
            "properties": {
                "format": {"type": "string", "enum": list(OUTPUT_FORMATS)},
            },
            "additionalProperties": False,
        },
        "logging": {
            "type": "object",
            "properties": {
                "level": {"type": "string", "enum": _LEVEL_NAMES},
                "console_level": {"type": "string", "enum": _LEVEL_NAMES},
                "file": {"type": "string"},
                "verbose": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


def _format_jsonschema_path(path: Sequence[Any]) -> str:
    if not path:
        return "<root>"
    parts: List[str] = []
    for element in path:
        if isinstance(element, int):
            parts.append(f"[{element}]")
        else:
            if parts:
                parts.append(".")
            parts.append(str(element))
    return "".join(parts)


def _suggest_schema_fix(path: str, message: str) -> Optional[str]:
    if "Additional properties are not allowed" in message:
        return "Remove the unknown key or check its spelling against the documented settings"
    if path.startswith("parser.engine"):
        return f"Use one of: {', '.join(sorted(ENGINES))}"
    if path.startswith("parser.flags"):
        return f"Supported flags: {', '.join(SUPPORTED_FLAGS)}"
    if path.startswith("output.format"):
        return f"Use one of: {', '.join(OUTPUT_FORMATS)}"
    return None


def _validate_semantics(data: Dict[str, Any], report: ValidationReport) -> None:
    parser_data = data.get("parser")
    if parser_data is None:
        parser_data = {}
    if not isinstance(parser_data, dict):
        return  # already reported by the schema

    regex = parser_data.get("regex")
    if not isinstance(regex, str) or not regex:
        report.warnings.append(
            ValidationIssue(
                severity="warning",
                path="parser.regex",
                message="No regex configured; it must then be passed on the command line or via REGEX_PATTERN",
                code="regex-missing",
            )
        )
        return

    engine = parser_data.get("engine", DEFAULT_ENGINE)
    flags = parser_data.get("flags") or []
    if isinstance(flags, str):
        flags = flags.split(",")
    if not isinstance(flags, list):
        return  # already reported by the schema
    timeout = parser_data.get("timeout")
    if isinstance(timeout, str):
        try:
            timeout = float(timeout)
        except ValueError:
            report.errors.append(
                ValidationIssue(
                    severity="error",
                    path="parser.timeout",
                    message=f"'{timeout}' is not a number",
                    code="timeout-invalid",
                )
            )
            timeout = None
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float))):
        return  # already reported by the schema
    if timeout is not None and timeout <= 0:
        timeout = None  # already reported by the schema

    if not isinstance(engine, str) or engine not in ENGINES:
        return  # already reported by the schema
    try:
        normalize_flag_names(flags)
    except ValueError:
        return  # already reported by the schema

    if timeout is not None and not ENGINES[engine].supports_timeout:
        report.errors.append(
            ValidationIssue(
                severity="error",
                path="parser.timeout",
                message=f"Engine '{engine}' does not support match timeouts",
                code="timeout-unsupported",
                fix_suggestion="Remove 'timeout' or switch 'engine' to 'regex'",
            )
        )
        timeout = None

    try:
        parser = RegexParser(regex, engine=engine, flags=flags, timeout=timeout)
    except PatternCompileError as exc:
        report.errors.append(
            ValidationIssue(
                severity="error",
                path="parser.regex",
                message=exc.reason,
                code="regex-invalid",
                fix_suggestion="Try the expression with 'regexparse inspect' to see where it fails",
            )
        )
        return
    except IntrospectionError as exc:
        report.errors.append(
            ValidationIssue(
                severity="error",
                path="parser.regex",
                message=str(exc),
                code="introspection-failed",
            )
        )
        return

    include_all_groups = parser_data.get("include_all_groups")
    if isinstance(include_all_groups, str):
        include_all_groups = parse_env_bool(include_all_groups)
    if include_all_groups is False and not parser.metadata.has_named_groups:
        report.warnings.append(
            ValidationIssue(
                severity="warning",
                path="parser.include_all_groups",
                message="Pattern has no named groups; ordinal fields are emitted regardless of this setting",
                code="no-named-groups",
                fix_suggestion="Name the groups you want to keep, e.g. (?<word>\\w+)",
            )
        )


def validate_config_data(data: Dict[str, Any]) -> ValidationReport:
    """Validate configuration data against the schema and semantic rules."""
    report = ValidationReport()
    validator = Draft7Validator(CONFIG_SCHEMA)

    for error in sorted(validator.iter_errors(data), key=lambda exc: list(map(str, exc.absolute_path))):
        error_path = _format_jsonschema_path(error.absolute_path)
        report.errors.append(
            ValidationIssue(
                severity="error",
                path=error_path,
                message=error.message,
                code="schema",
                fix_suggestion=_suggest_schema_fix(error_path, error.message),
            )
        )

    _validate_semantics(data, report)
    return report


def validate_config_file(path: Path) -> ValidationReport:
    try:
        data = load_yaml_file(path, expand=False)
    except (OSError, yaml.YAMLError, ValueError) as exc:
        report = ValidationReport()
        report.errors.append(
            ValidationIssue(
                severity="error",
                path="<file>",
                message=f"Unable to load {path}: {exc}",
                code="load-config",
                fix_suggestion="Check that the file exists and contains a YAML mapping",
            )
        )
        return report
    return validate_config_data(data)
