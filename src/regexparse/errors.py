"""Exception hierarchy for regexparse.

Every error raised by the package derives from ``RegexParseError``. The
domain errors also inherit from the matching builtin so callers that already
catch ``ValueError`` or ``RuntimeError`` keep working.
"""

from __future__ import annotations


class RegexParseError(Exception):
    """Base exception for all regexparse errors."""


class PatternCompileError(RegexParseError, ValueError):
    """The regular expression could not be compiled for the selected engine."""

    def __init__(self, pattern: str, message: str, *, engine: str | None = None) -> None:
        self.pattern = pattern
        self.engine = engine
        self.reason = message
        prefix = f"[{engine}] " if engine else ""
        super().__init__(f"{prefix}Invalid regular expression {pattern!r}: {message}")


class IntrospectionError(RegexParseError, RuntimeError):
    """Capture-group names or count could not be recovered from a compiled pattern."""


class ConfigError(RegexParseError, ValueError):
    """Invalid configuration file contents or environment override."""


__all__ = [
    "RegexParseError",
    "PatternCompileError",
    "IntrospectionError",
    "ConfigError",
]
