from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from types import ModuleType
from typing import Any

import regex

from .errors import PatternCompileError

LOGGER = logging.getLogger(__name__)

DEFAULT_ENGINE = "regex"

SUPPORTED_FLAGS = ("IGNORECASE", "MULTILINE", "DOTALL", "VERBOSE", "ASCII")

_FLAG_ALIASES = {
    "I": "IGNORECASE",
    "M": "MULTILINE",
    "S": "DOTALL",
    "X": "VERBOSE",
    "A": "ASCII",
}


@dataclass(frozen=True)
class RegexEngine:
    """A regex implementation the parser can compile patterns with.

    Attributes:
        name: Registry key (``regex`` or ``re``)
        module: The module providing ``compile`` and ``error``
        supports_timeout: Whether matching calls accept a ``timeout`` keyword
    """

    name: str
    module: ModuleType
    supports_timeout: bool = False

    @property
    def error_type(self) -> type[Exception]:
        return self.module.error

    def flag_value(self, flag_names: Iterable[str]) -> int:
        value = 0
        for flag_name in normalize_flag_names(flag_names):
            value |= int(getattr(self.module, flag_name))
        return value

    def compile(self, source: str, flag_names: Iterable[str] = ()) -> Any:
        return self.module.compile(source, self.flag_value(flag_names))


ENGINES: dict[str, RegexEngine] = {
    "regex": RegexEngine(name="regex", module=regex, supports_timeout=True),
    "re": RegexEngine(name="re", module=re, supports_timeout=False),
}


def normalize_flag_names(flag_names: Iterable[str]) -> tuple[str, ...]:
    """Return canonical, de-duplicated flag names in the order given.

    Accepts full names (``IGNORECASE``) and single-letter aliases (``i``).
    """
    normalized: list[str] = []
    for raw in flag_names:
        name = str(raw).strip().upper()
        if not name:
            continue
        name = _FLAG_ALIASES.get(name, name)
        if name not in SUPPORTED_FLAGS:
            supported = ", ".join(SUPPORTED_FLAGS)
            raise ValueError(f"Unknown regex flag '{raw}' (supported: {supported})")
        if name not in normalized:
            normalized.append(name)
    return tuple(normalized)


def get_engine(name: str) -> RegexEngine:
    try:
        return ENGINES[name]
    except KeyError:
        supported = ", ".join(sorted(ENGINES))
        raise ValueError(f"Unknown regex engine '{name}' (supported: {supported})") from None


def compile_pattern(
    source: str,
    *,
    engine: str = DEFAULT_ENGINE,
    flags: Iterable[str] = (),
) -> Any:
    """Compile ``source`` with the named engine, raising ``PatternCompileError`` on failure."""
    try:
        selected = get_engine(engine)
        flag_names = normalize_flag_names(flags)
    except ValueError as exc:
        raise PatternCompileError(source, str(exc), engine=engine) from exc

    try:
        compiled = selected.compile(source, flag_names)
    except selected.error_type as exc:
        raise PatternCompileError(source, str(exc), engine=selected.name) from exc

    LOGGER.debug("Compiled pattern %r with engine=%s flags=%s", source, selected.name, list(flag_names))
    return compiled
