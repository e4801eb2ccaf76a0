from __future__ import annotations

import logging
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from textwrap import wrap
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_WRAP_WIDTH = 100
DEFAULT_LABEL_WIDTH = 18
DEFAULT_INDENT = "    "

FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s\n%(message)s\n"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PLAIN_CONSOLE_FORMAT = "%(levelname)-8s %(name)s: %(message)s"

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

FieldMapping = Union[Mapping[str, object], Sequence[tuple[str, object]]]

_HANDLER_MARKER = "_regexparse_handler"


def _coerce_items(fields: FieldMapping) -> list[tuple[str, object]]:
    if isinstance(fields, Mapping):
        return list(fields.items())
    return list(fields)


def _stringify(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(_stringify(item) for item in value)
    return str(value)


def render_fields_block(title: str, fields: FieldMapping, *, pad_top: bool = True) -> str:
    """Render a titled block of ``label: value`` lines for multi-field log messages."""
    lines: list[str] = [""] if pad_top else []
    lines.append(title)
    lines.append("-" * len(title))

    items = _coerce_items(fields)
    if items:
        computed_width = max(len(str(key)) for key, _ in items)
        label_width = max(min(computed_width, DEFAULT_LABEL_WIDTH), 8)
        value_width = max(DEFAULT_WRAP_WIDTH - len(DEFAULT_INDENT) - label_width - 4, 32)
        for key, value in items:
            wrapped = wrap(_stringify(value), width=value_width) or [""]
            lines.append(f"{DEFAULT_INDENT}{str(key):<{label_width}}: {wrapped[0]}")
            for continuation in wrapped[1:]:
                lines.append(f"{DEFAULT_INDENT}{'':<{label_width}}  {continuation}")

    return "\n".join(lines).rstrip()


def parse_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Translate a level name (``"debug"``) or number into a logging level."""
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    name = str(value).strip().upper()
    if name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level '{value}' (expected one of: {', '.join(LOG_LEVELS)})")
    return getattr(logging, name)


def configure_logging(
    console_level: int = logging.WARNING,
    file_level: int = logging.INFO,
    log_file: Path | None = None,
    *,
    plain: bool | None = None,
) -> None:
    """Install console (stderr) and optional file handlers on the root logger.

    Records are written to stdout by the CLI, so console logs always go to
    stderr. ``plain=None`` picks Rich output only when stderr is a terminal.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root.removeHandler(handler)
            handler.close()

    if plain is None:
        plain = not sys.stderr.isatty()

    console_handler: logging.Handler
    if plain:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(PLAIN_CONSOLE_FORMAT))
    else:
        console_handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
    console_handler.setLevel(console_level)
    setattr(console_handler, _HANDLER_MARKER, True)
    root.addHandler(console_handler)

    levels = [console_level]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=FILE_DATE_FORMAT))
        file_handler.setLevel(file_level)
        setattr(file_handler, _HANDLER_MARKER, True)
        root.addHandler(file_handler)
        levels.append(file_level)

    root.setLevel(min(levels))
