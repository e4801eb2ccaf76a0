from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import TextIO


def iter_lines(stream: TextIO) -> Iterator[str]:
    """Yield each line of ``stream`` without its line terminator."""
    for line in stream:
        yield line.rstrip("\r\n")


def iter_payloads(values: Sequence[str], stream: TextIO) -> Iterable[str]:
    """Use the explicit values when given, otherwise one payload per line of ``stream``."""
    if values:
        return iter(values)
    return iter_lines(stream)
