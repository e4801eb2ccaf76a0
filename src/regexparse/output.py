"""Serialization of records for the command line.

Absent captures (``None``) are written as ``null`` in JSON and YAML, and as
a dim ``∅`` in tables, so they stay distinguishable from empty captures.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Sequence
from typing import Optional, TextIO

import yaml
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import Record

ABSENT_MARKER = "∅"


def record_to_json(record: Record) -> str:
    return json.dumps(record.to_dict(), ensure_ascii=False)


def record_to_yaml(record: Record) -> str:
    return yaml.safe_dump(
        record.to_dict(),
        sort_keys=False,
        allow_unicode=True,
        explicit_start=True,
        default_flow_style=False,
    )


def build_records_table(records: Sequence[Record], *, title: Optional[str] = None) -> Table:
    """Build a table with one row per record and one column per field key, in first-seen order."""
    columns: list[str] = []
    for record in records:
        for key in record:
            if key not in columns:
                columns.append(key)

    table = Table(title=Text(title) if title else None, title_justify="left", show_lines=False)
    for key in columns:
        table.add_column(key, style="cyan" if not key.isdigit() else "white", overflow="fold")

    for record in records:
        cells: list[Text] = []
        for key in columns:
            value = record.get(key)
            if value is None:
                cells.append(Text(ABSENT_MARKER, style="dim"))
            else:
                cells.append(Text(value))
        table.add_row(*cells)
    return table


class RecordEmitter:
    """Writes the records of successive payloads in one output format."""

    def __init__(
        self,
        output_format: str = "json",
        *,
        stream: Optional[TextIO] = None,
        console: Optional[Console] = None,
    ) -> None:
        if output_format not in ("json", "yaml", "table"):
            raise ValueError(f"Unsupported output format: {output_format}")
        self.output_format = output_format
        self.stream = stream or sys.stdout
        self.console = console or Console(file=self.stream)
        self.payload_count = 0
        self.record_count = 0

    def emit(self, records: Sequence[Record], *, payload: Optional[str] = None) -> None:
        self.payload_count += 1
        self.record_count += len(records)

        if self.output_format == "table":
            title = f"#{self.payload_count}: {payload}" if payload is not None else f"#{self.payload_count}"
            if not records:
                self.console.print(Text(f"{title} (no matches)", style="dim"))
                return
            self.console.print(build_records_table(records, title=title))
            return

        for record in records:
            if self.output_format == "json":
                self.stream.write(record_to_json(record) + "\n")
            else:
                self.stream.write(record_to_yaml(record))
        self.stream.flush()
