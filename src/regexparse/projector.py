"""Projection of regex matches into records.

Given a compiled pattern and its ``GroupMetadata`` this module scans a payload
for successive non-overlapping matches and turns each one into a ``Record``:

- every named group becomes a field keyed by its name
- when ``include_all_groups`` is set, or the pattern has no named groups at
  all, every group ``0..group_count-1`` also becomes a field keyed by its
  ordinal as a string

Scanning uses the engine's ``finditer``. Each scan resumes where the previous
match ended and steps past empty-width matches, so it always terminates.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from .introspection import GroupMetadata
from .models import FieldValue, Record

LOGGER = logging.getLogger(__name__)


def project_match(match: Any, metadata: GroupMetadata, include_all_groups: bool) -> Record:
    """Build the record for a single match object."""
    fields: list[tuple[str, FieldValue]] = []
    for name in metadata.ordered_names:
        fields.append((name, match.group(name)))

    if include_all_groups or not metadata.group_names:
        for index in range(metadata.group_count):
            fields.append((str(index), match.group(index)))

    return Record(fields, span=match.span())


def iter_records(
    pattern: Any,
    metadata: GroupMetadata,
    include_all_groups: bool,
    payload: str,
    *,
    timeout: float | None = None,
) -> Iterator[Record]:
    """Lazily yield one record per match, in the order the matches start.

    ``timeout`` is forwarded to engines that support it (``regex``). Errors
    raised by the engine while scanning propagate to the caller.
    """
    if timeout is None:
        matches = pattern.finditer(payload)
    else:
        matches = pattern.finditer(payload, timeout=timeout)

    for match in matches:
        yield project_match(match, metadata, include_all_groups)


def parse(
    pattern: Any,
    metadata: GroupMetadata,
    include_all_groups: bool,
    payload: str,
    *,
    timeout: float | None = None,
) -> list[Record]:
    """Return every record found in ``payload``; an empty list when nothing matches."""
    records = list(iter_records(pattern, metadata, include_all_groups, payload, timeout=timeout))
    LOGGER.debug("Projected %d record(s) from payload of length %d", len(records), len(payload))
    return records
