from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Optional

FieldValue = Optional[str]


class Record(Mapping[str, FieldValue]):
    """Immutable, ordered field mapping produced for one match.

    A value of ``None`` marks a capture group that did not take part in the
    match. An empty string is a group that matched zero characters.
    Records compare equal to plain dicts holding the same items.
    """

    __slots__ = ("_fields", "_span")

    def __init__(
        self,
        fields: Iterable[tuple[str, FieldValue]] = (),
        *,
        span: tuple[int, int] | None = None,
    ) -> None:
        self._fields: dict[str, FieldValue] = dict(fields)
        self._span = span

    @property
    def span(self) -> tuple[int, int] | None:
        """``(start, end)`` offsets of the match in its payload, when known."""
        return self._span

    def __getitem__(self, key: str) -> FieldValue:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __hash__(self) -> int:
        return hash(frozenset(self._fields.items()))

    def __repr__(self) -> str:
        return f"Record({self._fields!r})"

    def to_dict(self) -> dict[str, FieldValue]:
        return dict(self._fields)
