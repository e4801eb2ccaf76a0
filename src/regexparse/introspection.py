"""Capture-group discovery for compiled patterns.

Group names and the group count are read once, when a parser is built, and
reused for every match afterwards. Engines differ in how (or whether) they
expose this information, so extraction sits behind ``PatternIntrospector``
and can be swapped without touching the projection code.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import IntrospectionError
from .logging_utils import render_fields_block

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupMetadata:
    """Capture-group layout of a compiled pattern.

    Attributes:
        group_names: Distinct names bound to capture groups (never group 0)
        group_count: Total capture groups including the implicit group 0
        name_positions: Lowest ordinal each name is bound to, when known
    """

    group_names: frozenset[str]
    group_count: int
    name_positions: Mapping[str, int] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        if self.group_count < 1:
            raise IntrospectionError(f"Group count must include group 0, got {self.group_count}")

    @property
    def has_named_groups(self) -> bool:
        return bool(self.group_names)

    @property
    def ordered_names(self) -> tuple[str, ...]:
        """Names sorted by group position, falling back to alphabetical for unknown positions."""
        positions = self.name_positions
        return tuple(
            sorted(
                self.group_names,
                key=lambda name: (positions.get(name, self.group_count), name),
            )
        )


class PatternIntrospector(ABC):
    """Recovers capture-group names and count from a compiled pattern."""

    @abstractmethod
    def extract_group_names(self, pattern: Any) -> frozenset[str]:
        """Return the distinct capture-group names, or an empty set when there are none."""

    @abstractmethod
    def extract_group_count(self, pattern: Any) -> int:
        """Return the number of capture groups including group 0."""

    def extract_name_positions(self, pattern: Any) -> Mapping[str, int]:
        return {}


class CompiledPatternIntrospector(PatternIntrospector):
    """Reads ``groupindex`` and ``groups`` from ``re``/``regex`` pattern objects."""

    def _groupindex(self, pattern: Any) -> Mapping[str, int]:
        groupindex = getattr(pattern, "groupindex", None)
        if not isinstance(groupindex, Mapping):
            raise IntrospectionError(
                f"Pattern object of type {type(pattern).__name__} does not expose named capture groups"
            )
        return groupindex

    def extract_group_names(self, pattern: Any) -> frozenset[str]:
        return frozenset(str(name) for name in self._groupindex(pattern))

    def extract_group_count(self, pattern: Any) -> int:
        groups = getattr(pattern, "groups", None)
        if isinstance(groups, bool) or not isinstance(groups, int):
            raise IntrospectionError(
                f"Pattern object of type {type(pattern).__name__} does not expose a capture group count"
            )
        return groups + 1

    def extract_name_positions(self, pattern: Any) -> Mapping[str, int]:
        return {str(name): int(index) for name, index in self._groupindex(pattern).items()}


class StaticIntrospector(PatternIntrospector):
    """Returns caller-supplied metadata for engines that cannot be introspected.

    ``group_count`` includes group 0, so a pattern with two explicit groups
    is described with ``group_count=3``.
    """

    def __init__(
        self,
        group_names: Iterable[str],
        group_count: int,
        *,
        name_positions: Mapping[str, int] | None = None,
    ) -> None:
        if group_count < 1:
            raise IntrospectionError(f"Group count must include group 0, got {group_count}")
        self._group_names = frozenset(group_names)
        self._group_count = group_count
        self._name_positions = dict(name_positions or {})

    def extract_group_names(self, pattern: Any) -> frozenset[str]:
        return self._group_names

    def extract_group_count(self, pattern: Any) -> int:
        return self._group_count

    def extract_name_positions(self, pattern: Any) -> Mapping[str, int]:
        return dict(self._name_positions)


DEFAULT_INTROSPECTOR = CompiledPatternIntrospector()


def build_metadata(
    group_names: Iterable[str],
    group_count: int,
    name_positions: Mapping[str, int] | None = None,
) -> GroupMetadata:
    names = frozenset(group_names)
    if "0" in names:
        raise IntrospectionError("Group 0 cannot carry a name")
    metadata = GroupMetadata(
        group_names=names,
        group_count=group_count,
        name_positions=dict(name_positions or {}),
    )
    LOGGER.debug(
        render_fields_block(
            "Pattern Introspected",
            {
                "Named groups": list(metadata.ordered_names) or "(none)",
                "Group count": metadata.group_count,
            },
        )
    )
    return metadata


def introspect(pattern: Any, introspector: PatternIntrospector | None = None) -> GroupMetadata:
    """Run both extractions once and bundle them into ``GroupMetadata``."""
    introspector = introspector or DEFAULT_INTROSPECTOR
    return build_metadata(
        introspector.extract_group_names(pattern),
        introspector.extract_group_count(pattern),
        introspector.extract_name_positions(pattern),
    )
