from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from . import projector
from .engines import DEFAULT_ENGINE, compile_pattern, get_engine, normalize_flag_names
from .errors import IntrospectionError, PatternCompileError
from .introspection import (
    DEFAULT_INTROSPECTOR,
    GroupMetadata,
    PatternIntrospector,
    build_metadata,
)
from .models import Record

LOGGER = logging.getLogger(__name__)


class RegexParser:
    """Turns payload strings into records, one per regex match.

    Named capture groups become fields of the same name. Unless
    ``include_all_groups`` is disabled, every group (including group 0, the
    whole match) is also emitted under its ordinal as a string. Patterns
    without any named group always emit ordinal fields.

    For example ``(?<alpha>[a-z]+) ([0-9]+)`` applied to ``"abc 123 efg 456"``
    yields::

        {"alpha": "abc", "0": "abc 123", "1": "abc", "2": "123"}
        {"alpha": "efg", "0": "efg 456", "1": "efg", "2": "456"}

    The pattern is compiled and introspected once here; instances carry no
    mutable state afterwards and can be shared between callers.

    Subclasses may override ``extract_group_names`` or
    ``extract_group_count`` when the engine cannot report them itself.
    """

    def __init__(
        self,
        regex: str,
        include_all_groups: bool = True,
        *,
        engine: str = DEFAULT_ENGINE,
        flags: Iterable[str] = (),
        timeout: float | None = None,
        introspector: PatternIntrospector | None = None,
    ) -> None:
        self.source = regex
        self.include_all_groups = include_all_groups
        self.engine = engine
        self.timeout = timeout
        self._introspector = introspector or DEFAULT_INTROSPECTOR

        self.pattern = compile_pattern(regex, engine=engine, flags=flags)
        self.flags = normalize_flag_names(flags)
        if timeout is not None:
            if not get_engine(engine).supports_timeout:
                raise PatternCompileError(regex, f"engine '{engine}' does not support match timeouts", engine=engine)
            if timeout <= 0:
                raise PatternCompileError(regex, "timeout must be greater than 0", engine=engine)

        self.metadata: GroupMetadata = build_metadata(
            self.extract_group_names(self.pattern),
            self.extract_group_count(self.pattern),
            self._name_positions(self.pattern),
        )
        self._check_metadata(self.pattern, self.metadata)

    def _check_metadata(self, pattern: Any, metadata: GroupMetadata) -> None:
        """Reject names or counts the compiled pattern cannot resolve."""
        groupindex = getattr(pattern, "groupindex", None)
        groups = getattr(pattern, "groups", None)
        if isinstance(groupindex, Mapping):
            unknown = sorted(metadata.group_names - set(groupindex))
            if unknown:
                raise IntrospectionError(
                    f"Pattern {self.source!r} has no capture groups named {', '.join(unknown)}"
                )
        if isinstance(groups, int) and not isinstance(groups, bool) and metadata.group_count > groups + 1:
            raise IntrospectionError(
                f"Pattern {self.source!r} has {groups + 1} groups including group 0, "
                f"but {metadata.group_count} were reported"
            )

    def _name_positions(self, pattern: Any) -> Mapping[str, int]:
        try:
            return self._introspector.extract_name_positions(pattern)
        except IntrospectionError:
            LOGGER.debug("Group positions unavailable for %r; named fields are ordered alphabetically", self.source)
            return {}

    def extract_group_names(self, pattern: Any) -> frozenset[str]:
        """Return the set of capture-group names declared by ``pattern``."""
        return self._introspector.extract_group_names(pattern)

    def extract_group_count(self, pattern: Any) -> int:
        """Return the total number of capture groups in ``pattern``, group 0 included."""
        return self._introspector.extract_group_count(pattern)

    def parse(self, payload: str) -> list[Record]:
        """Return one record per matched region of ``payload``, in match order."""
        return projector.parse(
            self.pattern,
            self.metadata,
            self.include_all_groups,
            payload,
            timeout=self.timeout,
        )

    def iter_parse(self, payload: str) -> Iterator[Record]:
        return projector.iter_records(
            self.pattern,
            self.metadata,
            self.include_all_groups,
            payload,
            timeout=self.timeout,
        )

    def parse_many(self, payloads: Iterable[str]) -> Iterator[Record]:
        """Parse each payload in turn and yield the records flattened, in payload order."""
        for payload in payloads:
            yield from self.iter_parse(payload)

    def describe(self) -> dict[str, Any]:
        return {
            "regex": self.source,
            "engine": self.engine,
            "flags": list(self.flags),
            "include_all_groups": self.include_all_groups,
            "timeout": self.timeout,
            "group_names": list(self.metadata.ordered_names),
            "group_count": self.metadata.group_count,
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.source!r}, include_all_groups={self.include_all_groups!r}, "
            f"engine={self.engine!r})"
        )
