"""regexparse core package.

Converts text payloads into structured records, one record per
non-overlapping regular expression match:

- **parser**: ``RegexParser``, which compiles a pattern once and parses payloads
- **introspection**: capture-group discovery (``GroupMetadata``, ``PatternIntrospector``)
- **projector**: match scanning and match-to-record projection
- **engines**: the supported regex engines (``regex`` and ``re``) and flags
- **models**: the immutable ``Record`` mapping

The command-line shell lives in ``regexparse.cli``; configuration, validation
and output formatting are internal helpers for it.
"""

from .errors import ConfigError, IntrospectionError, PatternCompileError, RegexParseError
from .introspection import (
    CompiledPatternIntrospector,
    GroupMetadata,
    PatternIntrospector,
    StaticIntrospector,
    introspect,
)
from .models import Record
from .parser import RegexParser
from .version import __version__

__all__ = [
    "__version__",
    "CompiledPatternIntrospector",
    "ConfigError",
    "GroupMetadata",
    "IntrospectionError",
    "PatternCompileError",
    "PatternIntrospector",
    "Record",
    "RegexParseError",
    "RegexParser",
    "StaticIntrospector",
    "introspect",
]
