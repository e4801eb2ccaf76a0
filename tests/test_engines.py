from __future__ import annotations

import re

import pytest
import regex

from regexparse.engines import ENGINES, compile_pattern, get_engine, normalize_flag_names
from regexparse.errors import PatternCompileError


class TestNormalizeFlagNames:
    """Flag name canonicalisation."""

    def test_full_names_and_aliases(self) -> None:
        assert normalize_flag_names(["ignorecase", "S", " x "]) == ("IGNORECASE", "DOTALL", "VERBOSE")

    def test_duplicates_and_blanks_are_dropped(self) -> None:
        assert normalize_flag_names(["I", "IGNORECASE", ""]) == ("IGNORECASE",)

    def test_unknown_flag(self) -> None:
        with pytest.raises(ValueError, match="Unknown regex flag 'Q'"):
            normalize_flag_names(["Q"])


class TestCompilePattern:
    """Compiling through the engine registry."""

    def test_default_engine_is_regex(self) -> None:
        compiled = compile_pattern(r"(?<a>x)")

        assert isinstance(compiled, regex.Pattern)

    def test_stdlib_engine(self) -> None:
        compiled = compile_pattern(r"(?P<a>x)", engine="re")

        assert isinstance(compiled, re.Pattern)

    def test_flags_are_applied(self) -> None:
        compiled = compile_pattern("a.b", flags=["DOTALL"])

        assert compiled.search("a\nb") is not None

    def test_compile_error_chains_engine_error(self) -> None:
        with pytest.raises(PatternCompileError) as excinfo:
            compile_pattern("(", engine="re")

        assert isinstance(excinfo.value.__cause__, re.error)
        assert "Invalid regular expression '('" in str(excinfo.value)


def test_get_engine_unknown() -> None:
    with pytest.raises(ValueError, match="supported: re, regex"):
        get_engine("pcre")


def test_only_regex_engine_supports_timeouts() -> None:
    assert ENGINES["regex"].supports_timeout is True
    assert ENGINES["re"].supports_timeout is False
