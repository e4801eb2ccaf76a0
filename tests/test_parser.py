from __future__ import annotations

import pytest

from regexparse import (
    IntrospectionError,
    PatternCompileError,
    Record,
    RegexParser,
    StaticIntrospector,
)


class TestRecordProjection:
    """Records built for the documented examples."""

    def test_single_named_group_includes_all_groups(self) -> None:
        parser = RegexParser("(?<alpha>[a-z]+)", True)

        records = parser.parse("abc 123")

        assert records == [{"alpha": "abc", "0": "abc", "1": "abc"}]

    def test_two_matches_in_left_to_right_order(self) -> None:
        parser = RegexParser("(?<alpha>[a-z]+) ([0-9]+)")

        records = parser.parse("abc 123 efg 456")

        assert records == [
            {"alpha": "abc", "0": "abc 123", "1": "abc", "2": "123"},
            {"alpha": "efg", "0": "efg 456", "1": "efg", "2": "456"},
        ]

    def test_named_only_omits_ordinal_fields(self) -> None:
        parser = RegexParser("(?<alpha>[a-z]+) ([0-9]+)", include_all_groups=False)

        records = parser.parse("abc 123 efg 456")

        assert records == [{"alpha": "abc"}, {"alpha": "efg"}]
        assert all("0" not in record for record in records)

    def test_no_named_groups_always_emits_ordinals(self) -> None:
        parser = RegexParser("([a-z]+) ([0-9]+)", include_all_groups=False)

        records = parser.parse("abc 123 efg 456")

        assert records == [
            {"0": "abc 123", "1": "abc", "2": "123"},
            {"0": "efg 456", "1": "efg", "2": "456"},
        ]

    def test_pattern_without_groups_emits_whole_match(self) -> None:
        parser = RegexParser("[0-9]+")

        assert parser.parse("a1 b22") == [{"0": "1"}, {"0": "22"}]

    def test_trailing_text_after_last_match_is_ignored(self) -> None:
        parser = RegexParser("(?<alpha>[a-z]+) ([0-9]+)")

        records = parser.parse("abc 123 efg 456 end")

        assert len(records) == 2

    def test_named_fields_come_first_in_group_order(self) -> None:
        parser = RegexParser("(?<zulu>[a-z]+)-(?<alpha>[0-9]+)")

        (record,) = parser.parse("abc-123")

        assert list(record) == ["zulu", "alpha", "0", "1", "2"]

    def test_record_carries_match_span(self) -> None:
        parser = RegexParser("(?<num>[0-9]+)")

        records = parser.parse("ab 12 cd 345")

        assert [record.span for record in records] == [(3, 5), (9, 12)]


class TestAbsentCaptures:
    """Groups that do not participate are None, empty captures are ''."""

    def test_non_participating_named_group_is_none(self) -> None:
        parser = RegexParser("(?<a>x)|(?<b>y)")

        (record,) = parser.parse("y")

        assert record["a"] is None
        assert record["b"] == "y"
        assert record["1"] is None
        assert record["2"] == "y"

    def test_empty_capture_is_empty_string(self) -> None:
        parser = RegexParser("(?<a>x*)y")

        (record,) = parser.parse("y")

        assert record["a"] == ""
        assert record["a"] is not None

    def test_optional_unnamed_group_is_none(self) -> None:
        parser = RegexParser("a(b)?c")

        assert parser.parse("ac") == [{"0": "ac", "1": None}]


class TestScanning:
    """Match scanning behaviour."""

    def test_no_match_returns_empty_list(self) -> None:
        parser = RegexParser("(?<alpha>[a-z]+)")

        assert parser.parse("123 456") == []
        assert parser.parse("") == []

    def test_empty_width_matches_terminate(self) -> None:
        parser = RegexParser("a*")

        records = parser.parse("bbb")

        assert records == [{"0": ""}] * 4
        assert [record.span for record in records] == [(0, 0), (1, 1), (2, 2), (3, 3)]

    def test_parse_is_idempotent(self) -> None:
        parser = RegexParser("(?<alpha>[a-z]+) ([0-9]+)")

        first = parser.parse("abc 123 efg 456")
        second = parser.parse("abc 123 efg 456")

        assert first == second

    def test_iter_parse_is_lazy_and_matches_parse(self) -> None:
        parser = RegexParser("(?<num>[0-9]+)")

        iterator = parser.iter_parse("1 2 3")

        assert next(iterator) == {"num": "1", "0": "1", "1": "1"}
        assert [record["num"] for record in iterator] == ["2", "3"]

    def test_parse_many_flattens_in_payload_order(self) -> None:
        parser = RegexParser("(?<num>[0-9]+)", include_all_groups=False)

        records = list(parser.parse_many(["1 2", "", "3"]))

        assert records == [{"num": "1"}, {"num": "2"}, {"num": "3"}]


class TestEnginesAndFlags:
    """Engine selection and flag handling."""

    def test_stdlib_engine_with_python_named_groups(self) -> None:
        parser = RegexParser("(?P<alpha>[a-z]+) ([0-9]+)", engine="re")

        assert parser.parse("abc 123") == [{"alpha": "abc", "0": "abc 123", "1": "abc", "2": "123"}]

    def test_regex_engine_accepts_both_named_group_syntaxes(self) -> None:
        parser = RegexParser("(?P<first>[a-z])(?<second>[a-z])")

        assert parser.metadata.group_names == frozenset({"first", "second"})

    def test_ignorecase_flag(self) -> None:
        parser = RegexParser("(?<word>hello)", flags=["IGNORECASE"])

        assert [record["word"] for record in parser.parse("Hello HELLO")] == ["Hello", "HELLO"]

    def test_flag_aliases_are_normalized(self) -> None:
        parser = RegexParser("^x", flags=["m", "MULTILINE", "i"])

        assert parser.flags == ("MULTILINE", "IGNORECASE")
        assert len(parser.parse("x\nX")) == 2

    def test_invalid_regex_raises_compile_error(self) -> None:
        with pytest.raises(PatternCompileError) as excinfo:
            RegexParser("(unclosed")

        assert excinfo.value.pattern == "(unclosed"
        assert excinfo.value.engine == "regex"
        assert isinstance(excinfo.value, ValueError)

    def test_invalid_regex_with_stdlib_engine(self) -> None:
        with pytest.raises(PatternCompileError):
            RegexParser("[a-", engine="re")

    def test_unknown_engine_raises_compile_error(self) -> None:
        with pytest.raises(PatternCompileError, match="Unknown regex engine"):
            RegexParser("a", engine="pcre")

    def test_unknown_flag_raises_compile_error(self) -> None:
        with pytest.raises(PatternCompileError, match="Unknown regex flag"):
            RegexParser("a", flags=["LOCALE_ISH"])

    def test_timeout_requires_regex_engine(self) -> None:
        with pytest.raises(PatternCompileError, match="does not support match timeouts"):
            RegexParser("a", engine="re", timeout=1.0)

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(PatternCompileError, match="greater than 0"):
            RegexParser("a", timeout=0)

    def test_timeout_allows_normal_matching(self) -> None:
        parser = RegexParser("(?<num>[0-9]+)", timeout=5.0)

        assert [record["num"] for record in parser.parse("1 22")] == ["1", "22"]


class TestIntrospectionHooks:
    """Overridable group extraction on the parser."""

    def test_metadata_is_computed_once(self) -> None:
        parser = RegexParser("(?<alpha>[a-z]+) ([0-9]+)")

        assert parser.metadata.group_names == frozenset({"alpha"})
        assert parser.metadata.group_count == 3

    def test_static_introspector_replaces_engine_metadata(self) -> None:
        parser = RegexParser("([a-z]+)-([0-9]+)", introspector=StaticIntrospector([], 2))

        assert parser.parse("ab-12") == [{"0": "ab-12", "1": "ab"}]

    def test_subclass_can_override_group_names(self) -> None:
        class OnlyKeyParser(RegexParser):
            def extract_group_names(self, pattern):
                return frozenset({"key"})

        parser = OnlyKeyParser("(?<key>[a-z]+)=(?<value>[0-9]+)", include_all_groups=False)

        assert parser.parse("a=1") == [{"key": "a"}]

    def test_introspection_failure_surfaces_at_construction(self) -> None:
        class BrokenParser(RegexParser):
            def extract_group_count(self, pattern):
                raise IntrospectionError("no group count available")

        with pytest.raises(IntrospectionError):
            BrokenParser("(a)")

    def test_static_count_beyond_pattern_groups_is_rejected(self) -> None:
        with pytest.raises(IntrospectionError, match="groups including group 0"):
            RegexParser("(a)", introspector=StaticIntrospector([], 5))

    def test_static_name_missing_from_pattern_is_rejected(self) -> None:
        with pytest.raises(IntrospectionError, match="no capture groups named ghost"):
            RegexParser("(?<real>a)", introspector=StaticIntrospector(["ghost"], 2))

    def test_describe_reports_layout(self) -> None:
        parser = RegexParser("(?<alpha>[a-z]+) ([0-9]+)", flags=["i"])

        description = parser.describe()

        assert description["group_names"] == ["alpha"]
        assert description["group_count"] == 3
        assert description["engine"] == "regex"
        assert description["flags"] == ["IGNORECASE"]


def test_record_is_read_only_mapping() -> None:
    record = Record([("alpha", "abc"), ("0", "abc")])

    with pytest.raises(TypeError):
        record["alpha"] = "other"  # type: ignore[index]

    assert record.to_dict() == {"alpha": "abc", "0": "abc"}
    assert record == Record([("alpha", "abc"), ("0", "abc")])
    assert hash(record) == hash(Record([("alpha", "abc"), ("0", "abc")]))


def test_records_with_reordered_fields_hash_alike() -> None:
    first = Record([("a", "1"), ("b", "2")])
    second = Record([("b", "2"), ("a", "1")])

    assert first == second
    assert hash(first) == hash(second)
    assert len({first, second}) == 1
