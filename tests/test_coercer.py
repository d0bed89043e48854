"""Unit tests for field coercion.

WHY: Coercion decides the JSON types of the output and which records are
rejected. Lists, optional fields and years are where the source file is
most irregular.

HOW: Tests call coerce_value for single specs and coerce_record for
whole blocks, covering each FieldKind rule, shadowed fields under both
keep policies, and failure reporting.
"""

import pytest

from pobsd_converter.config import KeepPolicy
from pobsd_converter.core.assembler import assemble_records
from pobsd_converter.core.coercer import CoercionFailure, coerce_record, coerce_value, split_list
from pobsd_converter.core.ir import DiagnosticKind
from pobsd_converter.core.schema import DEFAULT_SCHEMA
from pobsd_converter.core.tokenizer import tokenize


def _spec(tag):
    return DEFAULT_SCHEMA.get(tag)


def _coerce(text, **kwargs):
    record = assemble_records(tokenize(text)).records[0]
    return coerce_record(record, **kwargs)


class TestListFields:
    """Store, Genre and Tags split into lists."""

    def test_trailing_comma_and_whitespace(self):
        assert coerce_value(_spec("Tags"), "action, strategy ,") == ("action", "strategy")

    def test_empty_value_is_empty_list(self):
        assert coerce_value(_spec("Genre"), "") == ()

    def test_absent_tag_is_empty_list(self):
        assert coerce_value(_spec("Genre"), None) == ()

    def test_store_is_space_delimited(self):
        raw = "https://a.example/x  https://b.example/y"
        assert coerce_value(_spec("Store"), raw) == (
            "https://a.example/x",
            "https://b.example/y",
        )

    def test_split_list_drops_empty_items(self):
        assert split_list(",,a,,b,", ",") == ("a", "b")


class TestOptionalScalars:
    """Optional text fields."""

    def test_absent_is_none(self):
        assert coerce_value(_spec("Engine"), None) is None

    def test_empty_is_none(self):
        assert coerce_value(_spec("Engine"), "") is None

    def test_whitespace_is_none(self):
        assert coerce_value(_spec("Engine"), "   ") is None

    def test_value_trimmed(self):
        assert coerce_value(_spec("Engine"), " Unity ") == "Unity"


class TestIntegerFields:
    """Year parsing and range checks."""

    @pytest.mark.parametrize("raw,expected", [("1995", 1995), (" 2011 ", 2011), ("-5", -5)])
    def test_valid_integers(self, raw, expected):
        assert coerce_value(_spec("Year"), raw) == expected

    @pytest.mark.parametrize("raw", ["badyear", "19 95", "1_995", "1995.0", "0x7CB", "١٩٩٥"])
    def test_invalid_integers(self, raw):
        with pytest.raises(CoercionFailure):
            coerce_value(_spec("Year"), raw)

    def test_out_of_range(self):
        with pytest.raises(CoercionFailure):
            coerce_value(_spec("Year"), str(2 ** 63))

    def test_int64_bounds_accepted(self):
        assert coerce_value(_spec("Year"), str(2 ** 63 - 1)) == 2 ** 63 - 1
        assert coerce_value(_spec("Year"), str(-(2 ** 63))) == -(2 ** 63)

    @pytest.mark.parametrize("raw", ["1" * 20, "1" * 5000, "-" + "9" * 5000])
    def test_very_long_digit_strings(self, raw):
        with pytest.raises(CoercionFailure) as excinfo:
            coerce_value(_spec("Year"), raw)
        assert "64-bit" in str(excinfo.value)
        assert len(str(excinfo.value)) < 100

    def test_leading_zeros_do_not_count(self):
        assert coerce_value(_spec("Year"), "0" * 30 + "1995") == 1995

    def test_empty_is_none(self):
        assert coerce_value(_spec("Year"), "") is None


class TestEnumFields:
    """Status must be one of the canonical values."""

    def test_canonical_spelling_accepted(self):
        assert coerce_value(_spec("Status"), "Completable") == "Completable"

    def test_case_sensitive(self):
        with pytest.raises(CoercionFailure):
            coerce_value(_spec("Status"), "completable")

    def test_unknown_value(self):
        with pytest.raises(CoercionFailure) as excinfo:
            coerce_value(_spec("Status"), "Broken")
        assert "Broken" in str(excinfo.value)

    def test_empty_is_none(self):
        assert coerce_value(_spec("Status"), "") is None


class TestCoerceRecord:
    """Whole-record coercion and shadowed fields."""

    def test_fields_in_schema_order(self):
        result = _coerce("Year\t1995\nGame\tFoo\n")
        assert list(result.fields)[:2] == ["Game", "Cover"]
        assert list(result.fields) == list(DEFAULT_SCHEMA.tags)

    def test_typed_values(self):
        result = _coerce("Game\tFoo\nYear\t1995\nTags\ta, b\nCover\n")
        assert result.fields["Game"].value == "Foo"
        assert result.fields["Year"].value == 1995
        assert result.fields["Tags"].value == ("a", "b")
        assert result.fields["Cover"].value is None
        assert result.failed == []
        assert result.diagnostics == []

    def test_coercion_failure_leaves_field_missing(self):
        result = _coerce("Game\tBar\nYear\tbadyear\n")
        assert "Year" not in result.fields
        assert result.failed == ["Year"]
        (diagnostic,) = result.diagnostics
        assert diagnostic.kind is DiagnosticKind.COERCION_FAILURE
        assert diagnostic.tag == "Year"
        assert diagnostic.line_range == (2, 2)

    def test_empty_required_field_is_missing(self):
        result = _coerce("Game\t  \nYear\t1995\n")
        assert "Game" not in result.fields
        assert result.failed == []

    def test_shadowed_field_last_wins(self):
        result = _coerce("Game\tFoo\nYear\t1995\nYear\t1996\n")
        assert result.fields["Year"].value == 1996
        (diagnostic,) = result.diagnostics
        assert diagnostic.kind is DiagnosticKind.SHADOWED_FIELD
        assert diagnostic.line_range == (2, 2)

    def test_shadowed_field_first_wins(self):
        result = _coerce("Game\tFoo\nYear\t1995\nYear\t1996\n", policy=KeepPolicy.FIRST)
        assert result.fields["Year"].value == 1995
        (diagnostic,) = result.diagnostics
        assert diagnostic.line_range == (3, 3)

    def test_three_occurrences_report_two_shadowed(self):
        result = _coerce("Game\tFoo\nTags\ta\nTags\tb\nTags\tc\n")
        assert result.fields["Tags"].value == ("c",)
        assert [d.line_range for d in result.diagnostics] == [(2, 2), (3, 3)]

    def test_shadowed_invalid_value_is_not_a_failure(self):
        result = _coerce("Game\tFoo\nYear\tbad\nYear\t1995\n")
        assert result.failed == []
        assert result.fields["Year"].value == 1995

    def test_record_not_modified(self):
        record = assemble_records(tokenize("Game\tFoo\nYear\t1\nYear\t2\n")).records[0]
        before = list(record.lines)
        coerce_record(record)
        assert record.lines == before
