"""Unit tests for the formatter modules.

WHY: The JSON document is what consumers load; a missing key, a wrong
type or a changed key order breaks them. The diagnostics report is what
maintainers read to fix the database.

HOW: Tests parse small databases and check the serialized JSON (types,
null handling, key order, idempotence, schema validity) and the report
text.

RULES:
- Schema validation uses formatters/catalog_schema.json.
"""

import dataclasses
import json

import jsonschema
import pytest

from pobsd_converter.core import parse_database
from pobsd_converter.core.schema import GAME_SCHEMA, GameStatus
from pobsd_converter.formatters import FORMATTERS
from pobsd_converter.formatters.diagnostics_report import (
    DiagnosticsReportFormatter,
    format_line_range,
    render_report,
)
from pobsd_converter.formatters.json_catalog import (
    JsonCatalogFormatter,
    entry_to_dict,
    get_json_schema,
    serialize_catalog,
    serialize_entry,
)

EXPECTED_KEYS = [
    "id", "name", "cover", "engine", "setup", "runtime", "store", "hints",
    "genres", "tags", "year", "dev", "pub", "version", "status",
]


class TestSerializeCatalog:
    """Whole-catalog JSON document."""

    def test_empty_catalog_is_empty_array(self):
        assert serialize_catalog(parse_database("")) == "[]"

    def test_key_order_follows_schema(self):
        catalog = parse_database("Status\tPlayable\nYear\t1995\nGame\tFoo\n")
        (document,) = json.loads(serialize_catalog(catalog))
        assert list(document) == EXPECTED_KEYS

    def test_native_json_types(self):
        catalog = parse_database(
            "Game\tFoo\nYear\t1995\nTags\taction, strategy ,\nGenre\nStatus\tPlayable\n"
        )
        (document,) = json.loads(serialize_catalog(catalog))
        assert document["id"] == 1
        assert document["name"] == "Foo"
        assert document["year"] == 1995
        assert document["tags"] == ["action", "strategy"]
        assert document["genres"] == []
        assert document["store"] == []
        assert document["status"] == "Playable"

    def test_absent_optionals_are_null_not_omitted(self):
        (document,) = json.loads(serialize_catalog(parse_database("Game\tFoo\n")))
        for key in ("cover", "engine", "setup", "runtime", "hints", "dev",
                    "pub", "version", "year", "status"):
            assert key in document
            assert document[key] is None

    def test_idempotent(self, sample_db_text):
        catalog = parse_database(sample_db_text)
        assert serialize_catalog(catalog) == serialize_catalog(catalog)

    def test_values_round_trip(self, sample_db_text):
        catalog = parse_database(sample_db_text)
        documents = json.loads(serialize_catalog(catalog))
        shuggy = documents[1]
        assert shuggy["name"] == "The Adventures of Shuggy"
        assert shuggy["dev"] == "Smudged Cat Games"
        assert shuggy["tags"] == ["single player", "local co-op"]
        assert shuggy["version"] == "1.0"

    def test_non_ascii_kept(self):
        output = serialize_catalog(parse_database("Game\tÉtoile Über\n"))
        assert "Étoile Über" in output

    def test_compact_output(self):
        output = serialize_catalog(parse_database("Game\tFoo\n"), indent=None)
        assert "\n" not in output

    def test_output_matches_schema(self, sample_db_text):
        documents = json.loads(serialize_catalog(parse_database(sample_db_text)))
        jsonschema.validate(instance=documents, schema=get_json_schema())


class TestSerializeEntry:
    """Single-entry JSON object."""

    def test_single_object(self, sample_db_text):
        entry = parse_database(sample_db_text).get_entry("Airborne Kingdom")
        document = json.loads(serialize_entry(entry))
        assert isinstance(document, dict)
        assert document["id"] == 3
        assert document["engine"] == "Unity"
        assert document["genres"] == ["Strategy", "City Builder"]

    def test_entry_dict_matches_catalog_item(self, sample_db_text):
        catalog = parse_database(sample_db_text)
        documents = json.loads(serialize_catalog(catalog))
        assert [entry_to_dict(entry) for entry in catalog] == documents

    def test_unbuilt_entry_fails_schema(self, sample_db_text):
        entry = dataclasses.replace(parse_database(sample_db_text).get_entry_by_id(1), id=0)
        with pytest.raises(jsonschema.ValidationError):
            serialize_entry(entry)


class TestJsonSchemaFile:
    """The packaged JSON schema matches the field table."""

    def test_properties_cover_field_schema(self):
        entry_schema = get_json_schema()["definitions"]["entry"]
        assert list(entry_schema["properties"]) == EXPECTED_KEYS
        assert [spec.json_key for spec in GAME_SCHEMA] == EXPECTED_KEYS[1:]

    def test_status_values_match_enum(self):
        status = get_json_schema()["definitions"]["entry"]["properties"]["status"]
        assert status["enum"] == [s.value for s in GameStatus] + [None]


class TestFormatterRegistry:
    """FORMATTERS registry and formatter outputs."""

    def test_registered(self):
        assert FORMATTERS["json"] is JsonCatalogFormatter
        assert FORMATTERS["diagnostics"] is DiagnosticsReportFormatter

    def test_json_formatter_output(self):
        (output,) = JsonCatalogFormatter().format(parse_database(""))
        assert output.content == "[]"
        assert output.suffix == ".json"
        assert JsonCatalogFormatter().name == "Catalog JSON"


class TestDiagnosticsReport:
    """Plain-text diagnostics report."""

    def test_clean_run_is_totals_only(self, sample_db_text):
        report = render_report(parse_database(sample_db_text))
        assert report == "3 entries, 0 rejected, 0 diagnostics\n"

    def test_lists_diagnostics_and_rejected(self, scenario_a):
        report = render_report(parse_database(scenario_a))
        lines = report.splitlines()
        assert lines[0].startswith("line 5: coercion-failure: Year:")
        assert "Rejected records:" in lines
        assert "  Bar (lines 4-5)" in lines
        assert lines[-1] == "1 entries, 1 rejected, 1 diagnostics"

    def test_unnamed_rejected_record(self):
        report = render_report(parse_database("Year\t1995\n"))
        assert "  <unnamed> (line 1)" in report.splitlines()

    def test_format_line_range(self):
        assert format_line_range((3, 3)) == "line 3"
        assert format_line_range((3, 7)) == "lines 3-7"

    def test_formatter_output(self, scenario_a):
        (output,) = DiagnosticsReportFormatter().format(parse_database(scenario_a))
        assert output.suffix == "-diagnostics.txt"
