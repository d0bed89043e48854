"""Catalog JSON serializer.

WHY: The JSON document is the only write path of the converter. Its
consumers (web front-ends, search tools) need a stable shape: every key
always present, in a fixed order, with native JSON types.

HOW: entry_to_dict() walks the schema in declared order and maps each
Field to a JSON value. serialize_catalog() / serialize_entry() dump the
result with json.dumps and validate it against catalog_schema.json with
jsonschema before returning.

RULES:
- Top-level document: array of entries (catalog) or one object (entry)
- Keys: "id" first, then the schema's json keys in declared order
- Scalar → string, absent optional → null (never omitted)
- List → array of strings (possibly empty), Integer → number,
  Enum → canonical spelling
- Output is deterministic: the same Catalog always gives the same text
- An empty catalog serializes to ``[]``
- Schema validation is mandatory; raises on invalid output
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema

from pobsd_converter.config import DEFAULT_JSON_INDENT
from pobsd_converter.core.ir import Catalog, Entry
from pobsd_converter.core.schema import DEFAULT_SCHEMA, FieldKind, FieldSchema
from pobsd_converter.formatters.base import BaseFormatter, FormatterOutput

SCHEMA_PATH = Path(__file__).resolve().parent / "catalog_schema.json"


def _load_schema() -> Dict[str, Any]:
    """Load the catalog JSON schema from disk.

    Cached at module level after first call to avoid repeated I/O.
    """
    with open(SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


_CACHED_SCHEMA: Optional[Dict[str, Any]] = None


def get_json_schema() -> Dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        _CACHED_SCHEMA = _load_schema()
    return _CACHED_SCHEMA


def _entry_schema() -> Dict[str, Any]:
    """Schema for a single entry object, sharing the catalog definitions."""
    schema = get_json_schema()
    return {
        "$schema": schema["$schema"],
        "definitions": schema["definitions"],
        "$ref": "#/definitions/entry",
    }


def entry_to_dict(entry: Entry, schema: FieldSchema = DEFAULT_SCHEMA) -> Dict[str, Any]:
    """Convert an Entry to its JSON object, keys in schema order."""
    result: Dict[str, Any] = {"id": entry.id}
    for spec in schema:
        found = entry.fields.get(spec.tag)
        value = found.value if found is not None else None
        if spec.kind is FieldKind.LIST:
            value = list(value or ())
        result[spec.json_key] = value
    return result


def _dumps(document: Any, indent: Optional[int]) -> str:
    return json.dumps(document, indent=indent, ensure_ascii=False)


def serialize_catalog(
    catalog: Catalog,
    indent: Optional[int] = DEFAULT_JSON_INDENT,
    schema: FieldSchema = DEFAULT_SCHEMA,
) -> str:
    """Render the whole catalog as a JSON array.

    Raises:
        jsonschema.ValidationError: If the document does not conform to
            catalog_schema.json (a custom ``schema`` that diverges from
            the packaged one).
    """
    document = [entry_to_dict(entry, schema) for entry in catalog]
    jsonschema.validate(instance=document, schema=get_json_schema())
    return _dumps(document, indent)


def serialize_entry(
    entry: Entry,
    indent: Optional[int] = DEFAULT_JSON_INDENT,
    schema: FieldSchema = DEFAULT_SCHEMA,
) -> str:
    """Render a single entry as a JSON object."""
    document = entry_to_dict(entry, schema)
    jsonschema.validate(instance=document, schema=_entry_schema())
    return _dumps(document, indent)


class JsonCatalogFormatter(BaseFormatter):
    """Formatter producing the catalog JSON document."""

    def __init__(self, indent: Optional[int] = DEFAULT_JSON_INDENT) -> None:
        self.indent = indent

    @property
    def name(self) -> str:
        return "Catalog JSON"

    def format(self, catalog: Catalog) -> list[FormatterOutput]:
        return [
            FormatterOutput(
                suffix=".json",
                content=serialize_catalog(catalog, indent=self.indent),
            )
        ]
