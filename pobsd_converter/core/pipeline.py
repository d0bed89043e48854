"""Single-pass parse pipeline: database text to Catalog.

WHY: Callers (the CLI, tests, other tools) want one call that turns
database text into a typed catalog and a complete list of what went
wrong, without wiring the five stages themselves.

HOW: tokenize → assemble_records → per record coerce_record and
validate_record → CatalogBuilder. Everything runs top to bottom with no
I/O; the caller supplies the text or an iterable of lines.

RULES:
- Never raises on bad input; anomalies become diagnostics
- Empty input → empty catalog, not an error
- strict=True → StrictModeError if any diagnostic was produced
- Each call owns its own builder; nothing is shared between runs
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from pobsd_converter.config import ParseOptions
from pobsd_converter.core.assembler import assemble_records
from pobsd_converter.core.catalog import CatalogBuilder
from pobsd_converter.core.coercer import coerce_record
from pobsd_converter.core.ir import Catalog
from pobsd_converter.core.schema import DEFAULT_SCHEMA, FieldSchema
from pobsd_converter.core.tokenizer import tokenize
from pobsd_converter.core.validator import validate_record

logger = logging.getLogger(__name__)


def parse_database(
    source: Union[str, Iterable[str]],
    options: Optional[ParseOptions] = None,
    schema: FieldSchema = DEFAULT_SCHEMA,
    strict: bool = False,
) -> Catalog:
    """Parse a games database into a Catalog.

    Args:
        source: The database text, or any iterable of its lines (an open
            text file works).
        options: Separator, keep policies and record boundary mode.
        schema: Field schema to parse against.
        strict: Raise instead of returning when diagnostics exist.

    Returns:
        The immutable Catalog of the run, with its diagnostics.

    Raises:
        StrictModeError: In strict mode, if any diagnostic was produced.
    """
    options = options or ParseOptions()

    lines = tokenize(source, separator=options.separator, schema=schema)
    assembled = assemble_records(
        lines,
        identifier_tag=schema.identifier_tag,
        split_on_identifier=options.split_on_identifier,
    )

    builder = CatalogBuilder(policy=options.identifier_policy)
    builder.add_diagnostics(assembled.diagnostics)
    for record in assembled.records:
        coerced = coerce_record(record, schema=schema, policy=options.field_policy)
        builder.add(validate_record(record, coerced, schema=schema))

    catalog = builder.build()
    if catalog.diagnostics:
        logger.warning("Parsed with %d diagnostic(s)", len(catalog.diagnostics))
    if strict:
        catalog.require_clean()
    return catalog
