"""Record validation: deciding whether a coerced record becomes an Entry.

WHY: A record can only enter the catalog if it carries every required
field with a usable value and nothing failed to coerce. The catalog is
indexed by the identifier, so a record without one cannot be kept at all.

HOW: validate_record() checks the coercion result against the schema's
required tags and its failed tags, then returns either Valid(entry) or
Invalid(rejected_record). It never raises.

RULES:
- Every required tag must be present in the coerced fields
- Any coercion failure makes the record Invalid
- Missing identifier → always Invalid
- One MISSING_REQUIRED_FIELD diagnostic per missing required tag, a
  required tag that failed coercion counts as missing too
- Invalid records carry all of their diagnostics (coercion ones included)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple, Union

from pobsd_converter.core.coercer import CoercionResult
from pobsd_converter.core.ir import (
    DiagnosticKind,
    Entry,
    ParseDiagnostic,
    RawRecord,
    RejectedRecord,
)
from pobsd_converter.core.schema import DEFAULT_SCHEMA, FieldSchema


@dataclass(frozen=True)
class Valid:
    """The record passed validation.

    ``warnings`` holds non-fatal diagnostics (shadowed fields, malformed
    lines inside the block) that still belong in the run's report.
    """

    entry: Entry
    warnings: Tuple[ParseDiagnostic, ...] = ()


@dataclass(frozen=True)
class Invalid:
    """The record failed validation and stays out of the catalog."""

    rejected: RejectedRecord


ValidationOutcome = Union[Valid, Invalid]


def validate_record(
    record: RawRecord,
    coerced: CoercionResult,
    schema: FieldSchema = DEFAULT_SCHEMA,
) -> ValidationOutcome:
    """Validate one coerced record.

    Args:
        record: The raw block (for line numbers and block diagnostics).
        coerced: Result of coerce_record() on that block.
        schema: Field schema with the required tags.

    Returns:
        Valid with the new Entry, or Invalid with the rejected record.
    """
    line_range = record.line_range
    diagnostics: List[ParseDiagnostic] = list(record.diagnostics)
    diagnostics.extend(coerced.diagnostics)

    missing = [tag for tag in schema.required_tags if tag not in coerced.fields]
    for tag in missing:
        diagnostics.append(ParseDiagnostic(
            line_range=line_range,
            kind=DiagnosticKind.MISSING_REQUIRED_FIELD,
            message="Required field {} is missing or empty".format(tag),
            tag=tag,
        ))

    identifier_field = coerced.fields.get(schema.identifier_tag)
    if missing or coerced.failed or identifier_field is None:
        if identifier_field is not None:
            identifier = identifier_field.value
        else:
            raw = record.first_value(schema.identifier_tag)
            identifier = raw.strip() if raw and raw.strip() else None
        return Invalid(RejectedRecord(
            identifier=identifier,
            line_range=line_range,
            diagnostics=tuple(diagnostics),
        ))

    entry = Entry(
        identifier=identifier_field.value,
        fields=coerced.fields,
        line_range=line_range,
    )
    return Valid(entry=entry, warnings=tuple(diagnostics))
