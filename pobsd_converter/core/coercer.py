"""Field coercion: raw field text to typed values.

WHY: Every database value is text, but the JSON output needs real types:
lists for stores, genres and tags, integers for years, null for empty
optional fields, and a closed vocabulary for the status. Coercion also
detects values that cannot be typed, so the validator can reject them.

HOW: First pick one line per tag (repeated tags shadow each other per
the keep policy). Then walk the schema in declared order and convert
each chosen raw value according to the field's FieldKind.

RULES:
- Repeated tag → keep last (or first) occurrence, report the other(s)
- SCALAR / OPTIONAL_SCALAR: surrounding whitespace trimmed
- OPTIONAL_SCALAR absent or empty → None (empty string is not a value)
- LIST: split on the field delimiter, items trimmed, empty items dropped;
  absent or empty → empty tuple, never None
- INTEGER: base-10 ``[+-]?[0-9]+`` within 64-bit range, empty → None;
  anything else is a coercion failure
- ENUM: exact, case-sensitive match on the field's choices, empty → None;
  anything else is a coercion failure
- A failed field is left out of ``fields`` (missing, never defaulted)
- Required fields that are absent or empty are left out of ``fields``;
  reporting them is the validator's job
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pobsd_converter.config import KeepPolicy
from pobsd_converter.core.ir import (
    DiagnosticKind,
    Field,
    ParseDiagnostic,
    RawRecord,
    TaggedLine,
)
from pobsd_converter.core.schema import DEFAULT_SCHEMA, FieldKind, FieldSchema, FieldSpec

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1
# Significant digits of the widest int64 value; longer text never fits.
_INT64_DIGITS = len(str(_INT64_MAX))


class CoercionFailure(ValueError):
    """Raised by coerce_value when raw text does not fit the field type."""


@dataclass
class CoercionResult:
    """Typed fields of one record plus what went wrong.

    Attributes:
        fields: Tag → Field, in schema order, for every usable field.
        failed: Tags whose raw value could not be coerced.
        diagnostics: Shadowed-field and coercion-failure diagnostics.
    """

    fields: Dict[str, Field] = field(default_factory=dict)
    failed: List[str] = field(default_factory=list)
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)


def _excerpt(text: str, limit: int = 40) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def split_list(raw: str, delimiter: str) -> Tuple[str, ...]:
    """Split a list value, trimming items and dropping empty ones.

    >>> split_list("action, strategy ,", ",")
    ('action', 'strategy')
    """
    return tuple(item.strip() for item in raw.split(delimiter) if item.strip())


def coerce_value(spec: FieldSpec, raw: Optional[str]) -> Any:
    """Convert the raw text of one field into its typed value.

    Args:
        spec: Schema entry of the field.
        raw: Raw value, or None when the tag is absent from the record.

    Returns:
        The typed value (see module RULES). None means "no value".

    Raises:
        CoercionFailure: If the text does not fit an INTEGER or ENUM field.
    """
    if spec.kind is FieldKind.LIST:
        if raw is None:
            return ()
        return split_list(raw, spec.delimiter or ",")

    text = raw.strip() if raw is not None else ""
    if not text:
        return None

    if spec.kind in (FieldKind.SCALAR, FieldKind.OPTIONAL_SCALAR):
        return text

    if spec.kind is FieldKind.INTEGER:
        if not _INTEGER_RE.fullmatch(text):
            raise CoercionFailure("{!r} is not a base-10 integer".format(_excerpt(text)))
        out_of_range = CoercionFailure(
            "{!r} is out of the 64-bit integer range".format(_excerpt(text))
        )
        # int() refuses very long digit strings; they are out of range anyway
        if len(text.lstrip("+-").lstrip("0")) > _INT64_DIGITS:
            raise out_of_range
        number = int(text)
        if not _INT64_MIN <= number <= _INT64_MAX:
            raise out_of_range
        return number

    if spec.kind is FieldKind.ENUM:
        if text not in spec.choices:
            raise CoercionFailure(
                "{!r} is not one of: {}".format(_excerpt(text), ", ".join(spec.choices))
            )
        return text

    raise ValueError("Unsupported field kind: {}".format(spec.kind))


def _select_lines(
    record: RawRecord,
    policy: KeepPolicy,
    diagnostics: List[ParseDiagnostic],
) -> Dict[str, TaggedLine]:
    """Pick one line per tag, reporting every shadowed occurrence."""
    chosen: Dict[str, TaggedLine] = {}
    for line in record.lines:
        previous = chosen.get(line.tag)
        if previous is None:
            chosen[line.tag] = line
            continue
        if policy is KeepPolicy.LAST:
            kept, dropped = line, previous
        else:
            kept, dropped = previous, line
        chosen[line.tag] = kept
        diagnostics.append(ParseDiagnostic(
            line_range=(dropped.line_number, dropped.line_number),
            kind=DiagnosticKind.SHADOWED_FIELD,
            message="{} on line {} is shadowed by line {}".format(
                line.tag, dropped.line_number, kept.line_number
            ),
            tag=line.tag,
        ))
    return chosen


def coerce_record(
    record: RawRecord,
    schema: FieldSchema = DEFAULT_SCHEMA,
    policy: KeepPolicy = KeepPolicy.LAST,
) -> CoercionResult:
    """Coerce every field of a record according to the schema.

    Pure function of (record, schema, policy): the record is not modified.

    Args:
        record: One assembled block.
        schema: Field schema giving each tag's type.
        policy: Which occurrence wins when a tag repeats.

    Returns:
        CoercionResult with typed fields in schema order.
    """
    result = CoercionResult()
    chosen = _select_lines(record, policy, result.diagnostics)

    for spec in schema:
        line = chosen.get(spec.tag)
        raw = line.raw_value if line is not None else None
        try:
            value = coerce_value(spec, raw)
        except CoercionFailure as e:
            result.failed.append(spec.tag)
            result.diagnostics.append(ParseDiagnostic(
                line_range=(line.line_number, line.line_number),
                kind=DiagnosticKind.COERCION_FAILURE,
                message="{}: {}".format(spec.tag, e),
                tag=spec.tag,
            ))
            continue

        if value is None and spec.required:
            continue
        result.fields[spec.tag] = Field(tag=spec.tag, kind=spec.kind, value=value)

    return result
