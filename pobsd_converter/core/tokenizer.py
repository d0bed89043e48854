"""Line classification for the games database.

WHY: Each database line is either a field (``Tag<TAB>value``), a blank
line that ends a record, or garbage. Every later stage works on these
classified lines instead of raw text, so the grammar lives in one place.

HOW: tokenize() walks the input lazily. A line is split once on the
configured separator; the left side must be a tag known to the schema.
A known tag alone on its line is a field with an empty value.

RULES:
- Tags are matched exactly against the schema (case-sensitive)
- The value is everything after the first separator, verbatim
- Line terminators (\\n, \\r\\n) and a leading byte-order mark are
  stripped, nothing else is
- Empty or whitespace-only lines are separators
- Any other line is malformed; tokenize() never raises on bad input
"""

from __future__ import annotations

from typing import Iterable, Iterator, Union

from pobsd_converter.config import DEFAULT_SEPARATOR
from pobsd_converter.core.ir import (
    ClassifiedLine,
    DiagnosticKind,
    LineKind,
    ParseDiagnostic,
    TaggedLine,
)
from pobsd_converter.core.schema import DEFAULT_SCHEMA, FieldSchema

# Longest excerpt of a malformed line quoted in its diagnostic.
_EXCERPT_LEN = 60

_BOM = "\ufeff"


def iter_source_lines(source: Union[str, Iterable[str]]) -> Iterator[str]:
    """Yield the lines of ``source`` without their terminators.

    ``source`` is either the whole text or any iterable of lines (an open
    file, a list). A trailing newline at the end of the text does not
    produce an extra line. A byte-order mark opening the first line
    (stdin, text decoded as plain UTF-8) is dropped.
    """
    if isinstance(source, str):
        parts = source.split("\n")
        if parts and parts[-1] == "":
            parts.pop()
        source = parts
    for number, line in enumerate(source):
        if number == 0:
            line = line.lstrip(_BOM)
        yield line.rstrip("\r\n")


def classify_line(
    text: str,
    line_number: int,
    separator: str = DEFAULT_SEPARATOR,
    schema: FieldSchema = DEFAULT_SCHEMA,
) -> ClassifiedLine:
    """Classify one line (already stripped of its terminator)."""
    if not text.strip():
        return ClassifiedLine(line_number, text, LineKind.SEPARATOR)

    if separator in text:
        tag, value = text.split(separator, 1)
    else:
        # "Engine" alone: a known tag with an empty value
        tag, value = text.rstrip(), ""

    if tag in schema:
        return ClassifiedLine(
            line_number,
            text,
            LineKind.TAGGED,
            tagged=TaggedLine(tag=tag, raw_value=value, line_number=line_number),
        )
    return ClassifiedLine(line_number, text, LineKind.MALFORMED)


def tokenize(
    source: Union[str, Iterable[str]],
    separator: str = DEFAULT_SEPARATOR,
    schema: FieldSchema = DEFAULT_SCHEMA,
) -> Iterator[ClassifiedLine]:
    """Lazily classify every line of ``source``.

    Args:
        source: Database text, or an iterable of lines.
        separator: Tag/value delimiter, fixed for the whole run.
        schema: Field schema providing the known tags.

    Yields:
        One ClassifiedLine per source line, numbered from 1.
    """
    if not separator:
        raise ValueError("Field separator must not be empty")
    for number, text in enumerate(iter_source_lines(source), start=1):
        yield classify_line(text, number, separator, schema)


def malformed_line_diagnostic(line: ClassifiedLine) -> ParseDiagnostic:
    """Build the MALFORMED_LINE diagnostic for a malformed line."""
    excerpt = line.text.strip()
    if len(excerpt) > _EXCERPT_LEN:
        excerpt = excerpt[:_EXCERPT_LEN] + "..."
    return ParseDiagnostic(
        line_range=(line.line_number, line.line_number),
        kind=DiagnosticKind.MALFORMED_LINE,
        message="Unrecognized line: {!r}".format(excerpt),
    )
