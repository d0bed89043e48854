"""Record assembly: grouping classified lines into per-game blocks.

WHY: The database stores one game per contiguous block of field lines.
The coercer and validator work one record at a time, so the flat line
stream has to be cut into blocks first.

HOW: Consecutive non-blank lines accumulate into the current block. A
separator line, or the end of the input, flushes it. A flushed block with
at least one tagged line becomes a RawRecord; a block made only of
malformed lines yields no record and its diagnostics go to the run.

RULES:
- Blank line or end of input → close the current block
- Several blank lines in a row never create empty records
- Tag order inside a record is the source order
- Malformed line inside a block → block diagnostic, the block is not split
- split_on_identifier: an identifier line arriving when the block already
  has one also closes the block (databases without blank separators)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from pobsd_converter.core.ir import ClassifiedLine, LineKind, ParseDiagnostic, RawRecord
from pobsd_converter.core.schema import IDENTIFIER_TAG
from pobsd_converter.core.tokenizer import malformed_line_diagnostic

logger = logging.getLogger(__name__)


@dataclass
class AssemblyResult:
    """Records found in the input plus diagnostics that belong to no record."""

    records: List[RawRecord] = field(default_factory=list)
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)


def assemble_records(
    lines: Iterable[ClassifiedLine],
    identifier_tag: str = IDENTIFIER_TAG,
    split_on_identifier: bool = False,
) -> AssemblyResult:
    """Group classified lines into RawRecord blocks.

    Args:
        lines: Classified lines, in source order (usually from tokenize()).
        identifier_tag: Tag naming the record; used by split_on_identifier.
        split_on_identifier: Also start a new record at a repeated
            identifier line inside one block.

    Returns:
        AssemblyResult with the records in source order and the diagnostics
        of malformed lines that were not part of any record.
    """
    result = AssemblyResult()
    current = RawRecord()
    has_identifier = False

    def _flush_current() -> None:
        """Close the current block, if it holds anything."""
        nonlocal current, has_identifier
        if current.lines:
            result.records.append(current)
        else:
            result.diagnostics.extend(current.diagnostics)
        current = RawRecord()
        has_identifier = False

    for line in lines:
        if line.kind is LineKind.SEPARATOR:
            _flush_current()
            continue

        if line.kind is LineKind.MALFORMED:
            current.diagnostics.append(malformed_line_diagnostic(line))
            continue

        tagged = line.tagged
        if tagged.tag == identifier_tag:
            if split_on_identifier and has_identifier:
                _flush_current()
            has_identifier = True
        current.lines.append(tagged)

    _flush_current()

    logger.debug(
        "Assembled %d record(s), %d stray diagnostic(s)",
        len(result.records),
        len(result.diagnostics),
    )
    return result
