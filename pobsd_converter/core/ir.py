"""Intermediate representation dataclasses for a parsed games database.

WHY: The database is a flat sequence of text lines with no explicit
structure. The tokenizer, assembler, coercer, validator, catalog builder,
and formatters each need a different view of it. The IR gives every stage
a single, well-typed vocabulary, decoupling parsing from serialization.

HOW: The dataclasses form a hierarchy, from the smallest unit up:
  ClassifiedLine  — one source line with its kind (tagged/separator/malformed)
  TaggedLine      — a tag and its raw value, with the source line number
  RawRecord       — the tagged lines of one contiguous block
  Field           — one coerced value, tagged by name and kind
  Entry           — a validated record, indexed by its identifier
  RejectedRecord  — a record that failed validation, with its reasons
  ParseDiagnostic — one anomaly found in the input
  Catalog         — the ordered, deduplicated entries of one run

RULES:
- Line numbers are 1-based; line ranges are inclusive (first, last)
- Everything except RawRecord is frozen once built
- Diagnostics are collected, never dropped and never raised
- The Catalog never holds two entries with the same identifier
"""

from __future__ import annotations

import enum
from types import MappingProxyType
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from pobsd_converter.core.errors import EntryNotFoundError, StrictModeError
from pobsd_converter.core.schema import FieldKind

LineRange = Tuple[int, int]


class LineKind(enum.Enum):
    """Classification of a single source line."""

    TAGGED = "tagged"
    SEPARATOR = "separator"
    MALFORMED = "malformed"


class DiagnosticKind(enum.Enum):
    """The kinds of anomaly the parser reports."""

    MALFORMED_LINE = "malformed-line"
    SHADOWED_FIELD = "shadowed-field"
    COERCION_FAILURE = "coercion-failure"
    MISSING_REQUIRED_FIELD = "missing-required-field"
    DUPLICATE_IDENTIFIER = "duplicate-identifier"


@dataclass(frozen=True)
class ParseDiagnostic:
    """One anomaly found in the input.

    Attributes:
        line_range: Inclusive (first, last) 1-based source lines concerned.
        kind: What went wrong.
        message: Human-readable description.
        tag: The field concerned, when the anomaly is about one field.
    """

    line_range: LineRange
    kind: DiagnosticKind
    message: str
    tag: Optional[str] = None


@dataclass(frozen=True)
class TaggedLine:
    """A ``<tag><separator><value>`` line, value kept verbatim."""

    tag: str
    raw_value: str
    line_number: int


@dataclass(frozen=True)
class ClassifiedLine:
    """A source line and its classification.

    ``tagged`` is set only for LineKind.TAGGED lines.
    """

    line_number: int
    text: str
    kind: LineKind
    tagged: Optional[TaggedLine] = None


@dataclass
class RawRecord:
    """The tagged lines of one block, in source order.

    Malformed lines met inside the block are kept as diagnostics; they do
    not split the block.
    """

    lines: List[TaggedLine] = field(default_factory=list)
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)

    @property
    def line_range(self) -> LineRange:
        numbers = [line.line_number for line in self.lines]
        numbers.extend(d.line_range[1] for d in self.diagnostics)
        return (min(numbers), max(numbers))

    def first_value(self, tag: str) -> Optional[str]:
        """Raw value of the first line carrying ``tag``, if any."""
        for line in self.lines:
            if line.tag == tag:
                return line.raw_value
        return None


@dataclass(frozen=True)
class Field:
    """A coerced value tagged by field name.

    The Python type of ``value`` depends on ``kind``:
    SCALAR → str, OPTIONAL_SCALAR → str or None, LIST → tuple of str,
    INTEGER → int or None, ENUM → canonical str or None.
    """

    tag: str
    kind: FieldKind
    value: Any


@dataclass(frozen=True)
class Entry:
    """A validated record.

    Attributes:
        identifier: Value of the identifier field (the game name).
        fields: Tag → Field for every tag of the schema (read-only view
            over a private copy).
        line_range: Source lines the record was read from.
        id: 1-based position in the catalog, 0 until the catalog is built.
    """

    identifier: str
    fields: Mapping[str, Field]
    line_range: LineRange
    id: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def __getitem__(self, tag: str) -> Any:
        return self.fields[tag].value

    def get(self, tag: str, default: Any = None) -> Any:
        found = self.fields.get(tag)
        return default if found is None else found.value


@dataclass(frozen=True)
class RejectedRecord:
    """A record that failed validation and was kept out of the catalog."""

    identifier: Optional[str]
    line_range: LineRange
    diagnostics: Tuple[ParseDiagnostic, ...]


@dataclass(frozen=True)
class Catalog:
    """The ordered, deduplicated entries of one parse run.

    WHY: Callers need both the typed entries and everything that went
    wrong while reading them, in one immutable object.

    RULES:
    - entries are in first-appearance order of their identifier
    - identifiers are unique (exact, case-sensitive match)
    - diagnostics hold every anomaly of the run, by first source line
    - rejected holds the records kept out of the catalog
    """

    entries: Tuple[Entry, ...] = ()
    diagnostics: Tuple[ParseDiagnostic, ...] = ()
    rejected: Tuple[RejectedRecord, ...] = ()

    def __post_init__(self) -> None:
        index: Dict[str, Entry] = {entry.identifier: entry for entry in self.entries}
        if len(index) != len(self.entries):
            raise ValueError("Catalog entries must have unique identifiers")
        object.__setattr__(self, "_index", index)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._index  # type: ignore[attr-defined]

    @property
    def is_clean(self) -> bool:
        """True when the run produced no diagnostics at all."""
        return not self.diagnostics

    def find_entry(self, identifier: str) -> Optional[Entry]:
        return self._index.get(identifier)  # type: ignore[attr-defined]

    def get_entry(self, identifier: str) -> Entry:
        """Return the entry named ``identifier``.

        Raises:
            EntryNotFoundError: If no entry has that identifier.
        """
        entry = self.find_entry(identifier)
        if entry is None:
            raise EntryNotFoundError(identifier)
        return entry

    def get_entry_by_id(self, entry_id: int) -> Entry:
        """Return the entry at 1-based catalog position ``entry_id``."""
        if not 1 <= entry_id <= len(self.entries):
            raise EntryNotFoundError("#{}".format(entry_id))
        return self.entries[entry_id - 1]

    def require_clean(self) -> "Catalog":
        """Return self, or raise StrictModeError if any diagnostic exists."""
        if self.diagnostics:
            raise StrictModeError(list(self.diagnostics))
        return self
