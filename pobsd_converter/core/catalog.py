"""Catalog construction from validation outcomes.

WHY: Validated entries have to be collected into one ordered collection
that is unique by game name, while every rejected record and every
anomaly is kept for the report. The PlayOnBSD database is hand-edited,
so the same game can appear twice.

HOW: CatalogBuilder is fed outcomes in source order. Valid entries go
into an insertion-ordered dict keyed by identifier; Invalid ones go to the
rejected list. build() freezes everything into a Catalog and numbers the
entries 1..n.

RULES:
- Insertion order is the first appearance of each identifier
- Repeated identifier, KeepPolicy.LAST → the later entry replaces the
  earlier one in its slot; KeepPolicy.FIRST → the later one is dropped
- Exactly one DUPLICATE_IDENTIFIER diagnostic per collision
- Identifiers are compared exactly (case-sensitive)
- Diagnostics are ordered by first source line (stable)
- The builder is single use: add() after build() raises RuntimeError
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Dict, Iterable, List

from pobsd_converter.config import KeepPolicy
from pobsd_converter.core.ir import (
    Catalog,
    DiagnosticKind,
    Entry,
    ParseDiagnostic,
    RejectedRecord,
)
from pobsd_converter.core.validator import Invalid, Valid, ValidationOutcome

logger = logging.getLogger(__name__)


class CatalogBuilder:
    """Append-only accumulator producing an immutable Catalog."""

    def __init__(self, policy: KeepPolicy = KeepPolicy.LAST) -> None:
        self.policy = policy
        self._entries: Dict[str, Entry] = {}
        self._diagnostics: List[ParseDiagnostic] = []
        self._rejected: List[RejectedRecord] = []
        self._built = False

    def _check_open(self) -> None:
        if self._built:
            raise RuntimeError("CatalogBuilder.build() was already called")

    def add_diagnostics(self, diagnostics: Iterable[ParseDiagnostic]) -> None:
        """Record diagnostics that belong to no record (stray lines)."""
        self._check_open()
        self._diagnostics.extend(diagnostics)

    def add(self, outcome: ValidationOutcome) -> None:
        """Feed one validation outcome, in source order."""
        self._check_open()
        if isinstance(outcome, Invalid):
            rejected = outcome.rejected
            self._rejected.append(rejected)
            self._diagnostics.extend(rejected.diagnostics)
            logger.info(
                "Rejected record %r (lines %d-%d)",
                rejected.identifier, rejected.line_range[0], rejected.line_range[1],
            )
            return

        if not isinstance(outcome, Valid):
            raise TypeError("Expected Valid or Invalid, got {!r}".format(outcome))

        self._diagnostics.extend(outcome.warnings)
        self.add_entry(outcome.entry)

    def add_entry(self, entry: Entry) -> None:
        """Insert a validated entry, resolving identifier collisions."""
        self._check_open()
        previous = self._entries.get(entry.identifier)
        if previous is None:
            self._entries[entry.identifier] = entry
            return

        if self.policy is KeepPolicy.LAST:
            self._entries[entry.identifier] = entry
            kept, dropped = entry, previous
        else:
            kept, dropped = previous, entry

        self._diagnostics.append(ParseDiagnostic(
            line_range=entry.line_range,
            kind=DiagnosticKind.DUPLICATE_IDENTIFIER,
            message="Duplicate {!r}: entry at line {} kept, entry at line {} dropped".format(
                entry.identifier, kept.line_range[0], dropped.line_range[0]
            ),
        ))
        logger.info("Duplicate identifier %r at line %d", entry.identifier, entry.line_range[0])

    def build(self) -> Catalog:
        """Freeze the accumulated state into a Catalog."""
        self._check_open()
        self._built = True
        entries = tuple(
            dataclasses.replace(entry, id=position)
            for position, entry in enumerate(self._entries.values(), start=1)
        )
        logger.info(
            "Built catalog: %d entries, %d rejected, %d diagnostics",
            len(entries), len(self._rejected), len(self._diagnostics),
        )
        return Catalog(
            entries=entries,
            diagnostics=tuple(sorted(self._diagnostics, key=lambda d: d.line_range[0])),
            rejected=tuple(self._rejected),
        )
