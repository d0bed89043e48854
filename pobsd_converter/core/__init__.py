"""Core parsing modules and intermediate representation.

WHY: The core package is the heart of the converter: the field schema,
the IR dataclasses, and the five parsing stages. Formatters and the CLI
consume what it produces and never reach into the raw text themselves.

HOW: schema.py declares the fields, ir.py the data structures,
tokenizer.py / assembler.py / coercer.py / validator.py / catalog.py the
stages, and pipeline.py chains them into parse_database().

RULES:
- No filesystem or network access; functions never read the environment
- Anomalies are returned as diagnostics; only errors.py exceptions raise
"""

from pobsd_converter.core.errors import CatalogError, EntryNotFoundError, StrictModeError
from pobsd_converter.core.ir import Catalog, DiagnosticKind, Entry, ParseDiagnostic
from pobsd_converter.core.pipeline import parse_database

__all__ = [
    "Catalog",
    "CatalogError",
    "DiagnosticKind",
    "Entry",
    "EntryNotFoundError",
    "ParseDiagnostic",
    "StrictModeError",
    "parse_database",
]
