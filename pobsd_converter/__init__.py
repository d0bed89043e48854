"""PlayOnBSD games database converter.

WHY: The PlayOnBSD games database is a hand-edited, line-oriented text
file (``Tag<TAB>value`` lines, one block per game). Web front-ends and
search tools need it as typed, validated JSON, and maintainers need to
know exactly what in the file is broken.

HOW: Single-pass pipeline: tokenize lines, assemble per-game records,
coerce field text into typed values, validate, build a deduplicated
catalog, then serialize to JSON. Each stage is independently testable.

RULES:
- Parse anomalies are collected as diagnostics, never raised
- The Catalog IR is the stable contract between parsing and formatting
- Adding a new output format = one new formatter module, no core changes
"""

__version__ = "0.1.0"
