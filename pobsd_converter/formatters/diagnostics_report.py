"""Plain-text diagnostics report formatter.

WHY: The converter always produces best-effort JSON, so database
maintainers need a readable list of everything that was skipped,
shadowed or replaced in order to fix the source file.

HOW: One line per diagnostic, ordered by source line, followed by a
summary of the rejected records and a totals line.

RULES:
- Diagnostic line format: "line N: kind: message" (or "lines N-M: ...")
- Rejected records listed by identifier ("<unnamed>" when missing)
- Last line is always the totals line
- A clean run produces only the totals line
- Output suffix: "-diagnostics.txt"
"""

from __future__ import annotations

from typing import List

from pobsd_converter.core.ir import Catalog, LineRange, ParseDiagnostic
from pobsd_converter.formatters.base import BaseFormatter, FormatterOutput


def format_line_range(line_range: LineRange) -> str:
    first, last = line_range
    if first == last:
        return "line {}".format(first)
    return "lines {}-{}".format(first, last)


def format_diagnostic(diagnostic: ParseDiagnostic) -> str:
    return "{}: {}: {}".format(
        format_line_range(diagnostic.line_range),
        diagnostic.kind.value,
        diagnostic.message,
    )


def render_report(catalog: Catalog) -> str:
    """Render the diagnostics and rejected records of a catalog."""
    lines: List[str] = [format_diagnostic(d) for d in catalog.diagnostics]

    if catalog.rejected:
        if lines:
            lines.append("")
        lines.append("Rejected records:")
        for rejected in catalog.rejected:
            lines.append("  {} ({})".format(
                rejected.identifier or "<unnamed>",
                format_line_range(rejected.line_range),
            ))

    if lines:
        lines.append("")
    lines.append("{} entries, {} rejected, {} diagnostics".format(
        len(catalog), len(catalog.rejected), len(catalog.diagnostics)
    ))
    return "\n".join(lines) + "\n"


class DiagnosticsReportFormatter(BaseFormatter):
    """Formatter producing the plain-text diagnostics report."""

    @property
    def name(self) -> str:
        return "Diagnostics report"

    def format(self, catalog: Catalog) -> list[FormatterOutput]:
        return [
            FormatterOutput(
                suffix="-diagnostics.txt",
                content=render_report(catalog),
            )
        ]
