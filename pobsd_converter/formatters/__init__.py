"""Output formatter registry.

WHY: The CLI needs a single lookup to find the right formatter by name.
A central dict makes it trivial to add new outputs: create the formatter
class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["json"]()``.

RULES:
- Keys are short lowercase names looked up by the CLI
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pobsd_converter.formatters.diagnostics_report import DiagnosticsReportFormatter
from pobsd_converter.formatters.json_catalog import JsonCatalogFormatter

if TYPE_CHECKING:
    from pobsd_converter.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "json": JsonCatalogFormatter,
    "diagnostics": DiagnosticsReportFormatter,
}
