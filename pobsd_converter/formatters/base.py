"""Abstract base formatter and output container.

WHY: Every output consumes the same Catalog but produces different
content (the JSON document, the diagnostics report). This base class
enforces a consistent interface so the CLI can drive any formatter
generically.

HOW: BaseFormatter is an ABC with two requirements: a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list, usually of one item
- ``suffix`` starts with a hyphen or a dot, e.g. ``".json"``
- Formatters are pure: no file or stream I/O, the caller writes
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from pobsd_converter.core.ir import Catalog


@dataclass
class FormatterOutput:
    """One output document produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``".json"`` → ``"games.json"``.
        content: The document text.
    """

    suffix: str
    content: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Catalog JSON'."""

    @abstractmethod
    def format(self, catalog: Catalog) -> list[FormatterOutput]:
        """Render the Catalog into one or more output documents.

        Args:
            catalog: The parsed catalog, with its diagnostics.

        Returns:
            List of FormatterOutput objects.
        """
