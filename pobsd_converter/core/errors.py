"""Exceptions raised by the core when the caller asks for a hard failure.

WHY: Parse anomalies are collected as diagnostics, never raised. Only two
caller requests can fail outright: looking up an identifier that is not in
the catalog, and asking for a catalog with no diagnostics at all (strict
mode). Callers need typed exceptions to tell those apart from I/O errors.

RULES:
- CatalogError is the common base; the CLI catches it as a whole
- EntryNotFoundError is also a KeyError (it is a failed lookup)
- StrictModeError is also a ValueError and carries every diagnostic
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from pobsd_converter.core.ir import ParseDiagnostic


class CatalogError(Exception):
    """Base class for caller-requested catalog failures."""


class EntryNotFoundError(CatalogError, KeyError):
    """Raised when a requested identifier is not in the catalog."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(identifier)

    def __str__(self) -> str:
        return "No entry named '{}' in the catalog".format(self.identifier)


class StrictModeError(CatalogError, ValueError):
    """Raised in strict mode when the run produced any diagnostic.

    HOW: Built by Catalog.require_clean() with the full diagnostics list,
    so the caller can still report everything that went wrong.
    """

    def __init__(self, diagnostics: List[ParseDiagnostic]) -> None:
        self.diagnostics = diagnostics
        super().__init__(
            "Strict mode: {} diagnostic(s) produced".format(len(diagnostics))
        )
