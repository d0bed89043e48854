"""Configuration constants, parser options, and .env loading.

WHY: Centralizes the format constants of the games database (field
separator, list delimiters) and the command-line defaults, so they are
easy to find, update, and override. They are plain data, not buried in
parsing logic.

HOW: python-dotenv loads the .env file on import. Format constants are
module-level strings and dicts. ParseOptions bundles the per-run parser
knobs handed to the core pipeline. CLI defaults are read from the
environment with a fallback.

RULES:
- The separator is fixed per run (tab or pipe) and never autodetected
- Only the CLI reads the POBSD_* environment variables; the core receives
  everything it needs through ParseOptions
- KeepPolicy.LAST is the default for both shadowed fields and duplicate
  identifiers
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Database format constants
# ---------------------------------------------------------------------------

SEPARATORS: dict[str, str] = {
    "tab": "\t",
    "pipe": "|",
}
"""Named field separators. The database format uses a tab."""

DEFAULT_SEPARATOR = SEPARATORS["tab"]

LIST_DELIMITER = ","
"""Sub-delimiter for Genre and Tags values."""

STORE_DELIMITER = " "
"""Store URLs are space separated in the database."""


class KeepPolicy(enum.Enum):
    """Which occurrence survives when a tag or identifier repeats."""

    LAST = "last"
    FIRST = "first"


@dataclass(frozen=True)
class ParseOptions:
    """Per-run parser options.

    Attributes:
        separator: Delimiter between a tag and its value.
        field_policy: Which occurrence of a repeated tag inside one record
            is kept. The other is reported as a shadowed field.
        identifier_policy: Which entry is kept when two records share an
            identifier. The other is reported as a duplicate.
        split_on_identifier: Also start a new record at an identifier line
            when the current block already holds one (databases without
            blank lines between records).
    """

    separator: str = DEFAULT_SEPARATOR
    field_policy: KeepPolicy = KeepPolicy.LAST
    identifier_policy: KeepPolicy = KeepPolicy.LAST
    split_on_identifier: bool = False


# ---------------------------------------------------------------------------
# Command-line defaults
# ---------------------------------------------------------------------------

DEFAULT_SEPARATOR_NAME = os.getenv("POBSD_SEPARATOR", "tab").strip().lower()
DEFAULT_STRICT = os.getenv("POBSD_STRICT", "false").lower() == "true"
DEFAULT_JSON_INDENT = int(os.getenv("POBSD_JSON_INDENT", "2"))
DEFAULT_LOG_LEVEL = os.getenv("POBSD_LOG_LEVEL", "WARNING").upper()

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 130


def resolve_separator(name: str) -> str:
    """Map a separator name ("tab", "pipe") to its character.

    RULES:
    - Names are case-insensitive
    - Raises ValueError for an unknown name, listing the valid ones
    """
    key = name.strip().lower()
    if key not in SEPARATORS:
        raise ValueError(
            "Unknown separator '{}'. Available separators: {}".format(
                name, ", ".join(sorted(SEPARATORS))
            )
        )
    return SEPARATORS[key]
