"""Static field schema of the games database.

WHY: Every stage of the pipeline needs to know which tags exist, how
their text is typed, and which ones a record cannot live without. Keeping
that knowledge in one declarative table makes adding or removing a field
a one-line change.

HOW: FieldSpec is a frozen dataclass describing one tag. GAME_SCHEMA is
the ordered tuple of specs; its order is the order fields are emitted in
JSON. FieldSchema wraps the tuple with tag lookups.

RULES:
- Tags are matched case-sensitively ("Game", never "game")
- Exactly one field is the identifier; it is required and a Scalar
- JSON keys follow the table order, not the order found in the source text
- Status values are matched case-sensitively against GameStatus
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple

from pobsd_converter.config import LIST_DELIMITER, STORE_DELIMITER


class FieldKind(enum.Enum):
    """The value type a tag is coerced into."""

    SCALAR = "scalar"
    OPTIONAL_SCALAR = "optional_scalar"
    LIST = "list"
    INTEGER = "integer"
    ENUM = "enum"


class GameStatus(enum.Enum):
    """Closed set of values accepted in the Status field.

    The value is the canonical spelling used both in the database and in
    the JSON output.
    """

    COMPLETABLE = "Completable"
    PLAYABLE = "Playable"
    LAUNCHES = "Launches"
    DOES_NOT_LAUNCH = "Doesn't launch"
    UNTESTED = "Untested"


@dataclass(frozen=True)
class FieldSpec:
    """Description of one recognized tag.

    Attributes:
        tag: Field name as written at the start of a database line.
        json_key: Key used for this field in the JSON output.
        kind: Value type the raw text is coerced into.
        required: A record without a usable value for this tag is invalid.
        delimiter: Sub-delimiter for LIST fields, None otherwise.
        choices: Canonical spellings accepted by ENUM fields.
    """

    tag: str
    json_key: str
    kind: FieldKind
    required: bool = False
    delimiter: Optional[str] = None
    choices: Tuple[str, ...] = field(default_factory=tuple)


IDENTIFIER_TAG = "Game"

GAME_SCHEMA: Tuple[FieldSpec, ...] = (
    FieldSpec("Game", "name", FieldKind.SCALAR, required=True),
    FieldSpec("Cover", "cover", FieldKind.OPTIONAL_SCALAR),
    FieldSpec("Engine", "engine", FieldKind.OPTIONAL_SCALAR),
    FieldSpec("Setup", "setup", FieldKind.OPTIONAL_SCALAR),
    FieldSpec("Runtime", "runtime", FieldKind.OPTIONAL_SCALAR),
    FieldSpec("Store", "store", FieldKind.LIST, delimiter=STORE_DELIMITER),
    FieldSpec("Hints", "hints", FieldKind.OPTIONAL_SCALAR),
    FieldSpec("Genre", "genres", FieldKind.LIST, delimiter=LIST_DELIMITER),
    FieldSpec("Tags", "tags", FieldKind.LIST, delimiter=LIST_DELIMITER),
    FieldSpec("Year", "year", FieldKind.INTEGER),
    FieldSpec("Dev", "dev", FieldKind.OPTIONAL_SCALAR),
    FieldSpec("Pub", "pub", FieldKind.OPTIONAL_SCALAR),
    FieldSpec("Version", "version", FieldKind.OPTIONAL_SCALAR),
    FieldSpec(
        "Status",
        "status",
        FieldKind.ENUM,
        choices=tuple(s.value for s in GameStatus),
    ),
)


class FieldSchema:
    """Ordered, indexed view over a tuple of FieldSpec entries."""

    def __init__(self, specs: Tuple[FieldSpec, ...], identifier_tag: str) -> None:
        self._specs = specs
        self._by_tag = {spec.tag: spec for spec in specs}
        if len(self._by_tag) != len(specs):
            raise ValueError("Duplicate tag in field schema")
        identifier = self._by_tag.get(identifier_tag)
        if identifier is None or identifier.kind is not FieldKind.SCALAR or not identifier.required:
            raise ValueError(
                "Identifier tag '{}' must be a required scalar field".format(identifier_tag)
            )
        self.identifier_tag = identifier_tag

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, tag: object) -> bool:
        return tag in self._by_tag

    def get(self, tag: str) -> Optional[FieldSpec]:
        return self._by_tag.get(tag)

    @property
    def tags(self) -> Tuple[str, ...]:
        return tuple(spec.tag for spec in self._specs)

    @property
    def required_tags(self) -> Tuple[str, ...]:
        return tuple(spec.tag for spec in self._specs if spec.required)


DEFAULT_SCHEMA = FieldSchema(GAME_SCHEMA, IDENTIFIER_TAG)
