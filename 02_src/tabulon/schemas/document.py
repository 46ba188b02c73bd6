"""Document data schemas shared by parsers, planner and composer."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

# A record is a flat field-name -> value view of one structured entity.
Record = Dict[str, Any]
Row = List[str]

TABLE = "table"
STRUCTURED = "structured"

INDENT = "  "


class LineKind(str, Enum):
    """Classification of a structured-mode line. Drives colour only."""

    DECLARATION = "declaration"
    OPEN_TAG = "open-tag"
    CLOSE_TAG = "close-tag"
    SELF_CLOSING = "self-closing"
    TEXT = "text"
    KEY = "key"
    STRING_VALUE = "string-value"
    NUMBER_VALUE = "number-value"
    BOOLEAN_VALUE = "boolean-value"
    NULL_VALUE = "null-value"
    PUNCTUATION = "punctuation"


@dataclass(frozen=True)
class DocumentLine:
    """One line of a structured (hierarchical) rendering.

    Attributes:
        depth: Indentation level (>= 0)
        text: Line text without indentation
        kind: Line classification
    """
    depth: int
    text: str
    kind: LineKind = LineKind.TEXT

    def __post_init__(self):
        if self.depth < 0:
            raise ValueError(f"DocumentLine depth must be >= 0, got {self.depth}")

    @property
    def rendered(self) -> str:
        """Line text with its indentation applied."""
        return INDENT * self.depth + self.text


@dataclass
class RecordGroup:
    """Records judged to be repetitions of the same entity.

    Attributes:
        name: Tag name (markup) or property name (JSON) shared by the members
        records: Member records in source order
    """
    name: str
    records: List[Record] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class TableProjection:
    """Row/column view of a record group or CSV body.

    Attributes:
        headers: Unique field names in order of first appearance
        rows: Data rows, each exactly ``len(headers)`` cells long
    """
    headers: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    @property
    def is_empty(self) -> bool:
        return not self.headers


@dataclass
class Representation:
    """Output of the flattening heuristic: what the planner lays out.

    Attributes:
        mode: ``"table"`` or ``"structured"``
        source_format: ``"csv"``, ``"json"`` or ``"xml"``
        table: Projection for table mode
        lines: Document lines for structured mode
    """
    mode: str
    source_format: str
    table: Optional[TableProjection] = None
    lines: List[DocumentLine] = field(default_factory=list)

    @property
    def is_table(self) -> bool:
        return self.mode == TABLE
