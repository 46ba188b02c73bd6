"""JSON extractor: table flattening and pretty-printed lines."""

import json
import logging
import re
from typing import Any, List, Optional, Tuple

from ..schemas.document import DocumentLine, LineKind, Record, TableProjection

logger = logging.getLogger(__name__)

INDENT_WIDTH = 2

_KEY_LINE_RE = re.compile(r'^"(?:[^"\\]|\\.)*"\s*:\s*(.*)$')
_NUMBER_RE = re.compile(r"^-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?$")

# Approximate patterns for text that failed to parse
_RAW_NUMBER_RE = re.compile(r":\s*\d")
_RAW_BOOLEAN_RE = re.compile(r":\s*(true|false)")


def parse_json(text: str) -> Tuple[bool, Any]:
    """Parse JSON text.

    Returns:
        (True, tree) on success, (False, None) when the text is malformed
    """
    try:
        return True, json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        logger.warning(f"Malformed JSON input: {e}")
        return False, None


def _is_record_array(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0 and isinstance(value[0], dict)


def can_flatten(tree: Any) -> bool:
    """Whether the tree holds an array of objects usable as table rows."""
    if _is_record_array(tree):
        return True
    if isinstance(tree, dict):
        return any(_is_record_array(value) for value in tree.values())
    return False


def _candidate_records(tree: Any) -> List[Record]:
    if isinstance(tree, list):
        return [item for item in tree if isinstance(item, dict)]
    if isinstance(tree, dict):
        for value in tree.values():
            if _is_record_array(value):
                return [item for item in value if isinstance(item, dict)]
    return []


def display_value(value: Any) -> str:
    """Cell text for one JSON value."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(value)


def flatten_to_table(tree: Any) -> TableProjection:
    """Flatten the first array of objects in the tree to a table.

    Headers are the union of object keys in order of first appearance;
    non-object array elements are skipped.
    """
    records = _candidate_records(tree)
    if not records:
        return TableProjection()

    headers: List[str] = []
    seen = set()
    for record in records:
        for key in record:
            if key not in seen:
                seen.add(key)
                headers.append(key)

    rows = [[display_value(record.get(header)) for header in headers] for record in records]
    return TableProjection(headers=headers, rows=rows)


def _value_kind(value: str) -> LineKind:
    value = value.rstrip(",").strip()
    if value in ("{", "[", "{}", "[]"):
        return LineKind.KEY
    if value.startswith('"'):
        return LineKind.STRING_VALUE
    if value in ("true", "false"):
        return LineKind.BOOLEAN_VALUE
    if value == "null":
        return LineKind.NULL_VALUE
    if _NUMBER_RE.match(value):
        return LineKind.NUMBER_VALUE
    return LineKind.PUNCTUATION


def _classify_canonical(text: str) -> LineKind:
    match = _KEY_LINE_RE.match(text)
    if match:
        return _value_kind(match.group(1))
    kind = _value_kind(text)
    return LineKind.PUNCTUATION if kind is LineKind.KEY else kind


def _classify_raw(line: str) -> LineKind:
    if '":' in line:
        return LineKind.KEY
    if '"' in line and ":" not in line:
        return LineKind.STRING_VALUE
    if _RAW_NUMBER_RE.search(line):
        return LineKind.NUMBER_VALUE
    if _RAW_BOOLEAN_RE.search(line):
        return LineKind.BOOLEAN_VALUE
    return LineKind.TEXT


def raw_lines(text: str) -> List[DocumentLine]:
    """Emit unparseable text verbatim, one line per source line."""
    return [
        DocumentLine(depth=0, text=line.rstrip("\r"), kind=_classify_raw(line))
        for line in text.split("\n")
    ]


def pretty_lines(raw_text: str, tree: Optional[Any] = None) -> List[DocumentLine]:
    """Canonically indented, classified lines for a JSON document.

    Falls back to :func:`raw_lines` when the text does not parse. Never raises.

    Args:
        raw_text: Original JSON text
        tree: Already-parsed tree, to skip a second parse
    """
    if tree is None:
        ok, tree = parse_json(raw_text)
        if not ok:
            return raw_lines(raw_text)

    formatted = json.dumps(tree, indent=INDENT_WIDTH, ensure_ascii=False)
    lines = []
    for line in formatted.split("\n"):
        stripped = line.lstrip(" ")
        depth = (len(line) - len(stripped)) // INDENT_WIDTH
        lines.append(DocumentLine(depth=depth, text=stripped, kind=_classify_canonical(stripped)))
    return lines
