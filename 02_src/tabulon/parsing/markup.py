"""Heuristic markup (XML-like) extractor.

This is a regex-level reader for shallow data-exchange documents, not an XML
parser. It does not handle namespaces, CDATA sections, comments containing
markup, attribute values containing ``>``, tags spanning several lines, or an
element nested inside another element of the same name. Well-formedness is
never validated. When pretty-printing, only lines opening a tag increase the
indentation; loose text and ``<!...>`` lines never do.
"""

import logging
import re
from typing import Dict, List, Optional

from ..schemas.document import DocumentLine, LineKind, Record, RecordGroup, TableProjection

logger = logging.getLogger(__name__)

ATTRIBUTE_PREFIX = "@"

_NAME = r"[A-Za-z_][\w.\-]*"
_OPEN_TAG_RE = re.compile(rf"<({_NAME})((?:\s[^<>]*?)?)(/?)>")
_ANY_TAG_RE = re.compile(rf"<(/?)({_NAME})((?:\s[^<>]*?)?)(/?)>")
_ATTRIBUTE_RE = re.compile(rf"({_NAME})\s*=\s*(?:\"([^\"]*)\"|'([^']*)')")
_TAG_BOUNDARY_RE = re.compile(r">\s*<")


def _parse_attributes(raw: str) -> Record:
    fields: Record = {}
    for match in _ATTRIBUTE_RE.finditer(raw):
        value = match.group(2) if match.group(2) is not None else match.group(3)
        fields[f"{ATTRIBUTE_PREFIX}{match.group(1)}"] = value
    return fields


def _text_children(content: str) -> Record:
    """Collect direct child elements whose content is text only."""
    fields: Record = {}
    depth = 0
    pending = None  # (name, content start) of an open direct child

    for match in _ANY_TAG_RE.finditer(content):
        closing, name, _, self_closing = match.groups()

        if self_closing:
            pending = None
            continue

        if not closing:
            pending = (name, match.end()) if depth == 0 else None
            depth += 1
            continue

        depth = max(0, depth - 1)
        if depth == 0 and pending is not None and pending[0] == name:
            fields[name] = content[pending[1]:match.start()].strip()
        pending = None

    return fields


def _element_spans(text: str) -> Dict[str, List[Record]]:
    """Find element spans at every depth, bucketed by tag name.

    Each opening tag is matched with the first following closing tag of
    the same name. Buckets keep the order of first appearance.
    """
    buckets: Dict[str, List[Record]] = {}
    closers: Dict[str, "re.Pattern[str]"] = {}

    for match in _OPEN_TAG_RE.finditer(text):
        name, attributes, self_closing = match.groups()
        if self_closing:
            continue

        closer = closers.setdefault(name, re.compile(rf"</{re.escape(name)}\s*>"))
        end = closer.search(text, match.end())
        if end is None:
            continue

        record = _parse_attributes(attributes)
        record.update(_text_children(text[match.end():end.start()]))
        buckets.setdefault(name, []).append(record)

    return buckets


def extract_record_groups(text: str) -> List[RecordGroup]:
    """Extract candidate record groups from markup text.

    Attributes become ``@name`` fields, direct text-only child elements
    become fields keyed by tag name. Spans contributing no fields are dropped.

    Args:
        text: Markup source

    Returns:
        One group per tag name with at least one record, in order of
        first appearance in the source
    """
    groups = []
    for name, spans in _element_spans(text).items():
        records = [record for record in spans if record]
        if records:
            groups.append(RecordGroup(name=name, records=records))
    logger.debug(f"Markup record groups: {[(g.name, len(g)) for g in groups]}")
    return groups


def select_record_group(groups: List[RecordGroup]) -> Optional[RecordGroup]:
    """Pick the group with the strictly largest member count above one.

    Ties go to the group seen first.
    """
    selected: Optional[RecordGroup] = None
    for group in groups:
        if len(group) > 1 and (selected is None or len(group) > len(selected)):
            selected = group
    return selected


def records_to_table(records: List[Record]) -> TableProjection:
    """Project records onto a table; missing fields become empty cells."""
    headers: List[str] = []
    seen = set()
    for record in records:
        for key in record:
            if key not in seen:
                seen.add(key)
                headers.append(key)

    rows = [[str(record.get(header, "") or "") for header in headers] for record in records]
    return TableProjection(headers=headers, rows=rows)


def markup_to_table(text: str) -> TableProjection:
    """Table projection of the implied row entity, empty when nothing repeats."""
    group = select_record_group(extract_record_groups(text))
    if group is None:
        logger.info("No repeating element found in markup")
        return TableProjection()

    logger.info(f"Selected <{group.name}> as row element ({len(group)} records)")
    return records_to_table(group.records)


def _classify(line: str) -> LineKind:
    if line.startswith("<?") or line.startswith("<!"):
        return LineKind.DECLARATION
    if line.startswith("</"):
        return LineKind.CLOSE_TAG
    if line.startswith("<") and line.endswith("/>"):
        return LineKind.SELF_CLOSING
    if line.startswith("<"):
        return LineKind.OPEN_TAG
    return LineKind.TEXT


def extract_lines(text: str) -> List[DocumentLine]:
    """Pretty-print markup into indented, classified lines.

    A line break is inserted at every tag boundary. A closing-tag line
    decrements depth before it is emitted; a line that opens an element
    (and does not close it on the same line) increments depth after.
    """
    lines: List[DocumentLine] = []
    depth = 0

    for raw in _TAG_BOUNDARY_RE.sub(">\n<", text).split("\n"):
        line = raw.strip()
        if not line:
            continue

        kind = _classify(line)
        if kind is LineKind.CLOSE_TAG:
            depth = max(0, depth - 1)

        lines.append(DocumentLine(depth=depth, text=line, kind=kind))

        if kind is LineKind.OPEN_TAG and "</" not in line:
            depth += 1

    return lines


def format_markup(text: str) -> str:
    """Return the markup re-indented with two spaces per level."""
    return "\n".join(line.rendered for line in extract_lines(text))
