"""Format dispatch: choose between table and structured representations."""

import logging

from ..parsing.csv_tokenizer import csv_to_table, tokenize
from ..parsing.interchange import can_flatten, flatten_to_table, parse_json, pretty_lines, raw_lines
from ..parsing.markup import extract_lines, markup_to_table
from ..schemas.document import STRUCTURED, TABLE, Representation

logger = logging.getLogger(__name__)

SOURCE_FORMATS = ("csv", "json", "xml")


def _from_csv(content: str) -> Representation:
    table = csv_to_table(tokenize(content))
    return Representation(mode=TABLE, source_format="csv", table=table)


def _from_json(content: str, layout_mode: str) -> Representation:
    ok, tree = parse_json(content)
    if not ok:
        logger.info("JSON did not parse, rendering raw text in structured mode")
        return Representation(mode=STRUCTURED, source_format="json", lines=raw_lines(content))

    use_table = layout_mode == TABLE or (layout_mode == "auto" and can_flatten(tree))
    if use_table:
        table = flatten_to_table(tree)
        if not table.is_empty:
            return Representation(mode=TABLE, source_format="json", table=table)
        logger.warning("No array of objects found in JSON, falling back to structured mode")

    return Representation(
        mode=STRUCTURED,
        source_format="json",
        lines=pretty_lines(content, tree) if tree is not None else pretty_lines(content),
    )


def _from_xml(content: str, layout_mode: str) -> Representation:
    if layout_mode != STRUCTURED:
        table = markup_to_table(content)
        if not table.is_empty:
            return Representation(mode=TABLE, source_format="xml", table=table)
        if layout_mode == TABLE:
            logger.warning("No repeating element found in XML, falling back to structured mode")

    return Representation(mode=STRUCTURED, source_format="xml", lines=extract_lines(content))


def choose_representation(content: str, source_format: str, layout_mode: str = "auto") -> Representation:
    """Normalise source text into the representation best suited to it.

    CSV is always tabular. JSON and XML become tables when the layout mode
    asks for one (or is "auto") and a repeating record structure exists;
    otherwise they are rendered as indented lines. Malformed JSON always
    yields a structured rendering of the raw text.

    Args:
        content: Raw file text
        source_format: "csv", "json" or "xml"
        layout_mode: "auto", "table" or "structured"

    Returns:
        Representation with either a table or document lines

    Raises:
        ValueError: If source_format is not supported
    """
    source_format = source_format.lower()
    if source_format == "csv":
        representation = _from_csv(content)
    elif source_format == "json":
        representation = _from_json(content, layout_mode)
    elif source_format == "xml":
        representation = _from_xml(content, layout_mode)
    else:
        raise ValueError(f"Unsupported source format '{source_format}' (expected one of {SOURCE_FORMATS})")

    if representation.is_table:
        logger.info(
            f"{source_format.upper()} -> table "
            f"({representation.table.row_count} rows, {representation.table.column_count} columns)"
        )
    else:
        logger.info(f"{source_format.upper()} -> structured ({len(representation.lines)} lines)")
    return representation
