"""Delimited-text tokenizer.

One physical line is one record: quoted cells may contain commas but not
newlines, and doubled quotes (``""``) are not unescaped. Every quote character
toggles quoting and is dropped from the cell.
"""

import logging
from typing import List

from ..schemas.document import Row, TableProjection

logger = logging.getLogger(__name__)

DELIMITER = ","
QUOTE = '"'


def _tokenize_line(line: str) -> Row:
    cells: Row = []
    current: List[str] = []
    in_quotes = False

    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == DELIMITER and not in_quotes:
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    cells.append("".join(current).strip())
    return cells


def tokenize(text: str) -> List[Row]:
    """Split CSV text into rows of trimmed cells.

    Args:
        text: Raw CSV content

    Returns:
        Rows in source order; empty list when the text has no content.
        Row widths are preserved as found in the source.
    """
    if not text.strip():
        return []

    return [_tokenize_line(line.rstrip("\r")) for line in text.strip().split("\n")]


def csv_to_table(rows: List[Row]) -> TableProjection:
    """Project tokenized rows onto a table, first row as header.

    Ragged rows are normalised without losing data: short rows are padded
    with empty cells, and unnamed header columns are added when a data row
    is wider than the header row.
    """
    if not rows:
        return TableProjection()

    headers = list(rows[0])
    body = rows[1:]

    width = max([len(headers)] + [len(row) for row in body])
    if width > len(headers):
        logger.warning(
            f"CSV data rows are wider than the header ({width} > {len(headers)} cells), "
            f"adding {width - len(headers)} unnamed column(s)"
        )
        headers.extend([""] * (width - len(headers)))

    short = sum(1 for row in body if len(row) < width)
    if short:
        logger.warning(f"Padding {short} short CSV row(s) to {width} cells")

    normalized = [row + [""] * (width - len(row)) for row in body]
    return TableProjection(headers=headers, rows=normalized)
