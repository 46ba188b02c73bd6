"""Source parsers: CSV tokenizer and markup/JSON hierarchy extractors."""

from .csv_tokenizer import csv_to_table, tokenize
from .interchange import can_flatten, flatten_to_table, parse_json, pretty_lines
from .markup import (
    extract_lines,
    extract_record_groups,
    format_markup,
    markup_to_table,
    records_to_table,
    select_record_group,
)

__all__ = [
    "tokenize",
    "csv_to_table",
    "parse_json",
    "can_flatten",
    "flatten_to_table",
    "pretty_lines",
    "extract_record_groups",
    "select_record_group",
    "records_to_table",
    "markup_to_table",
    "extract_lines",
    "format_markup",
]
