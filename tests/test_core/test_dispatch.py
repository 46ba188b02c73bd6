"""Tests for format dispatch."""

import logging

import pytest

from tabulon.core.dispatch import choose_representation
from tabulon.schemas.document import STRUCTURED, TABLE


class TestChooseRepresentation:
    """Test suite for choose_representation()."""

    def test_csv_always_table(self, sample_csv: str) -> None:
        for layout in ("auto", "table", "structured"):
            rep = choose_representation(sample_csv, "csv", layout)
            assert rep.mode == TABLE
            assert rep.table.headers == ["Name", "Age"]

    def test_json_auto_table(self, sample_json: str) -> None:
        rep = choose_representation(sample_json, "json")
        assert rep.mode == TABLE
        assert rep.source_format == "json"
        assert rep.table.rows == [["1", ""], ["2", "x"]]

    def test_json_forced_structured(self, sample_json: str) -> None:
        rep = choose_representation(sample_json, "json", "structured")
        assert rep.mode == STRUCTURED
        assert rep.lines[0].text == "{"

    def test_json_auto_without_records(self) -> None:
        rep = choose_representation("[1, 2, 3]", "json")
        assert rep.mode == STRUCTURED
        assert [line.text for line in rep.lines] == ["[", "1,", "2,", "3", "]"]

    def test_json_forced_table_falls_back(self, caplog) -> None:
        """Forcing a table on JSON with no array of objects renders structured."""
        with caplog.at_level(logging.WARNING, logger="tabulon"):
            rep = choose_representation('{"a": 1}', "json", "table")
        assert rep.mode == STRUCTURED
        assert "falling back" in caplog.text

    def test_malformed_json_is_structured(self) -> None:
        """Malformed JSON is rendered verbatim, whatever the layout."""
        for layout in ("auto", "table"):
            rep = choose_representation("{oops", "json", layout)
            assert rep.mode == STRUCTURED
            assert [line.text for line in rep.lines] == ["{oops"]

    def test_json_scalar_document(self) -> None:
        rep = choose_representation("null", "json")
        assert rep.mode == STRUCTURED
        assert [line.text for line in rep.lines] == ["null"]

    def test_xml_auto_table(self, sample_xml: str) -> None:
        rep = choose_representation(sample_xml, "xml")
        assert rep.mode == TABLE
        assert rep.table.row_count == 2

    def test_xml_forced_structured(self, sample_xml: str) -> None:
        rep = choose_representation(sample_xml, "xml", "structured")
        assert rep.mode == STRUCTURED
        assert rep.lines[0].text == '<?xml version="1.0"?>'

    def test_xml_without_repeats(self) -> None:
        for layout in ("auto", "table"):
            rep = choose_representation("<a><b>1</b></a>", "xml", layout)
            assert rep.mode == STRUCTURED

    def test_format_case_insensitive(self, sample_csv: str) -> None:
        assert choose_representation(sample_csv, "CSV").source_format == "csv"

    def test_unknown_format(self) -> None:
        with pytest.raises(ValueError, match="Unsupported source format"):
            choose_representation("x", "yaml")
