"""Tests for configuration schemas."""

import logging
from pathlib import Path

import pytest

from tabulon.schemas.config import (
    ConverterConfig,
    PageGeometry,
    RenderOptions,
    load_options_file,
)
from tabulon.schemas.document import DocumentLine


class TestRenderOptions:
    """Test suite for RenderOptions."""

    def test_defaults(self) -> None:
        options = RenderOptions()
        assert (options.page_size, options.orientation, options.font_size, options.layout) == (
            "a4", "portrait", "medium", "auto",
        )
        assert options.show_row_numbers and options.show_metadata
        assert options.sizes.body == 10
        assert options.max_line_chars == 80

    def test_case_normalised(self) -> None:
        options = RenderOptions(page_size="Letter", orientation="LANDSCAPE", layout="Table")
        assert options.page_size == "letter"
        assert options.geometry == PageGeometry(width=279.4, height=215.9)
        assert options.max_line_chars == 120

    @pytest.mark.parametrize("field,value", [
        ("page_size", "a3"),
        ("orientation", "sideways"),
        ("font_size", "huge"),
        ("layout", "grid"),
    ])
    def test_invalid_values(self, field, value) -> None:
        with pytest.raises(ValueError, match=field):
            RenderOptions(**{field: value})

    @pytest.mark.parametrize("field,value", [
        ("page_size", 5),
        ("orientation", None),
        ("layout", ["table"]),
    ])
    def test_non_string_values(self, field, value) -> None:
        """Wrongly typed values from an options file are rejected as ValueError."""
        with pytest.raises(ValueError, match=f"Invalid {field}"):
            RenderOptions(**{field: value})

    @pytest.mark.parametrize("tier,sizes", [
        ("small", (8, 9, 14)),
        ("medium", (10, 11, 16)),
        ("large", (12, 13, 18)),
    ])
    def test_font_tiers(self, tier, sizes) -> None:
        s = RenderOptions(font_size=tier).sizes
        assert (s.body, s.header, s.title) == sizes

    def test_from_mapping(self, caplog) -> None:
        """Decorations may be nested or top-level; unknown keys are ignored."""
        with caplog.at_level(logging.WARNING, logger="tabulon"):
            options = RenderOptions.from_mapping({
                "orientation": "landscape",
                "title": "Report",
                "decorations": {"watermark": "DRAFT", "sparkle": True},
                "colour": "red",
            })

        assert options.orientation == "landscape"
        assert options.decorations.title == "Report"
        assert options.decorations.watermark == "DRAFT"
        assert "colour" in caplog.text
        assert "sparkle" in caplog.text


class TestPageGeometry:
    """Test suite for PageGeometry."""

    def test_portrait_a4(self) -> None:
        assert PageGeometry.from_options("a4", "portrait") == PageGeometry(210.0, 297.0)

    def test_unknown(self) -> None:
        with pytest.raises(ValueError):
            PageGeometry.from_options("tabloid", "portrait")
        with pytest.raises(ValueError):
            PageGeometry.from_options("a4", "diagonal")


class TestLoadOptionsFile:
    """Test suite for load_options_file()."""

    def test_yaml_file(self, tmp_path) -> None:
        path = tmp_path / "render.yaml"
        path.write_text(
            "page_size: letter\n"
            "show_row_numbers: false\n"
            "decorations:\n"
            "  footer_text: Internal\n",
            encoding="utf-8",
        )
        options = load_options_file(path)
        assert options.page_size == "letter"
        assert options.show_row_numbers is False
        assert options.decorations.footer_text == "Internal"

    def test_empty_file(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_options_file(path) == RenderOptions()

    def test_not_a_mapping(self, tmp_path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_options_file(path)


class TestConverterConfig:
    """Test suite for ConverterConfig."""

    def test_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("TABULON_OUTPUT_DIR", "/tmp/pdfs")
        monkeypatch.setenv("TABULON_LOG_LEVEL", "debug")
        config = ConverterConfig()
        assert config.output_dir == Path("/tmp/pdfs")
        assert config.log_level == "DEBUG"

    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("TABULON_OUTPUT_DIR", raising=False)
        monkeypatch.delenv("TABULON_LOG_LEVEL", raising=False)
        config = ConverterConfig()
        assert config.output_dir == Path(".")
        assert config.log_level == "INFO"

    def test_explicit_values_win(self, monkeypatch) -> None:
        monkeypatch.setenv("TABULON_OUTPUT_DIR", "/tmp/pdfs")
        config = ConverterConfig(output_dir="out", log_level="warning")
        assert config.output_dir == Path("out")
        assert config.log_level == "WARNING"


class TestDocumentLine:
    """Test suite for DocumentLine."""

    def test_rendered(self) -> None:
        assert DocumentLine(depth=2, text="x").rendered == "    x"

    def test_negative_depth(self) -> None:
        with pytest.raises(ValueError):
            DocumentLine(depth=-1, text="x")
