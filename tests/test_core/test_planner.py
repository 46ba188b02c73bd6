"""Tests for the layout planner."""

import pytest

from tabulon.core.planner import (
    BOTTOM_MARGIN,
    ROW_NUMBER_WIDTH,
    LayoutPlanner,
    compute_column_widths,
    plan_masthead,
    truncate,
    wrap_text,
)
from tabulon.core.surface import MemorySurface
from tabulon.schemas.config import RenderOptions
from tabulon.schemas.document import (
    STRUCTURED,
    TABLE,
    DocumentLine,
    Representation,
    TableProjection,
)


def _planner(**kwargs) -> LayoutPlanner:
    return LayoutPlanner(RenderOptions(**kwargs), MemorySurface().text_width)


def _table(rows, headers=("a", "b")) -> Representation:
    return Representation(
        mode=TABLE,
        source_format="csv",
        table=TableProjection(headers=list(headers), rows=[list(r) for r in rows]),
    )


def _lines(count: int) -> Representation:
    return Representation(
        mode=STRUCTURED,
        source_format="json",
        lines=[DocumentLine(depth=0, text=f"line {i}") for i in range(count)],
    )


class TestHelpers:
    """Test suite for wrap_text(), truncate() and compute_column_widths()."""

    def test_wrap_words(self) -> None:
        assert wrap_text("hello world foo", 10, len) == ["hello", "world foo"]

    def test_wrap_breaks_long_word(self) -> None:
        assert wrap_text("abcdefghijklmnop", 5, len) == ["abcde", "fghij", "klmno", "p"]

    def test_wrap_keeps_newlines(self) -> None:
        assert wrap_text("a\nb", 10, len) == ["a", "b"]

    def test_wrap_empty(self) -> None:
        assert wrap_text("", 10, len) == [""]

    def test_truncate(self) -> None:
        assert truncate("abc", 3) == "abc"
        assert truncate("abcdef", 3) == "abc..."

    def test_widths_scale_up(self) -> None:
        """Columns that fit grow proportionally to fill the width."""
        assert compute_column_widths([10, 20], 60) == [20, 40]

    def test_widths_fixed_column(self) -> None:
        assert compute_column_widths([12, 10, 10], 52, {0: 12}) == [12, 20, 20]

    def test_widths_narrow_columns_keep_natural(self) -> None:
        """When space is short, narrow columns stay and wide ones share."""
        assert compute_column_widths([5, 100, 100], 105) == [5, 50, 50]

    def test_widths_sum_to_available(self) -> None:
        widths = compute_column_widths([3, 40, 7, 90, 1], 120)
        assert sum(widths) == pytest.approx(120)


class TestMasthead:
    """Test suite for plan_masthead()."""

    def test_table_with_metadata(self) -> None:
        masthead = plan_masthead(RenderOptions(), TABLE, has_logo=False)
        assert masthead.logo_y is None
        assert masthead.title_y == 20
        assert masthead.metadata_y == (28, 34)
        assert masthead.content_top == 42

    def test_logo_pushes_content_down(self) -> None:
        masthead = plan_masthead(RenderOptions(), TABLE, has_logo=True)
        assert masthead.logo_y == 20
        assert masthead.title_y == 40
        assert masthead.content_top == 62

    @pytest.mark.parametrize("mode,show_metadata,top", [
        (STRUCTURED, True, 44),
        (STRUCTURED, False, 32),
        (TABLE, False, 28),
    ])
    def test_content_top(self, mode, show_metadata, top) -> None:
        masthead = plan_masthead(RenderOptions(show_metadata=show_metadata), mode, has_logo=False)
        assert masthead.content_top == top


class TestTablePlanning:
    """Test suite for table-mode planning."""

    def test_single_page(self) -> None:
        plan = _planner().plan(_table([["1", "2"], ["3", "4"]]))
        assert plan.page_count == 1
        page = plan.pages[0]
        assert page.rows[0].is_header
        assert page.rows[0].cells == [["#"], ["a"], ["b"]]
        assert [row.cells[0] for row in page.body_rows] == [["1"], ["2"]]

    def test_row_number_column(self) -> None:
        plan = _planner().plan(_table([["x", "y"]]))
        assert plan.columns[0] == ROW_NUMBER_WIDTH
        assert sum(plan.columns) == pytest.approx(210 - 2 * 14)

    def test_without_row_numbers(self) -> None:
        plan = _planner(show_row_numbers=False).plan(_table([["x", "y"]]))
        assert len(plan.columns) == 2
        assert plan.pages[0].rows[0].cells == [["a"], ["b"]]

    def test_every_row_placed_once_in_order(self) -> None:
        rows = [[str(i), "value"] for i in range(300)]
        plan = _planner().plan(_table(rows))
        assert plan.page_count > 1

        placed = [row.index for page in plan.pages for row in page.body_rows]
        assert placed == list(range(300))

    def test_header_repeats_and_rows_fit(self) -> None:
        plan = _planner().plan(_table([[str(i), "v"] for i in range(300)]))
        limit = plan.geometry.height - BOTTOM_MARGIN
        for page in plan.pages:
            assert page.rows[0].is_header
            assert page.rows[0].y == page.top
            for row in page.rows:
                assert row.y + row.height <= limit + 1e-9

    def test_rows_never_overlap(self) -> None:
        plan = _planner().plan(_table([["word " * 30, "x"] for _ in range(40)]))
        for page in plan.pages:
            for above, below in zip(page.rows, page.rows[1:]):
                assert below.y == pytest.approx(above.y + above.height)

    def test_wrapped_cell_grows_row(self) -> None:
        plan = _planner().plan(_table([["short", "word " * 60]]))
        body = plan.pages[0].body_rows[0]
        assert len(body.cells[2]) > 1
        assert body.height == pytest.approx(len(body.cells[2]) * 5 + 3)

    def test_oversized_row_placed_alone(self) -> None:
        """A row taller than a page gets a page of its own."""
        plan = _planner().plan(_table([["a", "b"], ["word " * 5000, "c"], ["d", "e"]]))
        assert [[row.index for row in page.body_rows] for page in plan.pages] == [[0], [1], [2]]

    def test_first_row_moved_without_dangling_header(self) -> None:
        """A header is never left on a page without a body row under it."""
        tall = "\n".join(["x"] * 45)
        plan = _planner().plan(_table([[tall]], headers=["a"]))
        assert plan.page_count == 2
        assert plan.pages[0].rows == []
        assert plan.pages[1].rows[0].is_header
        assert plan.pages[1].body_rows[0].index == 0

    def test_empty_table(self) -> None:
        plan = _planner().plan(_table([], headers=()))
        assert plan.page_count == 1
        assert plan.pages[0].rows == []

    def test_header_only_table(self) -> None:
        plan = _planner().plan(_table([]))
        assert plan.page_count == 1
        assert plan.pages[0].rows[0].is_header
        assert plan.pages[0].body_rows == []


class TestStructuredPlanning:
    """Test suite for structured-mode planning."""

    def test_page_breaks(self) -> None:
        plan = _planner(show_metadata=False).plan(_lines(200))
        assert [len(page.lines) for page in plan.pages] == [50, 52, 52, 46]
        assert [page.continued for page in plan.pages] == [False, True, True, True]

    def test_line_numbers_continue(self) -> None:
        plan = _planner().plan(_lines(120))
        numbers = [line.number for page in plan.pages for line in page.lines]
        assert numbers == list(range(1, 121))

    def test_continuation_starts_at_top_margin(self) -> None:
        plan = _planner().plan(_lines(120))
        assert plan.pages[1].lines[0].y == 20

    def test_truncation_portrait(self) -> None:
        rep = Representation(
            mode=STRUCTURED,
            source_format="xml",
            lines=[DocumentLine(depth=1, text="x" * 200)],
        )
        text = _planner().plan(rep).pages[0].lines[0].text
        assert text == "  " + "x" * 78 + "..."

    def test_truncation_landscape(self) -> None:
        rep = Representation(
            mode=STRUCTURED,
            source_format="xml",
            lines=[DocumentLine(depth=0, text="y" * 200)],
        )
        text = _planner(orientation="landscape").plan(rep).pages[0].lines[0].text
        assert len(text) == 123

    def test_empty_document(self) -> None:
        plan = _planner().plan(_lines(0))
        assert plan.page_count == 1
        assert plan.pages[0].lines == []
