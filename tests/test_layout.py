"""Tests for column width and label layout metrics."""

import pytest

from heatmap_pipeline.layout import (
    MIN_COLUMN_WIDTH,
    column_offsets,
    column_widths,
    estimate_text_width,
    format_cell,
    heatmap_column_texts,
    heatmap_column_widths,
    wrap_category_label,
)
from heatmap_pipeline.types import Dataset, GeneRecord


def char_measure(text: str, font_size: float) -> float:
    return len(text) * font_size


class TestColumnWidths:
    """Tests for column_widths."""

    def test_widest_cell_plus_padding(self):
        """Should use the widest text plus padding."""
        widths = column_widths(["abc"], [["1.0", "-10.5"]], char_measure, font_size=10)
        assert widths == [70]

    def test_header_can_win(self):
        """Should use the header when it is widest."""
        widths = column_widths(["Ctrl vs KD"], [["1.0"]], char_measure, font_size=10)
        assert widths == [120]

    def test_header_font_size(self):
        """Should measure headers at their own font size."""
        widths = column_widths(["abcd"], [["1.0"]], char_measure, font_size=10, header_font_size=20)
        assert widths == [100]

    def test_minimum_width(self):
        """Should never go below the minimum column width."""
        assert column_widths(["a"], [["1"]], char_measure, font_size=10) == [MIN_COLUMN_WIDTH]

    def test_custom_padding_and_minimum(self):
        """Should honor padding and minimum overrides."""
        widths = column_widths(["ab"], [[]], char_measure, font_size=10, padding=5, min_width=0)
        assert widths == [25]

    def test_mismatched_columns(self):
        """Should reject headers without matching columns."""
        with pytest.raises(ValueError):
            column_widths(["a", "b"], [["1"]], char_measure, font_size=10)


class TestColumnOffsets:
    """Tests for column_offsets."""

    def test_prefix_sums(self):
        """Should place each column after the previous ones."""
        assert column_offsets([70, 60, 80]) == [0, 70, 130]

    def test_start(self):
        """Should shift every offset by the start position."""
        assert column_offsets([10, 20], start=5) == [5, 15]

    def test_empty(self):
        """Should return no offsets for no columns."""
        assert column_offsets([]) == []


class TestTextHelpers:
    """Tests for cell formatting, width estimation and label wrapping."""

    def test_format_cell(self):
        """Should format numbers to one decimal and missing values as N/A."""
        assert format_cell(1.234) == "1.2"
        assert format_cell(-2.0) == "-2.0"
        assert format_cell(None) == "N/A"

    def test_estimate_scales_with_font(self):
        """Should grow with text length and font size."""
        assert estimate_text_width("Abca1", 12) == pytest.approx(2 * estimate_text_width("Abca1", 6))
        assert estimate_text_width("Abca1x", 10) > estimate_text_width("Abca1", 10)
        assert estimate_text_width("", 10) == 0

    @pytest.mark.parametrize("label, lines", [
        ("Lipid", ["Lipid"]),
        ("Triglyceride Metabolism", ["Triglyceride", "Metabolism"]),
        ("Carbohydrate Metabolism", ["Carbohydrate", "Metabolism"]),
        ("RNA Processing/Neurodegeneration", ["RNA Processing/", "Neurodegeneration"]),
    ])
    def test_wrap_category_label(self, label, lines):
        """Should break long category labels at spaces and slashes."""
        assert wrap_category_label(label) == lines


class TestDatasetWidths:
    """Width helpers applied to a dataset."""

    @pytest.fixture
    def dataset(self) -> Dataset:
        genes = (
            GeneRecord("A", "X", (1.25, None), (0.01, 0.2)),
            GeneRecord("B", "X", (-12.5, 0.3), (0.5, 0.04)),
        )
        return Dataset(genes=genes, comparison_names=("KD", "A much longer comparison"), category_segments=())

    def test_column_texts(self, dataset):
        """Should format one column of cell texts per comparison."""
        headers, columns = heatmap_column_texts(dataset)
        assert headers == ["KD", "A much longer comparison"]
        assert columns[0] == [format_cell(1.25), "-12.5"]
        assert columns[1] == ["N/A", "0.3"]

    def test_recomputed_for_font_size(self, dataset):
        """Should widen columns when the font grows."""
        small = heatmap_column_widths(dataset, 10, measure=char_measure)
        large = heatmap_column_widths(dataset, 20, measure=char_measure)
        assert small == [5 * 10 + 20, 24 * 10 + 20]
        assert large[1] > small[1]
