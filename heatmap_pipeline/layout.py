# heatmap_pipeline/layout.py

import re
import textwrap
from typing import Callable, Optional, Sequence

import numpy as np

from heatmap_pipeline.types import Dataset

NULL_PLACEHOLDER = "N/A"
CELL_PADDING = 20
MIN_COLUMN_WIDTH = 60

TextMeasure = Callable[[str, float], float]

# rough advance widths in em units for a sans-serif face
_NARROW = set("ilj.,:;|!'` ")
_WIDE = set("MWmw@%")


def estimate_text_width(text: str, font_size: float) -> float:
    """Approximate rendered width when no real font metrics are available."""
    width = 0.0
    for ch in text:
        if ch in _NARROW:
            width += 0.3
        elif ch in _WIDE:
            width += 0.85
        elif ch.isupper():
            width += 0.68
        else:
            width += 0.55
    return width * font_size


def format_cell(value: Optional[float]) -> str:
    return NULL_PLACEHOLDER if value is None else f"{value:.1f}"


def column_widths(
    headers: Sequence[str],
    columns: Sequence[Sequence[str]],
    measure: TextMeasure,
    font_size: float,
    header_font_size: Optional[float] = None,
    padding: float = CELL_PADDING,
    min_width: float = MIN_COLUMN_WIDTH,
) -> list[float]:
    """Width of each column: widest of header and cell texts, plus padding, floored."""
    if len(headers) != len(columns):
        raise ValueError("Each header needs exactly one column of cell texts.")

    header_size = header_font_size or font_size
    widths = []
    for header, cells in zip(headers, columns):
        widest = measure(header, header_size)
        for text in cells:
            widest = max(widest, measure(text, font_size))
        widths.append(max(widest + padding, min_width))
    return widths


def column_offsets(widths: Sequence[float], start: float = 0.0) -> list[float]:
    """x position of each column's left edge."""
    if not widths:
        return []
    return (start + np.concatenate(([0.0], np.cumsum(widths)[:-1]))).tolist()


def heatmap_column_texts(dataset: Dataset) -> tuple[list[str], list[list[str]]]:
    headers = list(dataset.comparison_names)
    columns = [
        [format_cell(gene.values[j]) for gene in dataset.genes]
        for j in range(len(headers))
    ]
    return headers, columns


def heatmap_column_widths(
    dataset: Dataset,
    font_size: float,
    measure: TextMeasure = estimate_text_width,
    **kwargs,
) -> list[float]:
    headers, columns = heatmap_column_texts(dataset)
    return column_widths(headers, columns, measure, font_size, **kwargs)


def wrap_category_label(label: str, width: int = 16) -> list[str]:
    """Split a category label over several lines, breaking after '/' when needed."""
    if len(label) <= width:
        return [label]
    spaced = re.sub(r"/(?=\S)", "/ ", label)
    lines = textwrap.wrap(spaced, width=width, break_long_words=False) or [label]
    return [line.replace("/ ", "/") for line in lines]
