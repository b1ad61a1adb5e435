# heatmap_pipeline/colors.py
"""Scalar-to-color mapping for fold-change cells.

Three modes are supported:

* ``linear``   -- intensity ``min(|v| / 3, 1)`` on a red (up) or blue (down) ramp
* ``log``      -- the same ramp after compressing ``v`` to ``sign(v) * log2(|v| + 1)``
* ``quantile`` -- seven rank bins over the dataset's values on a diverging scheme

Missing values always map to ``NEUTRAL_COLOR``.
"""

import math
from typing import Callable, Iterable, Optional

import numpy as np
from plotly.colors import diverging, sample_colorscale, sequential

NEUTRAL_COLOR = "#cccccc"
LINEAR_RANGE = 3.0
QUANTILE_BINS = 7
COLOR_MODES = ("linear", "log", "quantile")

UP_SCALE = sequential.Reds
DOWN_SCALE = sequential.Blues
DIVERGING_SCALE = diverging.RdBu[::-1]  # blue (low) -> red (high)

ColorMapper = Callable[[Optional[float]], str]


def _to_hex(rgb: tuple[float, float, float]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*(int(round(c * 255)) for c in rgb))


def _sample(scale: list[str], points: list[float]) -> list[str]:
    return [_to_hex(c) for c in sample_colorscale(scale, points, colortype="tuple")]


DIVERGING_COLORS = tuple(_sample(DIVERGING_SCALE, [i / (QUANTILE_BINS - 1) for i in range(QUANTILE_BINS)]))


def _finite(values: Iterable[Optional[float]]) -> list[float]:
    return [float(v) for v in values if v is not None and math.isfinite(v)]


def log_compress(value: float) -> float:
    return math.copysign(math.log2(abs(value) + 1), value)


def ramp_color(value: float) -> str:
    """Red ramp for positive values, blue ramp for negative ones."""
    intensity = min(abs(value) / LINEAR_RANGE, 1.0)
    scale = UP_SCALE if value > 0 else DOWN_SCALE
    return _sample(scale, [intensity])[0]


def quantile_thresholds(all_values: Iterable[Optional[float]], bins: int = QUANTILE_BINS) -> list[float]:
    """Inner breakpoints splitting the non-missing values into ``bins`` rank groups."""
    values = _finite(all_values)
    if not values:
        return []
    probs = np.arange(1, bins) / bins
    return np.quantile(np.asarray(values), probs).tolist()


def quantile_bin(value: float, thresholds: list[float]) -> int:
    return int(np.searchsorted(thresholds, value, side="right"))


def make_color_mapper(all_values: Iterable[Optional[float]], mode: str = "linear") -> ColorMapper:
    """Build the per-cell mapper for one dataset and mode.

    Quantile breakpoints are computed once here, so build a new mapper
    whenever the dataset or mode changes.
    """
    if mode not in COLOR_MODES:
        raise ValueError(f"Unknown color mode '{mode}'. Choose one of: {', '.join(COLOR_MODES)}")

    if mode == "quantile":
        thresholds = quantile_thresholds(all_values)

        def mapper(value: Optional[float]) -> str:
            if value is None or not math.isfinite(value) or not thresholds:
                return NEUTRAL_COLOR
            return DIVERGING_COLORS[quantile_bin(value, thresholds)]

        return mapper

    transform = log_compress if mode == "log" else float

    def mapper(value: Optional[float]) -> str:
        if value is None or not math.isfinite(value):
            return NEUTRAL_COLOR
        return ramp_color(transform(value))

    return mapper


def color_for(value: Optional[float], all_values: Iterable[Optional[float]], mode: str = "linear") -> str:
    return make_color_mapper(all_values, mode)(value)


def legend_swatches(mode: str, all_values: Iterable[Optional[float]] = ()) -> list[tuple[str, str]]:
    """(label, color) pairs for the color legend."""
    if mode == "quantile":
        thresholds = quantile_thresholds(all_values)
        if not thresholds:
            return [("no data", NEUTRAL_COLOR)]
        edges = [None] + thresholds + [None]
        swatches = []
        for i, color in enumerate(DIVERGING_COLORS):
            lo, hi = edges[i], edges[i + 1]
            if lo is None:
                label = f"< {hi:.2f}"
            elif hi is None:
                label = f"≥ {lo:.2f}"
            else:
                label = f"{lo:.2f} – {hi:.2f}"
            swatches.append((label, color))
        return swatches

    mapper = make_color_mapper((), mode)
    return [(str(v), mapper(float(v))) for v in range(-3, 4)]
