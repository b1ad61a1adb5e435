# interface/plotting/plot_heatmap.py

import plotly.graph_objects as go
from plotly.graph_objects import Figure
from typing import Optional

from heatmap_pipeline.colors import NEUTRAL_COLOR, legend_swatches, make_color_mapper
from heatmap_pipeline.layout import (
    column_offsets,
    estimate_text_width,
    format_cell,
    heatmap_column_widths,
    wrap_category_label,
)
from heatmap_pipeline.significance import marker_tier_for
from heatmap_pipeline.types import CategorySegment, Dataset

CATEGORY_TINTS = [
    ("Cholesterol", "#e6f7ff"),
    ("Fatty Acid", "#e6ffe6"),
    ("Triglyceride", "#fff2e6"),
    ("Immune", "#ffe6e6"),
    ("Carbohydrate", "#f9f9e6"),
]
DEFAULT_TINT = "#f0f0f0"

MARGIN = dict(l=20, r=40, t=120, b=50)
CATEGORY_WIDTH = 180
LABEL_GAP = 15
WHITE_TEXT_ABOVE = 1.5
IMAGE_FILE_NAME = "gene_heatmap"


def build_heatmap_figure(
    dataset: Dataset,
    mode: str = "linear",
    font_size: float = 11,
    cell_height: int = 30,
    show_values: bool = True,
    title: Optional[str] = None,
) -> Figure:
    mapper = make_color_mapper(dataset.all_values(), mode)

    widths = heatmap_column_widths(dataset, font_size, header_font_size=font_size + 1)
    offsets = column_offsets(widths)
    grid_width = sum(widths)
    grid_height = cell_height * len(dataset.genes)

    label_width = max(
        (estimate_text_width(g.id, font_size) for g in dataset.genes), default=0
    ) + LABEL_GAP
    x_min = -(label_width + CATEGORY_WIDTH)

    fig = go.Figure()
    shapes = []
    annotations = []

    # --- Category bands ---
    for idx, segment in enumerate(dataset.category_segments):
        shapes.append(_category_band(segment, x_min, label_width, cell_height))
        annotations.extend(_category_labels(segment, x_min, cell_height, font_size))
        if idx > 0:
            y = segment.start_index * cell_height
            shapes.append(dict(
                type="line", x0=x_min, x1=grid_width, y0=y, y1=y,
                line=dict(color="#000", width=1, dash="dash"),
            ))

    # --- Cells ---
    text_x, text_y, texts, text_colors = [], [], [], []
    mark_x, mark_y, mark_size, mark_color, mark_hover = [], [], [], [], []

    for i, gene in enumerate(dataset.genes):
        y0 = i * cell_height
        y_mid = y0 + cell_height / 2
        annotations.append(dict(
            x=-LABEL_GAP, y=y_mid, text=gene.id, showarrow=False,
            xanchor="right", font=dict(size=font_size),
        ))

        for j, value in enumerate(gene.values):
            x0 = offsets[j]
            p_value = gene.p_values[j] if j < len(gene.p_values) else None
            tier = marker_tier_for(p_value)

            shapes.append(dict(
                type="rect", x0=x0, x1=x0 + widths[j] - 1, y0=y0, y1=y0 + cell_height - 1,
                fillcolor=mapper(value), line=dict(color="#fff", width=1), layer="below",
            ))

            if show_values:
                label = format_cell(value)
                text_x.append(x0 + widths[j] / 2)
                text_y.append(y_mid)
                texts.append(f"<b>{label}</b>" if tier.emphasis == "high" else label)
                text_colors.append("white" if value is not None and abs(value) > WHITE_TEXT_ABOVE else "black")

            if tier.visible:
                mark_x.append(x0 + widths[j] - 12)
                mark_y.append(y_mid)
                mark_size.append(tier.radius * 2)
                mark_color.append("black" if tier.emphasis == "high" else "#888888")
                mark_hover.append(
                    f"{gene.id} | {dataset.comparison_names[j]}<br>"
                    f"Log2FC: {format_cell(value)}<br>p = {p_value:.3g}"
                )

    if texts:
        fig.add_trace(go.Scatter(
            x=text_x, y=text_y, mode="text", text=texts,
            textfont=dict(size=max(font_size - 1, 6), color=text_colors),
            hoverinfo="skip", showlegend=False,
        ))

    if mark_x:
        fig.add_trace(go.Scatter(
            x=mark_x, y=mark_y, mode="markers",
            marker=dict(size=mark_size, color=mark_color, opacity=0.8),
            hovertext=mark_hover, hoverinfo="text", showlegend=False,
        ))

    # --- Column headers ---
    for name, x0, w in zip(dataset.comparison_names, offsets, widths):
        annotations.append(dict(
            x=x0 + w / 2, y=-20, text=f"<b>{name}</b>", showarrow=False,
            font=dict(size=font_size + 1),
        ))

    shapes_legend, annotations_legend = _legend(dataset, mode, x_min)
    shapes.extend(shapes_legend)
    annotations.extend(annotations_legend)

    fig.update_layout(
        shapes=shapes,
        annotations=annotations,
        width=int(grid_width - x_min) + MARGIN["l"] + MARGIN["r"],
        height=int(grid_height) + MARGIN["t"] + MARGIN["b"],
        margin=MARGIN,
        plot_bgcolor="white",
        paper_bgcolor="white",
    )
    if title:
        fig.update_layout(title_text=title)
    fig.update_xaxes(range=[x_min, grid_width], visible=False, fixedrange=True)
    fig.update_yaxes(range=[grid_height, -100], visible=False, fixedrange=True)
    return fig


def plotly_image_config(fmt: str = "svg") -> dict:
    """Config for st.plotly_chart so the modebar camera button exports the heatmap."""
    return {
        "displaylogo": False,
        "toImageButtonOptions": {"format": fmt, "filename": IMAGE_FILE_NAME, "scale": 2},
    }


# --- Helpers ---

def category_tint(category: str) -> str:
    return next((tint for key, tint in CATEGORY_TINTS if key in category), DEFAULT_TINT)


def _category_band(segment: CategorySegment, x_min: float, label_width: float, cell_height: int) -> dict:
    return dict(
        type="rect",
        x0=x_min, x1=-label_width - 5,
        y0=segment.start_index * cell_height,
        y1=(segment.end_index + 1) * cell_height,
        fillcolor=category_tint(segment.category),
        line=dict(color="#ccc", width=1),
        layer="below",
    )


def _category_labels(segment: CategorySegment, x_min: float, cell_height: int, font_size: float) -> list[dict]:
    lines = wrap_category_label(segment.category)
    y0 = segment.start_index * cell_height
    labels = [
        dict(
            x=x_min + 5, y=y0 + 15 + k * 15, text=f"<b>{line}</b>", showarrow=False,
            xanchor="left", font=dict(size=font_size + 1, color="#333"),
        )
        for k, line in enumerate(lines)
    ]
    labels.append(dict(
        x=x_min + 5, y=y0 + 15 + len(lines) * 15, text=f"({segment.count} genes)",
        showarrow=False, xanchor="left", font=dict(size=max(font_size - 1, 6), color="#666"),
    ))
    return labels


def _legend(dataset: Dataset, mode: str, x_min: float) -> tuple[list[dict], list[dict]]:
    swatches = legend_swatches(mode, dataset.all_values())
    y = -80
    shapes, annotations = [], []

    annotations.append(dict(
        x=x_min, y=y + 7, text="<b>Legend:</b>", showarrow=False, xanchor="left",
    ))
    x = x_min + 70
    step = 60 if mode == "quantile" else 35
    for label, color in swatches:
        shapes.append(dict(
            type="rect", x0=x, x1=x + step - 5, y0=y, y1=y + 15,
            fillcolor=color, line=dict(color="#ccc", width=0.5),
        ))
        annotations.append(dict(
            x=x + (step - 5) / 2, y=y + 28, text=label, showarrow=False, font=dict(size=9),
        ))
        x += step

    annotations.append(dict(
        x=x + 10, y=y + 7, text="Log₂ Fold Change" + (" (quantiles)" if mode == "quantile" else ""),
        showarrow=False, xanchor="left", font=dict(size=11),
    ))
    annotations.append(dict(
        x=x + 10, y=y + 28,
        text="● p < 0.01   • p < 0.05   <span style='color:#888'>•</span> p < 0.1   "
             f"<span style='color:{NEUTRAL_COLOR}'>■</span> no data",
        showarrow=False, xanchor="left", font=dict(size=10),
    ))
    return shapes, annotations
