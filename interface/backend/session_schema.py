# interface/backend/session_schema.py

from typing import Literal, TypedDict

ColorMode = Literal["linear", "log", "quantile"]


class HeatmapSettings(TypedDict):
    color_mode: ColorMode
    font_size: int
    cell_height: int
    show_values: bool
