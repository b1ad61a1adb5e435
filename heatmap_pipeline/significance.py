# heatmap_pipeline/significance.py

import math
from typing import Optional

from heatmap_pipeline.types import MarkerTier

HIGHLY_SIGNIFICANT = 0.01
SIGNIFICANT = 0.05
MARGINAL = 0.1

HIDDEN = MarkerTier(visible=False, emphasis="none", radius=0)
MARGINAL_TIER = MarkerTier(visible=True, emphasis="low", radius=2)
SIGNIFICANT_TIER = MarkerTier(visible=True, emphasis="high", radius=3)
HIGHLY_SIGNIFICANT_TIER = MarkerTier(visible=True, emphasis="high", radius=5)


def marker_tier_for(p_value: Optional[float]) -> MarkerTier:
    """Map a p-value to a significance marker tier (p < 0.01, < 0.05, < 0.1, else hidden)."""
    if p_value is None or math.isnan(p_value) or p_value >= MARGINAL:
        return HIDDEN
    if p_value >= SIGNIFICANT:
        return MARGINAL_TIER
    if p_value >= HIGHLY_SIGNIFICANT:
        return SIGNIFICANT_TIER
    return HIGHLY_SIGNIFICANT_TIER


def is_significant(p_value: Optional[float]) -> bool:
    return marker_tier_for(p_value).emphasis == "high"
