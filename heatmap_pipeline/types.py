# heatmap_pipeline/types.py

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

RawRecord = Dict[str, Any]


@dataclass(frozen=True)
class ColumnSchema:
    comparison_columns: Tuple[Tuple[str, str], ...]  # (header, display name)
    p_value_columns: Tuple[Tuple[str, str], ...]
    category_column: Optional[str]
    identifier_columns: Tuple[str, ...] = ()

    @property
    def comparison_names(self) -> Tuple[str, ...]:
        return tuple(name for _, name in self.comparison_columns)

    @property
    def p_value_names(self) -> Tuple[str, ...]:
        return tuple(name for _, name in self.p_value_columns)


@dataclass(frozen=True)
class GeneRecord:
    id: str
    category: str
    values: Tuple[Optional[float], ...]
    p_values: Tuple[Optional[float], ...]

    @property
    def primary_value(self) -> Optional[float]:
        return self.values[0] if self.values else None


@dataclass(frozen=True)
class CategorySegment:
    category: str
    start_index: int
    end_index: int  # inclusive
    count: int


@dataclass(frozen=True)
class Dataset:
    genes: Tuple[GeneRecord, ...]
    comparison_names: Tuple[str, ...]
    category_segments: Tuple[CategorySegment, ...]
    p_value_names: Tuple[str, ...] = ()

    def all_values(self) -> list[Optional[float]]:
        return [v for gene in self.genes for v in gene.values]


@dataclass(frozen=True)
class RowSkipped:
    row_index: int
    reason: str
    column: Optional[str] = None


@dataclass(frozen=True)
class MarkerTier:
    visible: bool
    emphasis: str  # "high" | "low" | "none"
    radius: int = 0


@dataclass(frozen=True)
class ProcessResult:
    dataset: Dataset
    schema: ColumnSchema
    diagnostics: Tuple[RowSkipped, ...] = ()
    warnings: Tuple[str, ...] = ()
