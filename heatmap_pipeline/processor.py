# heatmap_pipeline/processor.py

import logging
from typing import Iterable

from heatmap_pipeline.schema import detect_schema, schema_warnings
from heatmap_pipeline.types import (
    CategorySegment,
    Dataset,
    GeneRecord,
    ProcessResult,
    RawRecord,
)
from heatmap_pipeline.validators import DataError, validate_rows

logger = logging.getLogger(__name__)


def _primary_sort_key(gene: GeneRecord) -> tuple[bool, float]:
    # missing values sort after every number in the group
    value = gene.primary_value
    return (value is None, value if value is not None else 0.0)


def group_and_sort(genes: Iterable[GeneRecord]) -> list[GeneRecord]:
    """Group genes by category (first-seen order), ascending by the first comparison."""
    groups: dict[str, list[GeneRecord]] = {}
    for gene in genes:
        groups.setdefault(gene.category, []).append(gene)

    ordered = []
    for members in groups.values():
        ordered.extend(sorted(members, key=_primary_sort_key))
    return ordered


def build_category_segments(genes: list[GeneRecord]) -> list[CategorySegment]:
    segments = []
    start = 0
    for i in range(1, len(genes) + 1):
        if i == len(genes) or genes[i].category != genes[start].category:
            segments.append(CategorySegment(
                category=genes[start].category,
                start_index=start,
                end_index=i - 1,
                count=i - start,
            ))
            start = i
    return segments


def process_table(records: list[RawRecord]) -> ProcessResult:
    """Run schema detection, validation and grouping over decoded rows."""
    if not records:
        raise DataError("The uploaded table contains no data rows.")

    # Step 1: column roles from the first row's headers
    schema = detect_schema(list(records[0].keys()))

    # Step 2: typed gene records
    genes, diagnostics = validate_rows(records, schema)

    # Step 3: group, sort, segment
    ordered = group_and_sort(genes)
    segments = build_category_segments(ordered)

    dataset = Dataset(
        genes=tuple(ordered),
        comparison_names=schema.comparison_names,
        category_segments=tuple(segments),
        p_value_names=schema.p_value_names,
    )

    dropped = sum(1 for d in diagnostics if d.column is None)
    logger.info(
        "Built dataset: %d gene(s) in %d categor%s, %d row(s) dropped",
        len(dataset.genes),
        len(segments),
        "y" if len(segments) == 1 else "ies",
        dropped,
    )

    return ProcessResult(
        dataset=dataset,
        schema=schema,
        diagnostics=tuple(diagnostics),
        warnings=tuple(schema_warnings(schema)),
    )
