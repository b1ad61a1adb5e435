# heatmap_pipeline/validators.py

import logging
import math
from numbers import Number
from typing import Any, Optional

import pandas as pd

from heatmap_pipeline.types import ColumnSchema, GeneRecord, RawRecord, RowSkipped

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY = "Uncategorized"
NULL_TOKENS = {"", "n/a", "na", "nan", "null", "none", "-"}


class SchemaError(ValueError):
    """Raised when the header row cannot be turned into a heatmap schema."""


class DataError(ValueError):
    """Raised when no usable gene rows survive validation."""


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def parse_numeric(value: Any) -> tuple[Optional[float], bool]:
    """Parse a cell to float.

    Returns ``(number, ok)``. Blank cells and placeholder tokens give
    ``(None, True)``; text that is not a number gives ``(None, False)``.
    """
    if _is_missing(value):
        return None, True
    if isinstance(value, bool):
        return None, False
    if isinstance(value, Number):
        number = float(value)
        return (number, True) if math.isfinite(number) else (None, True)

    text = str(value).strip()
    if text.lower() in NULL_TOKENS:
        return None, True
    try:
        number = float(text)
    except ValueError:
        return None, False
    return (number, True) if math.isfinite(number) else (None, True)


def _clean_text(value: Any) -> str:
    if _is_missing(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def extract_identifier(record: RawRecord, schema: ColumnSchema) -> str:
    for column in schema.identifier_columns:
        text = _clean_text(record.get(column))
        if text:
            return text
    return ""


def extract_category(record: RawRecord, schema: ColumnSchema) -> str:
    if schema.category_column is None:
        return FALLBACK_CATEGORY
    return _clean_text(record.get(schema.category_column)) or FALLBACK_CATEGORY


def _parse_cells(
    record: RawRecord,
    columns: tuple[tuple[str, str], ...],
    row_index: int,
    diagnostics: list[RowSkipped],
) -> tuple[Optional[float], ...]:
    parsed = []
    for header, _ in columns:
        number, ok = parse_numeric(record.get(header))
        if not ok:
            logger.debug("Row %d: non-numeric value %r in '%s'", row_index, record.get(header), header)
            diagnostics.append(RowSkipped(row_index, "non-numeric value treated as missing", header))
        parsed.append(number)
    return tuple(parsed)


def validate_row(
    record: RawRecord,
    schema: ColumnSchema,
    row_index: int,
    diagnostics: list[RowSkipped],
) -> Optional[GeneRecord]:
    gene_id = extract_identifier(record, schema)
    if not gene_id:
        logger.warning("Row %d skipped: missing gene identifier", row_index)
        diagnostics.append(RowSkipped(row_index, "missing gene identifier"))
        return None

    return GeneRecord(
        id=gene_id,
        category=extract_category(record, schema),
        values=_parse_cells(record, schema.comparison_columns, row_index, diagnostics),
        p_values=_parse_cells(record, schema.p_value_columns, row_index, diagnostics),
    )


def validate_rows(
    records: list[RawRecord], schema: ColumnSchema
) -> tuple[list[GeneRecord], list[RowSkipped]]:
    """Turn raw records into gene records, dropping rows without an identifier."""
    if not records:
        raise DataError("The uploaded table contains no data rows.")

    genes = []
    diagnostics: list[RowSkipped] = []
    for i, record in enumerate(records):
        gene = validate_row(record, schema, i, diagnostics)
        if gene is not None:
            genes.append(gene)

    if not genes:
        raise DataError(
            f"None of the {len(records)} row(s) has a gene identifier "
            "(expected a column such as 'Gene ID')."
        )

    return genes, diagnostics
