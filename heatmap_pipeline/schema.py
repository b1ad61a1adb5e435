# heatmap_pipeline/schema.py

import logging
import re
from typing import Iterable, Optional

from heatmap_pipeline.types import ColumnSchema
from heatmap_pipeline.validators import DataError, SchemaError

logger = logging.getLogger(__name__)

COMPARISON_PATTERN = re.compile(r"^Log2FC\s*\((.+)\)$", re.IGNORECASE)
P_VALUE_PATTERN = re.compile(r"^P[\s_-]?value\s*\((.+)\)$", re.IGNORECASE)

CATEGORY_MARKER = "category"

# normalized form -> priority (lower wins)
IDENTIFIER_HEADERS = {
    "geneid": 0,
    "gene": 1,
    "genesymbol": 2,
    "genename": 3,
    "symbol": 4,
    "identifier": 5,
    "id": 6,
}


def _normalize_header(header: str) -> str:
    return re.sub(r"[\s_\-.]+", "", str(header)).lower()


def match_comparison(header: str) -> Optional[str]:
    """Return the comparison display name for a fold-change header, else None."""
    match = COMPARISON_PATTERN.match(str(header).strip())
    return match.group(1).strip() if match else None


def match_p_value(header: str) -> Optional[str]:
    match = P_VALUE_PATTERN.match(str(header).strip())
    return match.group(1).strip() if match else None


def find_category_column(headers: Iterable[str]) -> Optional[str]:
    return next((h for h in headers if CATEGORY_MARKER in str(h).lower()), None)


def find_identifier_columns(headers: Iterable[str]) -> tuple[str, ...]:
    candidates = [h for h in headers if _normalize_header(h) in IDENTIFIER_HEADERS]
    # sorted() is stable, so equal-priority headers keep file order
    return tuple(sorted(candidates, key=lambda h: IDENTIFIER_HEADERS[_normalize_header(h)]))


def _reject_duplicate_names(columns: list[tuple[str, str]], kind: str):
    # export headers are rebuilt from the display name, so names must be unique
    seen: dict[str, str] = {}
    for header, name in columns:
        if name in seen:
            raise SchemaError(
                f"Columns '{seen[name]}' and '{header}' are both {kind} columns for "
                f"comparison '{name}'. Rename or remove one of them."
            )
        seen[name] = header


def detect_schema(headers: list[str]) -> ColumnSchema:
    """Assign column roles from header text, preserving header order."""
    if not headers:
        raise DataError("The uploaded table is empty: no header row or data rows were found.")

    comparisons = []
    p_values = []
    for header in headers:
        name = match_comparison(header)
        if name is not None:
            comparisons.append((header, name))
            continue
        name = match_p_value(header)
        if name is not None:
            p_values.append((header, name))

    if not comparisons:
        raise SchemaError(
            "No fold-change columns found. Expected headers such as "
            "'Log2FC (Control vs KD)' (pattern: Log2FC (<comparison>))."
        )
    _reject_duplicate_names(comparisons, "fold-change")
    _reject_duplicate_names(p_values, "p-value")

    schema = ColumnSchema(
        comparison_columns=tuple(comparisons),
        p_value_columns=tuple(p_values),
        category_column=find_category_column(headers),
        identifier_columns=find_identifier_columns(headers),
    )

    logger.info(
        "Detected %d comparison column(s), %d p-value column(s), category column: %s",
        len(schema.comparison_columns),
        len(schema.p_value_columns),
        schema.category_column,
    )
    for message in schema_warnings(schema):
        logger.warning(message)

    return schema


def schema_warnings(schema: ColumnSchema) -> list[str]:
    warnings = []
    if not schema.p_value_columns:
        warnings.append("No p-value columns found; significance markers will not be shown.")
    if schema.category_column is None:
        warnings.append("No category column found; all genes are grouped as 'Uncategorized'.")
    if not schema.identifier_columns:
        warnings.append("No gene identifier column found (e.g. 'Gene ID'); every row will be skipped.")
    return warnings
