# heatmap_pipeline/converters.py

from dataclasses import asdict
from io import BytesIO
from pathlib import Path

import numpy as np
import pandas as pd

from heatmap_pipeline.layout import NULL_PLACEHOLDER
from heatmap_pipeline.types import CategorySegment, Dataset, GeneRecord, RawRecord

EXPORT_ID_COLUMN = "Gene ID"
EXPORT_CATEGORY_COLUMN = "Category"
EXPORT_SHEET_NAME = "Processed Data"
EXPORT_FILE_NAME = "processed_gene_data.xlsx"


def df_to_records(df: pd.DataFrame) -> list[RawRecord]:
    """Decoded table -> one header->cell mapping per row (blank cells become None)."""
    df = df.rename(columns=lambda c: str(c).strip())
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")


def read_expression_file(file) -> pd.DataFrame:
    """Read the first sheet of an Excel workbook, or a CSV/TSV file."""
    name = getattr(file, "name", str(file))
    suffix = Path(name).suffix.lower()

    if suffix in {".csv", ".txt", ".tsv"}:
        sep = {".csv": ",", ".tsv": "\t"}.get(suffix)  # sniff .txt
        df = pd.read_csv(file, sep=sep, engine="python")
    elif suffix in {".xlsx", ".xlsm"}:
        df = pd.read_excel(file, sheet_name=0)
    else:
        raise ValueError(f"Unsupported file type '{suffix}'. Upload an .xlsx or .csv file.")

    # drop spreadsheet padding: fully empty rows and "Unnamed: n" columns with no data
    df = df.dropna(how="all")
    unnamed = [c for c in df.columns if str(c).startswith("Unnamed:") and df[c].isna().all()]
    return df.drop(columns=unnamed)


def dataset_to_df(dataset: Dataset) -> pd.DataFrame:
    """Flatten a dataset into the export table, one row per gene in display order."""
    fc_headers = [f"Log2FC ({name})" for name in dataset.comparison_names]
    p_headers = [f"P-value ({name})" for name in dataset.p_value_names]

    data = [
        [gene.id, gene.category]
        + _export_cells(gene.values, len(fc_headers))
        + _export_cells(gene.p_values, len(p_headers))
        for gene in dataset.genes
    ]

    columns = [EXPORT_ID_COLUMN, EXPORT_CATEGORY_COLUMN] + fc_headers + p_headers
    return pd.DataFrame(data, columns=columns)


def _export_cells(values, width: int) -> list:
    cells = [NULL_PLACEHOLDER if v is None else v for v in values[:width]]
    return cells + [NULL_PLACEHOLDER] * (width - len(cells))


def df_to_excel_bytes(df: pd.DataFrame, sheet_name: str = EXPORT_SHEET_NAME) -> bytes:
    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    return buffer.getvalue()


def summarize_dataset(dataset: Dataset) -> pd.DataFrame:
    """Per-category gene counts and mean fold change for the overview table."""
    df = pd.DataFrame([
        {"Category": g.category, "Gene ID": g.id, "Primary Log2FC": g.primary_value}
        for g in dataset.genes
    ])
    if df.empty:
        return pd.DataFrame(columns=["Category", "Genes", "Mean Log2FC", "Missing"])

    df["Primary Log2FC"] = pd.to_numeric(df["Primary Log2FC"], errors="coerce")
    summary = df.groupby("Category", sort=False).agg(
        Genes=("Gene ID", "count"),
        **{"Mean Log2FC": ("Primary Log2FC", "mean")},
        Missing=("Primary Log2FC", lambda s: int(np.isnan(s).sum())),
    )
    return summary.reset_index()


def dataset_to_dict(dataset: Dataset) -> dict:
    """JSON-safe dict for session export."""
    return asdict(dataset)


def dataset_from_dict(data: dict) -> Dataset:
    return Dataset(
        genes=tuple(
            GeneRecord(
                id=g["id"],
                category=g["category"],
                values=tuple(g["values"]),
                p_values=tuple(g["p_values"]),
            )
            for g in data.get("genes", [])
        ),
        comparison_names=tuple(data.get("comparison_names", [])),
        category_segments=tuple(CategorySegment(**s) for s in data.get("category_segments", [])),
        p_value_names=tuple(data.get("p_value_names", [])),
    )
