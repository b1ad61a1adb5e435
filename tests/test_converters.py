"""Tests for table conversion, export projection and session serialization."""

import json
from io import BytesIO

import numpy as np
import pandas as pd
import pytest

from heatmap_pipeline.converters import (
    EXPORT_SHEET_NAME,
    dataset_from_dict,
    dataset_to_df,
    dataset_to_dict,
    df_to_excel_bytes,
    df_to_records,
    read_expression_file,
    summarize_dataset,
)
from heatmap_pipeline.processor import process_table
from heatmap_pipeline.types import CategorySegment, Dataset, GeneRecord
from heatmap_pipeline.validators import SchemaError


class TestDfToRecords:
    """Tests for df_to_records."""

    def test_blank_cells_become_none(self):
        """Should turn NaN cells into None and strip header whitespace."""
        df = pd.DataFrame({" Gene ID ": ["A", None], "Log2FC (X)": [1.0, np.nan]})
        records = df_to_records(df)

        assert records == [
            {"Gene ID": "A", "Log2FC (X)": 1.0},
            {"Gene ID": None, "Log2FC (X)": None},
        ]


class TestExportProjection:
    """Tests for dataset_to_df."""

    def test_columns_and_placeholders(self, mixed_records):
        """Should write identifier, category, fold changes then p-values, with N/A for nulls."""
        dataset = process_table(mixed_records).dataset
        df = dataset_to_df(dataset)

        assert list(df.columns) == [
            "Gene ID",
            "Category",
            "Log2FC (Ctrl vs KD)",
            "Log2FC (Ctrl vs OE)",
            "P-value (Ctrl vs KD)",
            "P-value (Ctrl vs OE)",
        ]
        assert list(df["Gene ID"]) == [g.id for g in dataset.genes]
        hmgcr = df[df["Gene ID"] == "Hmgcr"].iloc[0]
        assert hmgcr["Log2FC (Ctrl vs KD)"] == "N/A"
        assert hmgcr["P-value (Ctrl vs KD)"] == "N/A"
        assert hmgcr["Log2FC (Ctrl vs OE)"] == 1.0

    def test_round_trip(self, mixed_records):
        """Should rebuild an equal dataset when the export is imported again."""
        original = process_table(mixed_records).dataset
        reimported = process_table(df_to_records(dataset_to_df(original))).dataset

        assert reimported == original

    def test_round_trip_through_excel(self, mixed_records, tmp_path):
        """Should survive serialization to XLSX and back."""
        original = process_table(mixed_records).dataset
        path = tmp_path / "processed_gene_data.xlsx"
        path.write_bytes(df_to_excel_bytes(dataset_to_df(original)))

        reimported = process_table(df_to_records(read_expression_file(path))).dataset

        assert [g.id for g in reimported.genes] == [g.id for g in original.genes]
        assert [g.category for g in reimported.genes] == [g.category for g in original.genes]
        assert [g.values for g in reimported.genes] == [g.values for g in original.genes]
        assert reimported.category_segments == original.category_segments

    def test_excel_sheet_name(self, example_records):
        """Should write the processed sheet name."""
        data = df_to_excel_bytes(dataset_to_df(process_table(example_records).dataset))
        sheets = pd.read_excel(BytesIO(data), sheet_name=None)

        assert list(sheets) == [EXPORT_SHEET_NAME]
        assert len(sheets[EXPORT_SHEET_NAME]) == 2


class TestReadExpressionFile:
    """Tests for read_expression_file."""

    def test_csv(self, tmp_path):
        """Should read a CSV file and drop blank rows."""
        path = tmp_path / "genes.csv"
        path.write_text("Gene ID,Log2FC (X),P value (X)\nA,1.5,0.01\n,,\nB,-0.2,0.4\n")

        df = read_expression_file(path)
        result = process_table(df_to_records(df))

        assert len(df) == 2
        assert [g.id for g in result.dataset.genes] == ["B", "A"]

    def test_unsupported_type(self, tmp_path):
        """Should reject unknown file types."""
        path = tmp_path / "genes.json"
        path.write_text("{}")

        with pytest.raises(ValueError, match="Unsupported file type"):
            read_expression_file(path)


class TestSessionDict:
    """Tests for dataset_to_dict / dataset_from_dict."""

    def test_json_round_trip(self, mixed_records):
        """Should restore an equal dataset from its JSON form."""
        dataset = process_table(mixed_records).dataset
        restored = dataset_from_dict(json.loads(json.dumps(dataset_to_dict(dataset))))

        assert restored == dataset


class TestSummarizeDataset:
    """Tests for summarize_dataset."""

    def test_per_category_counts(self, mixed_records):
        """Should count genes and missing primary values per category in display order."""
        summary = summarize_dataset(process_table(mixed_records).dataset)

        assert list(summary["Category"]) == [
            "Cholesterol Metabolism",
            "Fatty Acid Metabolism",
            "Uncategorized",
        ]
        assert list(summary["Genes"]) == [3, 1, 1]
        assert list(summary["Missing"]) == [1, 0, 0]
        assert summary["Mean Log2FC"].iloc[0] == pytest.approx(0.25)


class TestExportPositional:
    """Export rows are built column by column."""

    def test_colliding_input_headers_rejected_before_export(self):
        """Should stop at schema detection rather than export merged columns."""
        with pytest.raises(SchemaError):
            process_table([{"Gene ID": "A", "Log2FC (X)": 1.0, "log2fc(X)": -2.0}])

    def test_short_value_tuples_padded(self):
        """Should fill missing trailing cells with the placeholder."""
        dataset = Dataset(
            genes=(GeneRecord("A", "Lipid", (1.0,), ()),),
            comparison_names=("X", "Y"),
            category_segments=(CategorySegment("Lipid", 0, 0, 1),),
            p_value_names=("X",),
        )
        df = dataset_to_df(dataset)

        assert list(df.iloc[0]) == ["A", "Lipid", 1.0, "N/A", "N/A"]

    def test_distinct_comparisons_keep_their_values(self):
        """Should round-trip several comparisons without mixing their values."""
        records = [{"Gene ID": "A", "Log2FC (X)": 1.0, "Log2FC (Y)": -2.0, "P value (X)": 0.01}]
        original = process_table(records).dataset
        reimported = process_table(df_to_records(dataset_to_df(original))).dataset

        assert reimported.genes[0].values == (1.0, -2.0)
        assert reimported == original

    def test_legacy_xls_rejected(self, tmp_path):
        """Should refuse .xls workbooks with a clear message."""
        path = tmp_path / "genes.xls"
        path.write_bytes(b"")

        with pytest.raises(ValueError, match="Upload an .xlsx or .csv file"):
            read_expression_file(path)
