"""Shared fixtures for the heatmap pipeline tests."""

import pytest

FC = "Log2FC (Ctrl vs KD)"
FC2 = "Log2FC (Ctrl vs OE)"
PV = "P value (Ctrl vs KD)"
PV2 = "P value (Ctrl vs OE)"
CAT = "All Gene Ontology Category"


@pytest.fixture
def example_records() -> list[dict]:
    """Two lipid genes, as in the documented example scenario."""
    return [
        {"Gene ID": "A", FC: 1.2, PV: 0.03, CAT: "Lipid"},
        {"Gene ID": "B", FC: -0.5, PV: 0.2, CAT: "Lipid"},
    ]


@pytest.fixture
def mixed_records() -> list[dict]:
    """Several categories, blank identifiers and missing values."""
    return [
        {"Gene ID": "Abca1", FC: 2.5, FC2: 0.1, PV: 0.001, PV2: 0.5, CAT: "Cholesterol Metabolism"},
        {"Gene ID": "Fasn", FC: -1.0, FC2: None, PV: 0.04, PV2: None, CAT: "Fatty Acid Metabolism"},
        {"Gene ID": "  ", FC: 0.3, FC2: 0.2, PV: 0.9, PV2: 0.9, CAT: "Fatty Acid Metabolism"},
        {"Gene ID": "Hmgcr", FC: None, FC2: 1.0, PV: None, PV2: 0.07, CAT: "Cholesterol Metabolism"},
        {"Gene ID": "Ldlr", FC: -2.0, FC2: "bad", PV: 0.2, PV2: 0.01, CAT: "Cholesterol Metabolism"},
        {"Gene ID": "Acaca", FC: 0.7, FC2: -0.4, PV: 0.06, PV2: 0.3, CAT: ""},
        {"Gene ID": None, FC: 1.0, FC2: 1.0, PV: 0.5, PV2: 0.5, CAT: "Immune"},
    ]
