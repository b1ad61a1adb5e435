# interface/home.py

import streamlit as st

def run():
    st.header("Gene Expression Heatmap")

    st.markdown(
        """
        This app draws a **clustered heatmap** of log₂ fold changes, grouping genes by
        biological category and marking statistically significant changes.

        **Expected columns:**
        - a gene identifier column (e.g. `Gene ID`)
        - one or more fold-change columns named `Log2FC (<comparison>)`
        - optional p-value columns named `P value (<comparison>)`
        - an optional category column (any header containing "Category")

        **Key Features:**
        - Genes grouped by category and sorted from lowest to highest log₂FC in the first comparison
        - Linear, logarithmic or quantile color scales
        - Significance markers for p < 0.01, p < 0.05 and marginal p < 0.1
        - Export the figure as SVG/PNG and the processed table as XLSX

        **Next step:** Go to the **Data Import** page to upload a spreadsheet.
        """
    )

run()
