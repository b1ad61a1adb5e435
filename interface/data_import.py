import logging
import streamlit as st
import pandas as pd

from interface.components.excel_dialog import show_excel_import_dialog
from heatmap_pipeline.converters import df_to_records, read_expression_file, summarize_dataset
from heatmap_pipeline.processor import process_table
from heatmap_pipeline.validators import DataError, SchemaError

logger = logging.getLogger(__name__)


def _render_diagnostics(result):
    for message in result.warnings:
        st.warning(message)

    if result.diagnostics:
        with st.expander(f"Row diagnostics ({len(result.diagnostics)})"):
            st.dataframe(
                pd.DataFrame([
                    {"Row": d.row_index + 2, "Column": d.column or "", "Issue": d.reason}
                    for d in result.diagnostics
                ]),
                use_container_width=True,
                hide_index=True,
            )


def run():
    col_title, col_button = st.columns([8, 1])

    with col_title:
        st.title("Expression Data Import")

    # --- Step 1: Upload ---
    with col_button:
        if st.button("Import File"):
            show_excel_import_dialog()

    uploaded = st.session_state.get("uploaded_expression_file")
    if uploaded is None:
        st.info("Use the **Import File** button to upload a spreadsheet.")
        return

    # --- Step 2: Decode + process ---
    try:
        raw = read_expression_file(uploaded)
        result = process_table(df_to_records(raw))
    except (SchemaError, DataError) as e:
        logger.error("Rejected %s: %s", uploaded.name, e)
        st.error(f"❌ `{uploaded.name}`: {e}")
        return
    except Exception as e:
        logger.error("Failed to read %s", uploaded.name, exc_info=True)
        st.error(f"❌ Failed to process gene expression data: {e}")
        return

    dataset = result.dataset
    st.success(
        f"✅ {uploaded.name}: {len(dataset.genes)} genes in "
        f"{len(dataset.category_segments)} categories, {len(dataset.comparison_names)} comparisons."
    )
    _render_diagnostics(result)

    # --- Step 3: Overview ---
    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**Comparisons**")
        st.dataframe(
            pd.DataFrame({
                "Comparison": dataset.comparison_names,
                "Column": [h for h, _ in result.schema.comparison_columns],
            }),
            use_container_width=True,
            hide_index=True,
        )
    with col2:
        st.markdown("**Categories**")
        st.dataframe(summarize_dataset(dataset), use_container_width=True, hide_index=True)

    with st.expander("Table Preview"):
        st.dataframe(raw, use_container_width=True, hide_index=True)

    # --- Step 4: Load ---
    if st.button("Load into Session", type="primary", use_container_width=True):
        st.session_state["dataset"] = dataset
        st.session_state["diagnostics"] = list(result.diagnostics)
        st.session_state["schema_warnings"] = list(result.warnings)
        st.session_state["source_file"] = uploaded.name
        st.toast("Expression data loaded into session.")
        st.session_state.pop("uploaded_expression_file", None)
        st.switch_page("interface/heatmap_viewer.py")


run()
