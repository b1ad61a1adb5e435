# interface/backend/session_io.py

import json
import logging
import streamlit as st
from typing import Any, Dict

from heatmap_pipeline.converters import (
    EXPORT_FILE_NAME,
    dataset_from_dict,
    dataset_to_df,
    dataset_to_dict,
    df_to_excel_bytes,
)
from heatmap_pipeline.types import Dataset

from interface.backend.session_schema import HeatmapSettings

logger = logging.getLogger(__name__)


def serialize_session() -> Dict[str, Any]:
    """Convert session state to a JSON-safe dict."""
    dataset: Dataset = st.session_state.get("dataset")
    return {
        "heatmap_settings": dict(st.session_state.get("heatmap_settings", {})),
        "source_file": st.session_state.get("source_file"),
        "dataset": dataset_to_dict(dataset) if dataset is not None else None,
    }


def deserialize_session(data: Dict[str, Any]):
    """Restore session state from a previously exported session dict."""
    settings: HeatmapSettings = data.get("heatmap_settings", {})
    st.session_state["heatmap_settings"].update(settings)

    if data.get("dataset"):
        st.session_state["dataset"] = dataset_from_dict(data["dataset"])
    # warnings and diagnostics belong to the previous upload
    st.session_state["schema_warnings"] = []
    st.session_state["diagnostics"] = []
    st.session_state["source_file"] = data.get("source_file")
    st.toast("Session imported.", icon="📥")
    st.rerun()


def processed_data_button():
    dataset: Dataset = st.session_state.get("dataset")
    if dataset is None:
        return
    st.download_button(
        label="Download Processed Data (XLSX)",
        data=df_to_excel_bytes(dataset_to_df(dataset)),
        file_name=EXPORT_FILE_NAME,
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        use_container_width=True,
    )


def session_export_button():
    if st.button("Export", use_container_width=True):
        session_data = serialize_session()
        st.download_button(
            label="Download JSON",
            data=json.dumps(session_data, indent=2),
            file_name="heatmap_session.json",
            mime="application/json",
            use_container_width=True
        )


@st.dialog("Import Session")
def session_import_dialog():
    uploaded = st.file_uploader("Upload session JSON", type="json")
    if uploaded:
        try:
            data = json.load(uploaded)
            deserialize_session(data)
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Failed to load session: %s", e, exc_info=True)
            st.error(f"Failed to load session: {e}")


def session_import_button():
    if st.button("Import", use_container_width=True):
        session_import_dialog()


@st.dialog("Restart Session")
def session_restart_dialog():
    st.error("This will clear all session data.")
    if st.button("Confirm Reset", type="primary"):
        st.session_state.clear()
        st.rerun()


def session_restart_button():
    if st.button("", type='primary', icon=":material/restart_alt:", use_container_width=True):
        session_restart_dialog()
