# interface/components/excel_dialog.py

import streamlit as st

@st.dialog("Import Expression Spreadsheet", width="large")
def show_excel_import_dialog():
    uploaded = st.file_uploader(
        "Upload a gene expression table (.xlsx/.csv)",
        type=["xlsx", "csv"],
        accept_multiple_files=False,
    )

    if uploaded:
        st.session_state["uploaded_expression_file"] = uploaded
        st.success(f"`{uploaded.name}` stored for import.")

    if st.button("Confirm upload"):
        st.rerun()
