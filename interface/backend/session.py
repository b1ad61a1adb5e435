# interface/backend/session.py

import streamlit as st

def initialize_session_state():
    defaults = {
        "heatmap_settings": {
            "color_mode": "linear",
            "font_size": 11,
            "cell_height": 30,
            "show_values": True,
        },
        "dataset": None,
        "diagnostics": [],
        "schema_warnings": [],
        "source_file": None,
    }

    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value
