import logging
import streamlit as st

from heatmap_pipeline.colors import COLOR_MODES
from heatmap_pipeline.converters import dataset_to_df
from heatmap_pipeline.types import Dataset
from interface.backend.session_io import processed_data_button
from interface.backend.session_schema import HeatmapSettings
from interface.plotting.plot_heatmap import build_heatmap_figure, plotly_image_config

logger = logging.getLogger(__name__)

MODE_LABELS = {"linear": "Linear", "log": "Logarithmic", "quantile": "Quantile"}


def _plot_controls(settings: HeatmapSettings) -> HeatmapSettings:
    st.markdown("### Plot Configuration")
    col1, col2, col3 = st.columns(3)

    with col1:
        mode = st.radio(
            "Color Scale",
            COLOR_MODES,
            index=COLOR_MODES.index(settings["color_mode"]),
            format_func=MODE_LABELS.get,
            horizontal=True,
        )
    with col2:
        font_size = st.slider("Font Size", min_value=8, max_value=18, value=settings["font_size"])
        cell_height = st.slider("Row Height", min_value=16, max_value=48, value=settings["cell_height"])
    with col3:
        show_values = st.checkbox("Show values in cells", value=settings["show_values"])
        image_format = st.radio("Image Format", ["svg", "png"], horizontal=True)

    settings.update(
        color_mode=mode,
        font_size=font_size,
        cell_height=cell_height,
        show_values=show_values,
    )
    st.session_state["image_format"] = image_format
    return settings


def run():
    st.title("Clustered Heatmap of Gene Expression by Biological Process")

    dataset: Dataset = st.session_state.get("dataset")
    if dataset is None or not dataset.genes:
        st.info("Please import a gene expression spreadsheet first.")
        return

    for message in st.session_state.get("schema_warnings", []):
        st.warning(message)

    settings = _plot_controls(st.session_state["heatmap_settings"])

    try:
        fig = build_heatmap_figure(
            dataset,
            mode=settings["color_mode"],
            font_size=settings["font_size"],
            cell_height=settings["cell_height"],
            show_values=settings["show_values"],
        )
    except ValueError as e:
        logger.error("Could not build heatmap: %s", e, exc_info=True)
        st.error(f"Could not build heatmap: {e}")
        return

    st.plotly_chart(
        fig,
        use_container_width=False,
        config=plotly_image_config(st.session_state.get("image_format", "svg")),
    )
    st.caption("Use the camera icon in the chart toolbar to download the heatmap image.")

    processed_data_button()

    with st.expander("Show Processed Data"):
        st.dataframe(dataset_to_df(dataset), use_container_width=True, hide_index=True)

    st.markdown(
        """
        **Visualization Legend:**
        - Genes are grouped by biological process and sorted from lowest to highest log₂FC in the first comparison
        - Red indicates upregulation (positive log₂FC), blue indicates downregulation (negative log₂FC)
        - Black circles indicate statistical significance (p < 0.05); larger circles mark p < 0.01
        - Grey circles mark marginal significance (0.05 ≤ p < 0.1)
        """
    )


run()
