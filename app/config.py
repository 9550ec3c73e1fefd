from __future__ import annotations

from dataclasses import replace

import streamlit as st

from masonry_canvas.config import CanvasConfig

VIEW_WIDTH = 960
VIEW_HEIGHT = 540


def set_default_config() -> None:
    if "config" not in st.session_state:
        st.session_state["config"] = CanvasConfig(seed=0, max_duplicate_retries=8)


def get_config_from_widgets() -> CanvasConfig:
    cfg: CanvasConfig = st.session_state["config"]
    st.subheader("Grid")
    cell_size = st.slider("Cell size (px)", 20, 120, cfg.cell_size, key="cell_size")
    min_units = st.slider("Minimum tile side (cells)", 1, 8, cfg.min_units, key="min_units")
    padding = st.slider("Gutter (px)", 0, 40, cfg.padding, key="padding")
    seed = st.number_input("Seed", min_value=0, value=cfg.seed or 0, key="seed")

    st.subheader("Animation")
    fade_step = st.slider("Fade step", 0.005, 0.2, cfg.fade_step, key="fade_step")
    pan_smoothing = st.slider(
        "Pan smoothing", 0.05, 1.0, cfg.pan_smoothing, key="pan_smoothing"
    )
    return replace(
        cfg,
        cell_size=cell_size,
        min_units=min_units,
        padding=padding,
        seed=int(seed),
        fade_step=fade_step,
        pan_smoothing=pan_smoothing,
    )
