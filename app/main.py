import time
from dataclasses import replace

import streamlit as st
from pyrsistent import thaw

from config import VIEW_HEIGHT, VIEW_WIDTH, get_config_from_widgets, set_default_config
from masonry_canvas.config import CanvasConfig
from masonry_canvas.renderer.texture import CanvasRenderer
from masonry_canvas.session import Session

PAN_STEP = 200
FRAMES_PER_RUN = 90
FRAME_SECONDS = 1 / 30

st.set_page_config(layout="wide", page_title="Masonry Canvas")


def make_session(config: CanvasConfig) -> None:
    previous = st.session_state.get("session")
    if previous is not None:
        previous.close()
    st.session_state["session"] = Session(VIEW_WIDTH, VIEW_HEIGHT, config)
    st.session_state["renderer"] = CanvasRenderer(
        VIEW_WIDTH, VIEW_HEIGHT, padding=config.padding
    )


# --------- Main App ---------

set_default_config()
tab_canvas, tab_config, tab_state = st.tabs(["Canvas", "Config", "State"])

with tab_config:
    config: CanvasConfig = get_config_from_widgets()
    if st.button("Save", key="save_config_btn", use_container_width=True):
        st.session_state["config"] = config
        make_session(config)
    st.divider()

if "session" not in st.session_state:
    make_session(st.session_state["config"])

session: Session = st.session_state["session"]
renderer: CanvasRenderer = st.session_state["renderer"]

with tab_canvas:
    left_col, middle_col = st.columns([0.2, 0.8])

    with left_col:
        _, up_col, _ = st.columns([1, 1, 1])
        with up_col:
            if st.button("⬆️", key="up_btn", use_container_width=True):
                session.pan.pan_by(0, PAN_STEP)
        left_btn, down_btn, right_btn = st.columns([1, 1, 1])
        with left_btn:
            if st.button("⬅️", key="left_btn", use_container_width=True):
                session.pan.pan_by(PAN_STEP, 0)
        with down_btn:
            if st.button("⬇️", key="down_btn", use_container_width=True):
                session.pan.pan_by(0, -PAN_STEP)
        with right_btn:
            if st.button("➡️", key="right_btn", use_container_width=True):
                session.pan.pan_by(-PAN_STEP, 0)

        if st.button("🔁 New Grid", key="generate_btn", use_container_width=True):
            cfg: CanvasConfig = st.session_state["config"]
            st.session_state["config"] = replace(cfg, seed=(cfg.seed or 0) + 1)
            make_session(st.session_state["config"])
            session = st.session_state["session"]
            renderer = st.session_state["renderer"]

        summary = st.empty()

    with middle_col:
        placeholder = st.empty()
        for _ in range(FRAMES_PER_RUN):
            state = session.tick()
            placeholder.image(renderer.render(state, session.resources).convert("RGB"))
            summary.json(thaw(state.description))
            time.sleep(FRAME_SECONDS)

with tab_state:
    st.json(thaw(session.state.description), expanded=1)
