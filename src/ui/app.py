"""Knife Hit: Streamlit Application Entrypoint."""

from __future__ import annotations

import streamlit as st

from src.config.settings import configure_logging, get_settings


def main() -> None:
    """Application entrypoint. Must call ``st.set_page_config`` first."""
    st.set_page_config(
        page_title="Knife Hit",
        page_icon="🔪",
        layout="centered",
        initial_sidebar_state="collapsed",
    )

    if "_logging_ready" not in st.session_state:
        configure_logging(get_settings())
        st.session_state["_logging_ready"] = True

    from src.ui.themes import load_css, render_pending_sfx, render_sound_controls
    load_css()

    if "page" not in st.session_state:
        st.session_state["page"] = "home"

    # Page routing (lazy imports to avoid circular deps)
    page = st.session_state["page"]

    if page == "home":
        from src.ui.views.home import render_home_page
        render_home_page()
    elif page == "game":
        from src.ui.views.game import render_game_page
        render_game_page()
    else:
        st.session_state["page"] = "home"
        st.rerun()

    render_sound_controls()
    render_pending_sfx()


if __name__ == "__main__":
    main()
