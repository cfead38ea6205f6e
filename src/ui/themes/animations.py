"""CSS injection and HTML overlay helpers for the arcade theme."""

import streamlit as st

_CSS = """
.hud { display: flex; justify-content: space-between; font-weight: 600;
       padding: 0.4rem 0.8rem; border-radius: 8px; background: #2b1d14; color: #f5deb3; }
.hud .coins { color: #ffd700; }
.board { display: flex; justify-content: center; }
.overlay { text-align: center; padding: 1rem; border-radius: 10px; margin: 0.5rem 0; }
.overlay.fail { background: #5c1a1a; color: #ffcdd2; animation: shake 0.4s; }
.overlay.win { background: #1b5e20; color: #c8e6c9; }
.overlay.boss { color: #fff; }
.coin-popup { text-align: center; color: #ffd700; font-size: 1.4rem; font-weight: 700;
              animation: rise 0.6s ease-out forwards; }
@keyframes shake { 0%, 100% { transform: translateX(0); }
                   25% { transform: translateX(-6px); } 75% { transform: translateX(6px); } }
@keyframes rise { from { opacity: 1; transform: translateY(0); }
                  to { opacity: 0; transform: translateY(-24px); } }
"""


def load_css() -> None:
    """Inject the theme CSS into the Streamlit app."""
    st.markdown(f"<style>{_CSS}</style>", unsafe_allow_html=True)


def render_fail_overlay(score: int) -> None:
    """Render the knife-collision overlay."""
    st.markdown(
        '<div class="overlay fail">'
        "<h2>CLANG!</h2>"
        f"<p>Your knife hit another knife. Score: {score}</p>"
        "</div>",
        unsafe_allow_html=True,
    )


def render_win_overlay(stage_number: int, reward: int) -> None:
    """Render the stage-cleared overlay."""
    st.markdown(
        '<div class="overlay win">'
        f"<h2>Stage {stage_number} cleared!</h2>"
        f"<p>+{reward} coins</p>"
        "</div>",
        unsafe_allow_html=True,
    )


def render_boss_overlay(name: str, color: str, bg_color: str, details: str) -> None:
    """Render the boss introduction card in the boss's colours."""
    st.markdown(
        f'<div class="overlay boss" style="background: linear-gradient({color}, {bg_color});">'
        f"<h2>BOSS: {name}</h2>"
        f"<p>{details}</p>"
        "</div>",
        unsafe_allow_html=True,
    )


def render_coin_popup() -> None:
    """Show the most recent coin gain once, then forget it."""
    amount = st.session_state.pop("_coin_popup", 0)
    if amount:
        st.markdown(f'<div class="coin-popup">+{amount} coins</div>', unsafe_allow_html=True)
