"""Scoreboard component: stage, score, knives and coins."""

from __future__ import annotations

import streamlit as st

from src.engine.base import EconomyState, RoundState


def render_scoreboard(state: RoundState, economy: EconomyState) -> None:
    """Render the heads-up display above the board.

    Args:
        state: Snapshot of the live round.
        economy: Current coin balance and high score.
    """
    stage_label = f"Stage {state.stage_number}"
    if state.is_boss_round and state.active_boss is not None:
        stage_label += f" &mdash; {state.active_boss.name}"

    knives = "&#128298;" * max(state.knives_remaining, 0)

    st.markdown(
        '<div class="hud">'
        f"<span>{stage_label}</span>"
        f"<span>Score {state.score}</span>"
        f'<span class="coins">&#9679; {economy.coin_balance}</span>'
        f"<span>Best {economy.high_score}</span>"
        "</div>"
        f'<div class="hud"><span>{knives}</span>'
        f"<span>Apples {state.targets_hit_count}</span></div>",
        unsafe_allow_html=True,
    )
