"""Game page: boss intro, the spinning log, and the round-end panels."""

from __future__ import annotations

import time

import streamlit as st

from src.engine.base import Phase
from src.engine.round import RoundStateMachine
from src.ui.components.board import burst_progress, render_board
from src.ui.components.scoreboard import render_scoreboard
from src.ui.session import advance_clock, get_machine, reset_clock
from src.ui.themes.animations import (
    render_boss_overlay,
    render_coin_popup,
    render_fail_overlay,
    render_win_overlay,
)
from src.ui.themes.sounds import render_pending_sfx

_REFRESH_SECONDS = 0.1


def render_game_page() -> None:
    """Render the main game page."""
    machine = get_machine()
    phase = machine.phase

    if phase is Phase.READY:
        st.session_state["page"] = "home"
        st.rerun()
        return

    if phase is Phase.BOSS_INTRO:
        _render_boss_intro(machine)
    elif phase is Phase.PLAYING:
        _render_playing()
    elif phase is Phase.FAILED:
        _render_failed(machine)
    elif phase is Phase.WIN:
        _render_win(machine)


def _render_boss_intro(machine: RoundStateMachine) -> None:
    boss = machine.active_boss
    if boss is None:
        return
    render_boss_overlay(
        boss.name,
        boss.color,
        boss.bg_color,
        f"{boss.knife_budget} knives &middot; {boss.target_count} apples &middot; "
        f"reward {boss.reward_coins} coins",
    )
    if st.button("Fight!", type="primary", use_container_width=True):
        machine.confirm_boss_start()
        reset_clock()
        st.rerun()


@st.fragment(run_every=_REFRESH_SECONDS)
def _render_playing() -> None:
    """Board fragment, re-run on a timer so the log keeps spinning."""
    machine = get_machine()
    advance_clock(machine)

    if machine.phase is not Phase.PLAYING:
        st.rerun()
        return

    state = machine.snapshot()
    bursts = burst_progress(
        st.session_state.setdefault("_apple_bursts", {}), state, time.monotonic()
    )
    render_scoreboard(state, machine.economy.state)
    render_board(state, machine.profile, bursts)
    render_coin_popup()
    render_pending_sfx()

    if machine.is_out_of_knives:
        st.warning("Out of knives!")
        if st.button("Restart", use_container_width=True):
            machine.restart()
            reset_clock()
            st.rerun()
        return

    if st.button("Throw", type="primary", use_container_width=True, key="throw"):
        machine.throw()
        if machine.phase is not Phase.PLAYING:
            st.rerun()


def _render_failed(machine: RoundStateMachine) -> None:
    render_scoreboard(machine.snapshot(), machine.economy.state)
    render_fail_overlay(machine.score)

    col1, col2 = st.columns(2)
    if machine.can_continue and col1.button("Watch ad to continue", use_container_width=True):
        if machine.continue_with_ad():
            reset_clock()
        st.rerun()
    if col2.button("Restart", type="primary", use_container_width=True):
        machine.restart()
        reset_clock()
        st.rerun()
    if st.button("Menu"):
        st.session_state["page"] = "home"
        st.rerun()


def _render_win(machine: RoundStateMachine) -> None:
    render_scoreboard(machine.snapshot(), machine.economy.state)
    render_win_overlay(machine.stage_number, machine.stage_reward)
    render_coin_popup()

    col1, col2 = st.columns(2)
    if col1.button(f"Watch ad for +{machine.stage_reward}", use_container_width=True):
        machine.double_reward_with_ad()
        reset_clock()
        st.rerun()
    if col2.button("Next stage", type="primary", use_container_width=True):
        machine.advance_stage()
        reset_clock()
        st.rerun()
