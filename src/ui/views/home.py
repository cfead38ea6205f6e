"""Home page: title, economy, daily reward and the start button."""

from __future__ import annotations

import streamlit as st

from src.ui.session import get_machine, reset_clock
from src.ui.themes.animations import render_coin_popup


def render_home_page() -> None:
    """Render the home / landing page."""
    machine = get_machine()
    ledger = machine.economy
    economy = ledger.state

    st.title("Knife Hit")
    st.caption("Stick every knife. Don't hit the others.")

    col1, col2 = st.columns(2)
    col1.metric("Coins", economy.coin_balance)
    col2.metric("High score", economy.high_score)

    reward = ledger.pending_daily_reward()
    if ledger.read_failed:
        st.info("Saved progress could not be loaded. The daily reward is unavailable for now.")
    elif reward is not None:
        with st.container(border=True):
            st.subheader(f"Daily reward: day {economy.current_streak_day}")
            st.write(f"Claim **{reward} coins**. Come back tomorrow to keep the streak going!")
            if st.button("Claim", key="claim_daily"):
                ledger.claim_daily_reward()
                st.session_state["_coin_popup"] = reward
                st.rerun()

    render_coin_popup()

    if st.button("Play", type="primary", use_container_width=True):
        machine.restart()
        reset_clock()
        st.session_state["page"] = "game"
        st.rerun()

    with st.expander("How to play"):
        st.markdown(
            """
- Tap **Throw** to send a knife into the spinning log
- A knife that lands within **18°** of another knife ends the round
- Hit an apple for **+5** score and **+5** coins
- Every knife that sticks scores **+10**
- Clear a stage for **+50** (bosses pay more)
- Bosses wait on stages **5, 10, 15, 20 and 25**
- Failed? Watch an ad once per round to continue with **3** knives
"""
        )
