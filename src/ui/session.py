"""Per-browser-session game objects kept in ``st.session_state``."""

from __future__ import annotations

import time

import streamlit as st

from src.config.settings import get_settings
from src.database.store import build_store
from src.engine.economy import EconomyLedger, KeyValueStore
from src.engine.round import RoundStateMachine
from src.feedback.events import EventBus
from src.ui.themes.sounds import sfx_listener


@st.cache_resource(show_spinner=False)
def get_store() -> KeyValueStore:
    """The durable store, shared by every session in this process.

    One background writer thread serves all sessions.
    """
    return build_store(get_settings())


def get_machine() -> RoundStateMachine:
    """Return this session's state machine, creating it on first use.

    The economy is loaded from the durable store once per session.
    """
    ss = st.session_state
    if "machine" not in ss:
        settings = get_settings()
        ledger = EconomyLedger(get_store())
        ledger.load()

        bus = EventBus()
        if settings.enable_sounds:
            bus.subscribe(sfx_listener)

        ss["machine"] = RoundStateMachine(ledger, events=bus)
        ss["_last_tick"] = time.monotonic()
    return ss["machine"]


def advance_clock(machine: RoundStateMachine) -> None:
    """Rotate the log by the wall-clock time since the previous render."""
    now = time.monotonic()
    last = st.session_state.get("_last_tick", now)
    st.session_state["_last_tick"] = now
    machine.advance_elapsed(now - last, tick_rate=get_settings().tick_rate)


def reset_clock() -> None:
    """Forget elapsed time, e.g. after a pause in another phase."""
    st.session_state["_last_tick"] = time.monotonic()
