"""Sound effects for Knife Hit.

Feedback events from the rules engine are mapped to short sound effects.
Audio data (base64-encoded WAV) is sent to the browser once per effect and
cached as JavaScript data URLs in ``window.parent._kh_audio``; later reruns
only send a tiny play command. If an effect's file is missing, the important
events (fail, win, coin) fall back to a toast instead.

The SFX preference is stored in the non-widget session-state key
``_sfx_pref`` so it survives Streamlit's widget-lifecycle cleanup.
"""

from __future__ import annotations

import base64
import logging
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any

import streamlit as st
import streamlit.components.v1 as components

from src.feedback.events import EventPayload, FeedbackEvent

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Asset paths and mappings
# ---------------------------------------------------------------------------

_SOUNDS_DIR = Path(__file__).resolve().parents[3] / "assets" / "sounds"

_SFX_FILES: dict[str, str] = {
    "throw": "throw.wav",
    "hit": "hit.wav",
    "apple": "apple.wav",
    "fail": "fail.wav",
    "win": "win.wav",
    "coin": "coin.wav",
}

# Later events in a single rerun win, except a fail or win is never
# drowned out by the coin chime that follows it.
_PRIORITY: dict[str, int] = {
    "throw": 0,
    "hit": 1,
    "coin": 2,
    "apple": 3,
    "win": 4,
    "fail": 4,
}

_TOASTS: dict[str, tuple[str, str]] = {
    "fail": ("Knife collision!", "💥"),
    "win": ("Stage cleared!", "🏆"),
    "coin": ("Coins earned", "🪙"),
}

_missing_files: set[str] = set()

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@st.cache_data(show_spinner=False)
def _load_audio_b64(filename: str) -> str | None:
    """Read an audio file and return its base64-encoded string.

    Returns ``None`` if the file doesn't exist.
    """
    path = _SOUNDS_DIR / filename
    if not path.exists():
        return None
    return base64.b64encode(path.read_bytes()).decode("ascii")


def _notify_without_audio(name: str) -> None:
    """Show a toast for an effect whose audio file is missing."""
    if name not in _missing_files:
        _missing_files.add(name)
        logger.warning("Sound file for %r not found in %s", name, _SOUNDS_DIR)
    toast = _TOASTS.get(name)
    if toast is not None:
        st.toast(toast[0], icon=toast[1])


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def play_sfx(name: str, state: MutableMapping[str, Any] | None = None) -> None:
    """Queue a sound effect to be played on the next render cycle.

    The actual playback happens in :func:`render_pending_sfx`.
    """
    state = st.session_state if state is None else state
    if not state.get("_sfx_pref", True):
        return
    if name not in _SFX_FILES:
        return
    pending = state.get("_sfx_pending")
    if pending and _PRIORITY[pending] > _PRIORITY[name]:
        return
    state["_sfx_pending"] = name


def sfx_listener(payload: EventPayload, state: MutableMapping[str, Any] | None = None) -> None:
    """Feedback listener that turns engine events into sound effects."""
    state = st.session_state if state is None else state
    play_sfx(payload.event.value, state)
    if payload.event is FeedbackEvent.COIN:
        state["_coin_popup"] = payload.data.get("amount", 0)


def _sync_sfx_pref() -> None:
    st.session_state["_sfx_pref"] = st.session_state["_sfx_widget"]


def render_sound_controls() -> None:
    """Render the SFX toggle in the sidebar."""
    with st.sidebar:
        st.session_state.setdefault("_sfx_pref", True)
        st.toggle(
            "Sound Effects",
            value=st.session_state["_sfx_pref"],
            key="_sfx_widget",
            on_change=_sync_sfx_pref,
        )


def render_pending_sfx() -> None:
    """Play the queued sound effect, if any, and clear the queue."""
    name = st.session_state.pop("_sfx_pending", None)
    if not name or not st.session_state.get("_sfx_pref", True):
        return

    loaded: set[str] = st.session_state.get("_audio_loaded", set())
    preload = ""
    if name not in loaded:
        b64 = _load_audio_b64(_SFX_FILES[name])
        if b64 is None:
            _notify_without_audio(name)
            return
        preload = f"kh['{name}'] = 'data:audio/wav;base64,{b64}';\n"
        loaded.add(name)
        st.session_state["_audio_loaded"] = loaded

    html = (
        "<script>\n"
        "(function() {\n"
        "  try {\n"
        "    var p = window.parent;\n"
        "    if (!p._kh_audio) p._kh_audio = {};\n"
        "    var kh = p._kh_audio;\n"
        + preload
        + f"    if (kh['{name}']) new p.Audio(kh['{name}']).play().catch(function(){{}});\n"
        "  } catch(e) { console.warn('KH audio:', e); }\n"
        "})();\n"
        "</script>"
    )
    components.html(html, height=0)
