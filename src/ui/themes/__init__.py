"""Arcade theme for Knife Hit."""

from src.ui.themes.animations import load_css
from src.ui.themes.sounds import (
    play_sfx,
    render_pending_sfx,
    render_sound_controls,
    sfx_listener,
)

__all__ = [
    "load_css",
    "play_sfx",
    "render_pending_sfx",
    "render_sound_controls",
    "sfx_listener",
]
