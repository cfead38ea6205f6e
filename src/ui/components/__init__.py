"""UI components for Knife Hit."""

from src.ui.components.board import render_board
from src.ui.components.scoreboard import render_scoreboard

__all__ = [
    "render_board",
    "render_scoreboard",
]
