"""Page renderers for Knife Hit."""

from src.ui.views.home import render_home_page
from src.ui.views.game import render_game_page

__all__ = ["render_home_page", "render_game_page"]
