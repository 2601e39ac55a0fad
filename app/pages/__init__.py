"""Page modules for the PrimoLedger Streamlit application."""

from .history import render_page as render_history_page
from .overview import render_page as render_overview_page

__all__ = [
    "render_history_page",
    "render_overview_page",
]
