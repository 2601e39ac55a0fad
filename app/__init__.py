"""Streamlit application package for PrimoLedger."""

from .main import main

__all__ = ["main"]
