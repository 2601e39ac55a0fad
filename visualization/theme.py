"""Plotly colour tokens for the PrimoLedger charts."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeTokens:
    day_format: str = "%d %b %Y"
    font_family: str = "Inter"
    muted_text: str = "#64748B"
    gridline: str = "rgba(100, 116, 139, 0.2)"
    balance_line: str = "#0EA5E9"
    balance_fill: str = "rgba(14, 165, 233, 0.10)"
    purchases_line: str = "#A855F7"
    projection_line: str = "#94A3B8"
    snapshot_marker: str = "#EAB308"
    marker_outline: str = "#FFFFFF"
    ground_truth_bar: str = "#0EA5E9"
    estimated_bar: str = "#CBD5E1"
    trend_line: str = "#10B981"
    average_line: str = "#F59E0B"
    earned_bar: str = "#0EA5E9"
    purchased_bar: str = "#A855F7"
    spent_bar: str = "#F43F5E"


_TOKENS = ThemeTokens()


def theme_tokens() -> ThemeTokens:
    return _TOKENS
