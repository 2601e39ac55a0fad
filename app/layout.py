"""Shared layout primitives for the PrimoLedger Streamlit app."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable

import streamlit as st

from core.economy import EconomyConfig


@dataclass(frozen=True)
class NavigationLink:
    slug: str
    label: str
    enabled: bool = True


NAV_LINKS: tuple[NavigationLink, ...] = (
    NavigationLink("overview", "Dashboard", True),
    NavigationLink("history", "History", True),
)

LOOKBACK_OPTIONS: tuple[int, ...] = (30, 60, 90, 180)
PROJECTION_OPTIONS: tuple[int, ...] = (21, 42, 63, 90)
RATE_WINDOW_OPTIONS: tuple[int, ...] = (14, 30, 60, 90)


@dataclass(frozen=True)
class LedgerControls:
    lookback_days: int
    projection_days: int
    rate_lookback_days: int
    manual_rate: float | None
    show_purchases: bool


def inject_css() -> None:
    """Inject card and navigation styling into the Streamlit app."""

    st.markdown(
        """
        <style>
          .block-container { max-width: 1180px; padding-top: 2rem; }

          .pl-nav { display: flex; align-items: baseline; gap: 2.5rem; padding: 0.75rem 0 1.25rem; }
          .pl-nav__brand { font-size: 1.4rem; font-weight: 700; color: #0369A1; }
          .pl-nav__brand small { color: #CA8A04; font-weight: 600; margin-left: 0.35rem; }
          .pl-nav__links { display: flex; gap: 1.5rem; }
          .pl-nav__link, .pl-nav__link:visited { color: #64748B; font-weight: 600; text-decoration: none; }
          .pl-nav__link.is-active { color: #0EA5E9; border-bottom: 2px solid #0EA5E9; }

          .pl-card-anchor { display: none; }
          [data-testid="stVerticalBlock"]:has(> .pl-card-anchor) {
            border: 1px solid #E2E8F0;
            border-radius: 10px;
            padding: 14px 16px;
            margin-bottom: 14px;
            background: #FFFFFF;
          }
          .pl-card__head { display: flex; justify-content: space-between; font-weight: 600; color: #0F172A; }
          .pl-chip { font-size: 11px; padding: 1px 8px; border-radius: 999px; background: #FEF9C3; color: #854D0E; }

          .pl-insights { margin: 0; padding-left: 1rem; color: #334155; }
          .pl-insights li { margin-bottom: 0.3rem; }
        </style>
        """,
        unsafe_allow_html=True,
    )


@contextmanager
def card(title: str, suffix: str | None = None):
    """Render content inside a reusable PrimoLedger card."""

    chip_html = f'<span class="pl-chip">{suffix}</span>' if suffix else ""
    container = st.container()
    with container:
        st.markdown('<div class="pl-card-anchor"></div>', unsafe_allow_html=True)
        st.markdown(
            f'<div class="pl-card__head"><span>{title}</span>{chip_html}</div>',
            unsafe_allow_html=True,
        )
        yield


def render_navbar(active_page: str) -> None:
    link_markup: list[str] = []
    for link in NAV_LINKS:
        css_class = "pl-nav__link" + (" is-active" if link.slug == active_page else "")
        link_markup.append(
            f'<a class="{css_class}" href="?page={link.slug}" target="_self">{link.label}</a>'
        )

    st.markdown(
        f"""
        <nav class="pl-nav">
            <div class="pl-nav__brand">PrimoLedger<small>✦</small></div>
            <div class="pl-nav__links">{''.join(link_markup)}</div>
        </nav>
        """,
        unsafe_allow_html=True,
    )


def _option_index(options: tuple[int, ...], preferred: int) -> int:
    return options.index(preferred) if preferred in options else 0


def render_sidebar_controls(economy: EconomyConfig) -> LedgerControls:
    """Render the window selectors and optional manual rate."""

    with st.sidebar:
        st.markdown("### Windows")
        lookback = st.selectbox(
            "History",
            LOOKBACK_OPTIONS,
            index=_option_index(LOOKBACK_OPTIONS, economy.lookback_days),
            format_func=lambda days: f"{days} days",
        )
        projection = st.selectbox(
            "Projection",
            PROJECTION_OPTIONS,
            index=_option_index(PROJECTION_OPTIONS, economy.projection_days),
            format_func=lambda days: f"{days} days",
        )
        rate_window = st.selectbox(
            "Rate window",
            RATE_WINDOW_OPTIONS,
            index=_option_index(RATE_WINDOW_OPTIONS, economy.rate_lookback_days),
            format_func=lambda days: f"{days} days",
        )
        st.markdown("---")
        manual_rate = st.number_input("Manual daily rate", min_value=0.0, value=None, step=10.0)
        show_purchases = st.checkbox("Show purchases line", value=True)

    return LedgerControls(
        lookback_days=int(lookback),
        projection_days=int(projection),
        rate_lookback_days=int(rate_window),
        manual_rate=manual_rate,
        show_purchases=show_purchases,
    )


def determine_active_page(valid_pages: Iterable[str]) -> str:
    """Determine the active page from the query params or session state."""

    params = st.query_params
    default_page = st.session_state.get("active_page", "overview")
    raw_page = params.get("page", default_page)
    if isinstance(raw_page, list):
        raw_page = raw_page[0]

    page = raw_page if raw_page in set(valid_pages) else "overview"
    st.session_state["active_page"] = page
    return page


__all__ = [
    "LedgerControls",
    "NavigationLink",
    "NAV_LINKS",
    "card",
    "determine_active_page",
    "inject_css",
    "render_navbar",
    "render_sidebar_controls",
]
