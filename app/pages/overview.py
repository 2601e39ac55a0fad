"""Overview dashboard page layout."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from app.layout import card
from core.formatting import format_rate_source
from core.models import LedgerData, LedgerSummary
from visualization import build_balance_chart


def _render_holdings_card(summary: LedgerSummary) -> None:
    st.metric("Current balance", f"{summary['current_balance']:,.0f}")
    metric_cols = st.columns((1, 1, 1))
    metric_cols[0].metric("Pulls available", f"{summary['available_pulls']:,.1f}")
    metric_cols[1].metric(
        "Daily rate",
        f"{summary['daily_rate']:,.0f}",
        help=format_rate_source(summary["rate_source"]),
    )
    pity_days = summary["days_until_pity"]
    metric_cols[2].metric("Days to pity", "—" if pity_days is None else f"{pity_days}")

    holdings = summary["holdings"]
    if holdings is not None:
        st.caption(
            f"{holdings.secondary_fate_count} intertwined · {holdings.standard_fate_count} acquaint · "
            f"{holdings.starglitter:,} starglitter · {holdings.stardust:,} stardust"
        )

    last_snapshot = summary["last_snapshot"]
    if last_snapshot is not None:
        st.caption(f"Last snapshot {pd.Timestamp(last_snapshot):%d %b %Y %H:%M}")


def _render_projection_caption(summary: LedgerSummary) -> None:
    if summary["rate_source"] == "none":
        st.warning("No income rate available. Enter a manual daily rate in the sidebar.")
        return
    st.caption(
        f"Projected in {summary['projection_days']} days: {summary['projected_balance']:,.0f} "
        f"({summary['projected_pulls']:,.1f} pulls, rate {format_rate_source(summary['rate_source'])})"
    )


def render_page(data: LedgerData, show_purchases: bool = True) -> None:
    """Render the overview dashboard page."""

    summary = data["summary"]
    st.title("Overview")

    left, right = st.columns([1, 2], gap="medium")
    with left:
        with card("Holdings", suffix="Latest snapshot"):
            _render_holdings_card(summary)
    with right:
        with card("Balance history", suffix="Reconstructed"):
            chart = build_balance_chart(data["chart_df"], show_purchases=show_purchases)
            st.plotly_chart(chart, use_container_width=True)
            _render_projection_caption(summary)

    with card("Insights"):
        items = "".join(f"<li>{item}</li>" for item in data["insights"])
        st.markdown(f"<ul class='pl-insights'>{items}</ul>", unsafe_allow_html=True)


__all__ = ["render_page"]
