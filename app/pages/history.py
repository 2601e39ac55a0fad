"""History page: banner-period trends, income buckets and the transaction log."""

from __future__ import annotations

from datetime import date

import pandas as pd
import streamlit as st

from analytics.transactions import filter_transaction_log
from analytics.trends import (
    IncomeBucketFilters,
    bucket_income_entries,
    build_bucket_frame,
    build_source_frame,
)
from app.layout import card
from core.economy import EconomyConfig
from core.formatting import format_trend_change
from core.models import LedgerData, PurchaseEntry, TransactionLogEntry
from visualization import build_income_bucket_chart, build_income_trend_chart

_LOG_FILTERS = {
    "all": "All",
    "snapshot": "Snapshots",
    "purchase": "Ledger entries",
    "pull_spending": "Pull spending",
}
_LOG_PAGE_SIZE = 50


def _render_trend_card(data: LedgerData) -> None:
    trend = data["trend_summary"]
    cols = st.columns(3)
    cols[0].metric("Average daily rate", f"{trend['average_rate']:,.0f}")
    if trend["early_average"] is not None and trend["recent_average"] is not None:
        cols[1].metric("Early periods", f"{trend['early_average']:,.0f}")
        cols[2].metric(
            "Recent periods",
            f"{trend['recent_average']:,.0f}",
            format_trend_change(trend["change_percent"]),
        )
    chart = build_income_trend_chart(data["trend_df"], trend["average_rate"] if not data["trend_df"].empty else None)
    st.plotly_chart(chart, use_container_width=True)
    st.caption("Grey bars are estimated from pulls; blue bars come from snapshot deltas.")


def _entry_day_bounds(entries: tuple[PurchaseEntry, ...]) -> tuple[date, date]:
    if not entries:
        today = date.today()
        return today, today
    days = [entry.timestamp.date() for entry in entries]
    return min(days), max(days)


def _render_buckets_card(entries: tuple[PurchaseEntry, ...], economy: EconomyConfig) -> None:
    first_day, last_day = _entry_day_bounds(entries)
    cols = st.columns(5)
    interval = cols[0].selectbox("Interval", ("week", "month"))
    source = cols[1].selectbox("Source", ("all",) + IncomeBucketFilters().known_sources)
    start_date = cols[2].date_input("From", value=first_day)
    end_date = cols[3].date_input("To", value=last_day)
    include_purchases = cols[4].checkbox("Include purchases", value=True)

    filters = IncomeBucketFilters(
        interval=interval,
        start_date=start_date,
        end_date=end_date,
        source=source,
        include_purchases=include_purchases,
    )
    buckets = bucket_income_entries(entries, filters, economy)

    totals = {key: sum(bucket[key] for bucket in buckets) for key in ("earned", "purchased", "spent", "total")}
    metric_cols = st.columns(4)
    metric_cols[0].metric("Earned", f"{totals['earned']:,.0f}")
    metric_cols[1].metric("Purchased", f"{totals['purchased']:,.0f}")
    metric_cols[2].metric("Spent", f"{totals['spent']:,.0f}")
    metric_cols[3].metric("Net", f"{totals['total']:,.0f}")

    st.plotly_chart(build_income_bucket_chart(build_bucket_frame(buckets)), use_container_width=True)
    with st.expander("Breakdown by source"):
        source_frame = build_source_frame(buckets)
        if source_frame.empty:
            st.caption("No ledger entries match these filters.")
        else:
            st.dataframe(source_frame, use_container_width=True)


def _log_frame(entries: list[TransactionLogEntry]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "When": entry.timestamp.strftime("%Y-%m-%d %H:%M"),
                "Type": _LOG_FILTERS.get(entry.kind, entry.kind),
                "Amount": entry.amount,
                "Description": entry.description,
                "Notes": entry.notes,
            }
            for entry in entries
        ],
        columns=["When", "Type", "Amount", "Description", "Notes"],
    )


def _render_log_card(entries: list[TransactionLogEntry]) -> None:
    kind = st.selectbox("Show", list(_LOG_FILTERS), format_func=_LOG_FILTERS.get)
    visible = filter_transaction_log(entries, kind, limit=_LOG_PAGE_SIZE)
    st.caption(f"{len(filter_transaction_log(entries, kind))} entries")
    st.dataframe(_log_frame(visible), use_container_width=True, hide_index=True)


def render_page(data: LedgerData, entries: tuple[PurchaseEntry, ...], economy: EconomyConfig) -> None:
    """Render the history page."""

    st.title("History")
    with card("Income per banner", suffix=f"{economy.banner_period_days}-day periods"):
        _render_trend_card(data)
    with card("Income timeline"):
        _render_buckets_card(entries, economy)
    with card("Transaction log"):
        _render_log_card(data["transaction_log"])


__all__ = ["render_page"]
