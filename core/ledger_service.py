"""Core logic for assembling PrimoLedger dashboard data."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from analytics.days import build_day_index, resolve_today
from analytics.forecasting import (
    build_chart_data,
    build_chart_frame,
    days_until_pity,
    projected_pulls,
)
from analytics.rates import estimate_daily_rate, resolve_effective_rate
from analytics.reconstruction import build_historical_data
from analytics.spending import calculate_available_pulls, holdings_since
from analytics.transactions import build_transaction_log
from analytics.trends import (
    build_trend_frame,
    calculate_income_rate_trend,
    summarize_trend,
)
from core.data_loader import load_ledger
from core.economy import DEFAULT_ECONOMY, EconomyConfig
from core.formatting import build_insights
from core.models import LedgerData, LedgerSummary, PullRecord, PurchaseEntry, Snapshot

__all__ = ["build_ledger_data", "prepare_ledger_data"]

logger = logging.getLogger(__name__)


def build_ledger_data(
    snapshots: Sequence[Snapshot],
    pulls: Sequence[PullRecord],
    purchases: Sequence[PurchaseEntry],
    economy: EconomyConfig = DEFAULT_ECONOMY,
    *,
    today: Optional[date] = None,
    lookback_days: Optional[int] = None,
    projection_days: Optional[int] = None,
    rate_lookback_days: Optional[int] = None,
    manual_rate: Optional[float] = None,
) -> LedgerData:
    """Run every ledger calculation over one consistent set of records."""

    today = resolve_today(today)
    lookback = economy.lookback_days if lookback_days is None else lookback_days
    horizon = economy.projection_days if projection_days is None else projection_days
    rate_window = economy.rate_lookback_days if rate_lookback_days is None else rate_lookback_days

    index = build_day_index(snapshots, pulls, purchases, economy)

    historical = build_historical_data(
        snapshots, pulls, purchases, economy, lookback, today, index=index
    )
    estimate = estimate_daily_rate(snapshots, pulls, economy, rate_window, today, index=index)
    rate = resolve_effective_rate(estimate, manual_rate)
    logger.debug("Daily rate %.1f from %s", rate.daily_rate, rate.source)

    chart_points = build_chart_data(historical, rate.daily_rate, horizon, today)
    trend_points = calculate_income_rate_trend(snapshots, pulls, economy, today, index=index)
    trend_summary = summarize_trend(trend_points)

    transaction_log = build_transaction_log(snapshots, pulls, purchases, economy, index=index)

    latest_point = historical[-1] if historical else None
    current_balance = latest_point.balance if latest_point else 0.0
    latest_snapshot = index.latest_snapshot
    holdings = holdings_since(latest_snapshot, pulls, index.purchases, economy)

    summary: LedgerSummary = {
        "current_balance": current_balance,
        "current_balance_with_purchases": latest_point.balance_with_purchases if latest_point else 0.0,
        "last_snapshot": latest_snapshot.timestamp if latest_snapshot else None,
        "holdings": holdings,
        "available_pulls": calculate_available_pulls(holdings, economy),
        "daily_rate": rate.daily_rate,
        "rate_source": rate.source,
        "estimated_rate": estimate.daily_rate,
        "projection_days": horizon,
        "projected_balance": max(0.0, current_balance + rate.daily_rate * horizon),
        "projected_pulls": projected_pulls(current_balance, rate.daily_rate, horizon, economy),
        "days_until_pity": days_until_pity(rate.daily_rate, economy),
        "total_costing_pulls": len(index.costing_pulls),
    }

    return {
        "chart_df": build_chart_frame(chart_points),
        "trend_df": build_trend_frame(trend_points),
        "historical": historical,
        "chart_points": chart_points,
        "trend_points": trend_points,
        "trend_summary": trend_summary,
        "transaction_log": transaction_log,
        "rate": rate,
        "summary": summary,
        "insights": build_insights(summary=summary, trend=trend_summary, economy=economy),
    }


def prepare_ledger_data(
    data_dir: str | Path,
    economy: EconomyConfig = DEFAULT_ECONOMY,
    **options,
) -> LedgerData:
    """Load the CSV ledger under ``data_dir`` and build dashboard data from it.

    Keyword options are forwarded to :func:`build_ledger_data`.
    """

    records = load_ledger(str(Path(data_dir)))
    if not records.snapshots:
        logger.warning("No snapshots in %s; history cannot be reconstructed", data_dir)

    return build_ledger_data(
        records.snapshots,
        records.pulls,
        records.purchases,
        economy,
        **options,
    )
