"""Formatting helpers for PrimoLedger summaries."""

from __future__ import annotations

from typing import Optional

from analytics.trends import TrendSummary
from core.economy import EconomyConfig
from core.models import LedgerSummary, RateSource

__all__ = ["build_insights", "format_rate_source", "format_trend_change"]

_RATE_SOURCE_LABELS: dict[str, str] = {
    "snapshots": "from snapshot history",
    "pulls": "estimated from pull history",
    "manual": "manual override",
    "none": "no data yet",
}


def format_rate_source(source: RateSource) -> str:
    return _RATE_SOURCE_LABELS.get(source, source)


def format_trend_change(change_percent: Optional[float]) -> str:
    if change_percent is None:
        return "Not enough periods to compare"
    sign = "+" if change_percent >= 0 else ""
    return f"{sign}{change_percent:.0f}% vs early periods"


def build_insights(
    *,
    summary: LedgerSummary,
    trend: TrendSummary,
    economy: EconomyConfig,
) -> list[str]:
    insights: list[str] = []
    currency = economy.currency_name

    if summary["last_snapshot"] is None:
        insights.append("Add a resource snapshot to start reconstructing your history.")
        return insights

    insights.append(
        (
            f"You hold about <strong>{summary['current_balance']:,.0f}</strong> {currency} "
            f"(<strong>{summary['available_pulls']:,.1f}</strong> pulls available)."
        )
    )

    if summary["rate_source"] == "none":
        insights.append("No income rate could be estimated. Enter a manual daily rate to see a projection.")
    else:
        insights.append(
            (
                f"Income rate: <strong>{summary['daily_rate']:,.0f}</strong> {currency}/day "
                f"({format_rate_source(summary['rate_source'])}). In {summary['projection_days']} days you "
                f"could have <strong>{summary['projected_pulls']:,.1f}</strong> pulls."
            )
        )

    if summary["days_until_pity"] is not None:
        insights.append(f"A full pity's worth of {currency} takes about {summary['days_until_pity']} days.")

    change = trend["change_percent"]
    if change is not None and change < -10:
        insights.append(
            (
                f"Income is trending down ({change:.0f}%), which is normal once one-time "
                "rewards are exhausted."
            )
        )

    return insights
