"""Linear balance projection and merged history/projection chart series."""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Sequence

import pandas as pd

from analytics.days import resolve_today
from core.economy import EconomyConfig
from core.models import ChartDataPoint, HistoricalDataPoint, ProjectionDataPoint

__all__ = [
    "build_chart_data",
    "build_chart_frame",
    "build_projection",
    "days_until_pity",
    "projected_pulls",
]


def build_projection(
    start_balance: float,
    daily_rate: float,
    projection_days: int,
    start_day: date | None = None,
) -> list[ProjectionDataPoint]:
    """Extend ``start_balance`` at a constant ``daily_rate`` for days ``0..N``.

    This is a baseline, not a forecast: event spikes and pull spending are
    ignored.
    """

    start_day = resolve_today(start_day)
    points: list[ProjectionDataPoint] = []
    for offset in range(max(projection_days, 0) + 1):
        points.append(
            ProjectionDataPoint(
                day=start_day + timedelta(days=offset),
                projected_balance=max(0.0, start_balance + daily_rate * offset),
                is_today=offset == 0,
            )
        )
    return points


def build_chart_data(
    historical: Sequence[HistoricalDataPoint],
    daily_rate: float,
    projection_days: int,
    today: date | None = None,
) -> list[ChartDataPoint]:
    """Merge reconstructed history with projections for the days after it."""

    latest = historical[-1] if historical else None
    start_balance = latest.balance if latest else 0.0
    start_with_purchases = latest.balance_with_purchases if latest else 0.0
    last_day = latest.day if latest else resolve_today(today)

    points = [
        ChartDataPoint(
            day=point.day,
            historical=point.balance,
            historical_with_purchases=point.balance_with_purchases,
            projected=None,
            projected_with_purchases=None,
            is_snapshot_day=point.is_snapshot_day,
            is_today=point.is_today,
            cumulative_pulls=point.cumulative_pulls,
            cumulative_purchases=point.cumulative_purchases,
        )
        for point in historical
    ]

    plain = build_projection(start_balance, daily_rate, projection_days, last_day)
    with_purchases = build_projection(start_with_purchases, daily_rate, projection_days, last_day)
    # offset 0 is the last historical day, already present above
    for projected, projected_wp in zip(plain[1:], with_purchases[1:]):
        points.append(
            ChartDataPoint(
                day=projected.day,
                historical=None,
                historical_with_purchases=None,
                projected=projected.projected_balance,
                projected_with_purchases=projected_wp.projected_balance,
                is_snapshot_day=False,
                is_today=False,
                cumulative_pulls=latest.cumulative_pulls if latest else 0,
                cumulative_purchases=latest.cumulative_purchases if latest else 0,
            )
        )
    return points


def build_chart_frame(points: Sequence[ChartDataPoint]) -> pd.DataFrame:
    """Return a long-form frame of balances tagged ``Actual`` or ``Projected``.

    The last actual day is repeated as the first projected record so the two
    lines join on the chart.
    """

    records: list[dict[str, object]] = []
    anchor: ChartDataPoint | None = None
    for point in points:
        if point.historical is not None:
            records.append(
                {
                    "Day": pd.Timestamp(point.day),
                    "Balance": point.historical,
                    "BalanceWithPurchases": point.historical_with_purchases,
                    "Series": "Actual",
                    "IsSnapshot": point.is_snapshot_day,
                }
            )
            anchor = point
        elif point.projected is not None:
            if anchor is not None:
                records.append(
                    {
                        "Day": pd.Timestamp(anchor.day),
                        "Balance": anchor.historical,
                        "BalanceWithPurchases": anchor.historical_with_purchases,
                        "Series": "Projected",
                        "IsSnapshot": False,
                    }
                )
                anchor = None
            records.append(
                {
                    "Day": pd.Timestamp(point.day),
                    "Balance": point.projected,
                    "BalanceWithPurchases": point.projected_with_purchases,
                    "Series": "Projected",
                    "IsSnapshot": False,
                }
            )

    frame = pd.DataFrame(
        records,
        columns=["Day", "Balance", "BalanceWithPurchases", "Series", "IsSnapshot"],
    )
    if not frame.empty:
        frame = frame.sort_values(["Day", "Series"], kind="stable").reset_index(drop=True)
    return frame


def days_until_pity(daily_rate: float, economy: EconomyConfig) -> int | None:
    """Days of income needed to fund one full pity, or ``None`` without income."""

    if daily_rate <= 0:
        return None
    return math.ceil(economy.pity_pulls * economy.currency_per_pull / daily_rate)


def projected_pulls(balance: float, daily_rate: float, days: int, economy: EconomyConfig) -> float:
    projected_balance = max(0.0, balance + daily_rate * days)
    return projected_balance / economy.currency_per_pull
