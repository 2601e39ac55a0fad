"""Daily income-rate estimation from snapshots with a pull-frequency fallback."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Sequence

from analytics.days import DayIndex, build_day_index, record_day, resolve_today, snapshot_total
from core.economy import EconomyConfig
from core.models import PullRecord, RateEstimate, Snapshot

__all__ = [
    "estimate_daily_rate",
    "income_between",
    "rate_from_pulls",
    "rate_from_snapshots",
    "resolve_effective_rate",
    "select_boundary_snapshots",
]


def select_boundary_snapshots(
    snapshots: Sequence[Snapshot],
    window_start: date,
    today: date,
) -> tuple[Snapshot, Snapshot] | None:
    """Pick the widest snapshot pair for rate accounting.

    Prefers the oldest and newest snapshots strictly inside the window; falls
    back to the two most recent snapshots overall. ``snapshots`` must be
    sorted ascending.
    """

    inside = [
        snapshot
        for snapshot in snapshots
        if window_start < record_day(snapshot.timestamp) <= today
    ]
    if len(inside) >= 2:
        return inside[0], inside[-1]
    if len(snapshots) >= 2:
        return snapshots[-2], snapshots[-1]
    return None


def income_between(index: DayIndex, start: Snapshot, end: Snapshot, economy: EconomyConfig) -> float:
    """Currency earned between two snapshots: holdings delta plus what was pulled."""

    start_day = record_day(start.timestamp)
    end_day = record_day(end.timestamp)
    pulls_between = index.pulls_between(start_day, end_day)
    delta = snapshot_total(end, economy) - snapshot_total(start, economy)
    return float(delta + pulls_between * economy.currency_per_pull)


def rate_from_snapshots(
    snapshots: Sequence[Snapshot],
    pulls: Sequence[PullRecord],
    economy: EconomyConfig,
    lookback_days: int | None = None,
    today: date | None = None,
    *,
    index: DayIndex | None = None,
) -> float:
    if index is None:
        index = build_day_index(snapshots, pulls, (), economy)
    today = resolve_today(today)
    lookback = economy.rate_lookback_days if lookback_days is None else lookback_days

    boundary = select_boundary_snapshots(index.snapshots, today - timedelta(days=lookback), today)
    if boundary is None:
        return 0.0

    start, end = boundary
    elapsed = (record_day(end.timestamp) - record_day(start.timestamp)).days
    if elapsed <= 0:
        return 0.0
    return income_between(index, start, end, economy) / elapsed


def rate_from_pulls(
    pulls: Sequence[PullRecord],
    economy: EconomyConfig,
    lookback_days: int | None = None,
    today: date | None = None,
    *,
    index: DayIndex | None = None,
) -> float:
    """Assume the stash stays roughly flat so pulls made approximate income.

    Divides by the requested window, not the observed span, so the rate
    decays as the window empties.
    """

    if index is None:
        index = build_day_index((), pulls, (), economy)
    today = resolve_today(today)
    lookback = economy.rate_lookback_days if lookback_days is None else lookback_days
    if lookback <= 0:
        return 0.0

    recent = index.pulls_between(today - timedelta(days=lookback - 1), today)
    return recent * economy.currency_per_pull / lookback


def estimate_daily_rate(
    snapshots: Sequence[Snapshot],
    pulls: Sequence[PullRecord],
    economy: EconomyConfig,
    lookback_days: int | None = None,
    today: date | None = None,
    *,
    index: DayIndex | None = None,
) -> RateEstimate:
    """Return the best available daily rate and where it came from.

    A zero rate with source ``"none"`` means there is nothing to estimate
    from; callers should ask for a manual rate.
    """

    if index is None:
        index = build_day_index(snapshots, pulls, (), economy)

    snapshot_rate = rate_from_snapshots(
        snapshots, pulls, economy, lookback_days, today, index=index
    )
    if snapshot_rate > 0:
        return RateEstimate(snapshot_rate, "snapshots")

    pull_rate = rate_from_pulls(pulls, economy, lookback_days, today, index=index)
    if pull_rate > 0:
        return RateEstimate(pull_rate, "pulls")

    return RateEstimate(0.0, "none")


def resolve_effective_rate(estimate: RateEstimate, manual_rate: float | None) -> RateEstimate:
    if manual_rate is None:
        return estimate
    return RateEstimate(float(manual_rate), "manual")
