"""Day-by-day balance reconstruction anchored on ground-truth snapshots."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Sequence

from analytics.days import DayIndex, build_day_index, day_range, record_day, resolve_today, snapshot_total
from core.economy import EconomyConfig
from core.models import HistoricalDataPoint, PullRecord, PurchaseEntry, Snapshot

__all__ = [
    "backward_pass",
    "build_historical_data",
    "forward_pass",
    "resolve_effective_start",
]


def _point(
    index: DayIndex,
    day: date,
    balance: float,
    balance_with_purchases: float,
    today: date,
) -> HistoricalDataPoint:
    return HistoricalDataPoint(
        day=day,
        balance=max(0.0, float(balance)),
        balance_with_purchases=max(0.0, float(balance_with_purchases)),
        is_snapshot_day=index.has_snapshot(day),
        is_today=day == today,
        cumulative_pulls=index.cumulative_pulls(day),
        cumulative_purchases=index.cumulative_purchases(day),
    )


def forward_pass(
    index: DayIndex,
    anchor_day: date,
    today: date,
    economy: EconomyConfig,
) -> tuple[HistoricalDataPoint, ...]:
    """Walk from the anchor snapshot's day up to ``today``.

    Snapshot days reset both totals. Other days lose their pull spend, and the
    with-purchases total gains that day's ledger amount once past the anchor
    (anything up to the anchor is already inside the snapshot).
    """

    balance = 0
    with_purchases = 0
    points: list[HistoricalDataPoint] = []

    for day in day_range(anchor_day, today):
        snapshot = index.snapshot_by_day.get(day)
        if snapshot is not None:
            balance = with_purchases = snapshot_total(snapshot, economy)
        else:
            spend = index.pull_spend(day, economy)
            balance -= spend
            with_purchases -= spend
            if day > anchor_day:
                with_purchases += index.purchase_amount(day)
        points.append(_point(index, day, balance, with_purchases, today))

    return tuple(points)


def backward_pass(
    index: DayIndex,
    anchor_day: date,
    effective_start: date,
    today: date,
    economy: EconomyConfig,
) -> tuple[HistoricalDataPoint, ...]:
    """Walk from the day before the anchor down to ``effective_start``.

    Non-snapshot days undo the following day's activity, unless that day had
    a snapshot which already absorbed it. Returned in ascending day order.
    """

    anchor = index.snapshot_by_day[anchor_day]
    balance = with_purchases = snapshot_total(anchor, economy)
    points: list[HistoricalDataPoint] = []

    for day in day_range(anchor_day - timedelta(days=1), effective_start, step=-1):
        snapshot = index.snapshot_by_day.get(day)
        if snapshot is not None:
            balance = with_purchases = snapshot_total(snapshot, economy)
        else:
            next_day = day + timedelta(days=1)
            if not index.has_snapshot(next_day):
                spend = index.pull_spend(next_day, economy)
                balance += spend
                with_purchases += spend
                with_purchases -= index.purchase_amount(next_day)
        points.append(_point(index, day, balance, with_purchases, today))

    points.reverse()
    return tuple(points)


def resolve_effective_start(index: DayIndex, today: date, lookback_days: int) -> date | None:
    if not index.snapshots:
        return None
    oldest_snapshot_day = record_day(index.snapshots[0].timestamp)
    return max(today - timedelta(days=lookback_days), oldest_snapshot_day)


def build_historical_data(
    snapshots: Sequence[Snapshot],
    pulls: Sequence[PullRecord],
    purchases: Sequence[PurchaseEntry],
    economy: EconomyConfig,
    lookback_days: int | None = None,
    today: date | None = None,
    *,
    index: DayIndex | None = None,
) -> tuple[HistoricalDataPoint, ...]:
    """Reconstruct balances from the lookback horizon through today.

    Returns an empty tuple when there are no snapshots, since nothing anchors
    the reconstruction. A snapshot dated after ``today`` extends the series to
    that snapshot's day.
    """

    if index is None:
        index = build_day_index(snapshots, pulls, purchases, economy)
    latest = index.latest_snapshot
    if latest is None:
        return ()

    lookback = economy.lookback_days if lookback_days is None else lookback_days
    anchor_day = record_day(latest.timestamp)
    today = max(resolve_today(today), anchor_day)
    effective_start = resolve_effective_start(index, today, lookback)

    history = backward_pass(index, anchor_day, effective_start, today, economy)
    forward = forward_pass(index, anchor_day, today, economy)
    # the anchor can sit before the lookback horizon; the walk still starts there
    forward = tuple(point for point in forward if point.day >= effective_start)
    return history + forward
