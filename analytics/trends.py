"""Income trend reporting over banner periods and calendar buckets."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Literal, Sequence, TypedDict

import numpy as np
import pandas as pd

from analytics.days import DayIndex, build_day_index, local_wall_time, record_day, resolve_today
from analytics.rates import income_between
from core.economy import EconomyConfig
from core.models import PeriodTrendPoint, PullRecord, PurchaseEntry, Snapshot

__all__ = [
    "IncomeBucket",
    "IncomeBucketFilters",
    "IncomeInterval",
    "IncomeTotals",
    "LEDGER_SOURCES",
    "TrendSummary",
    "active_sources",
    "bucket_income_entries",
    "build_bucket_frame",
    "build_source_frame",
    "build_trend_frame",
    "calculate_income_rate_trend",
    "classify_entry",
    "period_bounds",
    "period_index",
    "split_income",
    "summarize_trend",
]

IncomeInterval = Literal["week", "month"]
EntryKind = Literal["earned", "purchased", "spent"]

LEDGER_SOURCES: tuple[str, ...] = (
    "daily_commission",
    "welkin",
    "event",
    "exploration",
    "abyss",
    "quest",
    "achievement",
    "maintenance",
    "codes",
    "battle_pass",
    "purchase",
    "wish_conversion",
    "cosmetic",
    "other",
)


class IncomeTotals(TypedDict):
    earned: float
    purchased: float
    spent: float
    total: float


class IncomeBucket(TypedDict):
    bucket_start: date
    label: str
    total: float
    earned: float
    purchased: float
    spent: float
    sources: dict[str, float]


class TrendSummary(TypedDict):
    average_rate: float
    early_average: float | None
    recent_average: float | None
    change_percent: float | None


@dataclass(frozen=True)
class IncomeBucketFilters:
    interval: IncomeInterval = "week"
    start_date: date | None = None
    end_date: date | None = None
    source: str = "all"
    include_purchases: bool = True
    known_sources: tuple[str, ...] = LEDGER_SOURCES


def period_index(day: date, economy: EconomyConfig) -> int:
    """Index of the banner period containing ``day``.

    Floor division keeps days before the reference date on the same
    contiguous grid.
    """

    offset = (day - economy.banner_reference_date).days
    return offset // economy.banner_period_days


def period_bounds(index: int, economy: EconomyConfig) -> tuple[date, date]:
    start = economy.banner_reference_date + timedelta(days=index * economy.banner_period_days)
    return start, start + timedelta(days=economy.banner_period_days - 1)


def _ground_truth_pair(
    index: DayIndex,
    period_start: date,
    period_end: date,
) -> tuple[Snapshot, Snapshot] | None:
    """Snapshot on/before the period start plus the last one inside the period."""

    before = [s for s in index.snapshots if record_day(s.timestamp) <= period_start]
    inside = [s for s in index.snapshots if period_start < record_day(s.timestamp) <= period_end]
    if not before or not inside:
        return None
    return before[-1], inside[-1]


def calculate_income_rate_trend(
    snapshots: Sequence[Snapshot],
    pulls: Sequence[PullRecord],
    economy: EconomyConfig,
    today: date | None = None,
    start: date | None = None,
    *,
    index: DayIndex | None = None,
) -> list[PeriodTrendPoint]:
    """One point per banner period from the first data day through today.

    Periods bounded by snapshots use the same delta accounting as the rate
    estimator; the rest are estimated from pulls and flagged as such.
    """

    if index is None:
        index = build_day_index(snapshots, pulls, (), economy)
    today = resolve_today(today)
    first_day = start if start is not None else index.first_data_day
    if first_day is None or first_day > today:
        return []

    points: list[PeriodTrendPoint] = []
    for current in range(period_index(first_day, economy), period_index(today, economy) + 1):
        period_start, period_end = period_bounds(current, economy)
        effective_end = min(period_end, today)
        days = (effective_end - period_start).days + 1

        pair = _ground_truth_pair(index, period_start, effective_end)
        if pair is not None:
            start_snapshot, end_snapshot = pair
            elapsed = (record_day(end_snapshot.timestamp) - record_day(start_snapshot.timestamp)).days
            daily_rate = income_between(index, start_snapshot, end_snapshot, economy) / elapsed
            total_income = daily_rate * days
            is_ground_truth = True
        else:
            pulls_in_period = index.pulls_between(period_start, effective_end)
            total_income = float(pulls_in_period * economy.currency_per_pull)
            daily_rate = total_income / days
            is_ground_truth = False

        points.append(
            PeriodTrendPoint(
                period_start=period_start,
                period_end=effective_end,
                daily_rate=float(daily_rate),
                total_income=float(total_income),
                days=days,
                is_ground_truth=is_ground_truth,
                label=period_start.strftime("%b %d"),
            )
        )
    return points


def summarize_trend(points: Sequence[PeriodTrendPoint]) -> TrendSummary:
    """Average rate plus an early-versus-recent comparison when there is enough data."""

    if not points:
        return {"average_rate": 0.0, "early_average": None, "recent_average": None, "change_percent": None}

    rates = np.array([point.daily_rate for point in points], dtype=float)
    summary: TrendSummary = {
        "average_rate": float(rates.mean()),
        "early_average": None,
        "recent_average": None,
        "change_percent": None,
    }
    if len(rates) < 4:
        return summary

    midpoint = len(rates) // 2
    early = float(rates[:midpoint].mean())
    recent = float(rates[midpoint:].mean())
    summary["early_average"] = early
    summary["recent_average"] = recent
    if early > 0:
        summary["change_percent"] = (recent - early) / early * 100
    return summary


def build_trend_frame(points: Sequence[PeriodTrendPoint]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "PeriodStart": pd.Timestamp(point.period_start),
                "PeriodEnd": pd.Timestamp(point.period_end),
                "Label": point.label,
                "DailyRate": point.daily_rate,
                "TotalIncome": point.total_income,
                "Days": point.days,
                "GroundTruth": point.is_ground_truth,
            }
            for point in points
        ],
        columns=["PeriodStart", "PeriodEnd", "Label", "DailyRate", "TotalIncome", "Days", "GroundTruth"],
    )


def classify_entry(source: str, economy: EconomyConfig) -> EntryKind:
    if source == economy.purchase_source:
        return "purchased"
    if source in economy.spending_sources:
        return "spent"
    return "earned"


def split_income(entries: Iterable[PurchaseEntry], economy: EconomyConfig) -> IncomeTotals:
    totals: IncomeTotals = {"earned": 0.0, "purchased": 0.0, "spent": 0.0, "total": 0.0}
    for entry in entries:
        totals[classify_entry(entry.source, economy)] += entry.amount
        totals["total"] += entry.amount
    return totals


def _entries_frame(entries: Iterable[PurchaseEntry]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "timestamp": pd.Timestamp(local_wall_time(entry.timestamp)),
                "amount": float(entry.amount),
                "source": entry.source,
            }
            for entry in entries
        ],
        columns=["timestamp", "amount", "source"],
    )


def bucket_income_entries(
    entries: Iterable[PurchaseEntry],
    filters: IncomeBucketFilters,
    economy: EconomyConfig,
) -> list[IncomeBucket]:
    """Group ledger rows into week (Monday start) or month buckets, oldest first."""

    frame = _entries_frame(entries)
    if frame.empty:
        return []

    days = frame["timestamp"].dt.normalize()
    mask = pd.Series(True, index=frame.index)
    if filters.start_date is not None:
        mask &= days >= pd.Timestamp(filters.start_date)
    if filters.end_date is not None:
        mask &= days <= pd.Timestamp(filters.end_date)
    if not filters.include_purchases:
        mask &= frame["source"] != economy.purchase_source
    if filters.source and filters.source != "all":
        mask &= frame["source"] == filters.source

    frame = frame[mask].copy()
    if frame.empty:
        return []

    freq = "M" if filters.interval == "month" else "W-SUN"
    frame["bucket_start"] = frame["timestamp"].dt.to_period(freq).dt.start_time
    frame["kind"] = frame["source"].map(lambda source: classify_entry(source, economy))

    label_format = "%Y-%m" if filters.interval == "month" else "%Y-%m-%d"
    buckets: list[IncomeBucket] = []
    for bucket_start, group in frame.groupby("bucket_start", sort=True):
        kind_totals = group.groupby("kind")["amount"].sum()
        sources = {source: 0.0 for source in filters.known_sources}
        for source, amount in group.groupby("source")["amount"].sum().items():
            sources[str(source)] = float(amount)
        start_day = pd.Timestamp(bucket_start).date()
        buckets.append(
            {
                "bucket_start": start_day,
                "label": start_day.strftime(label_format),
                "total": float(group["amount"].sum()),
                "earned": float(kind_totals.get("earned", 0.0)),
                "purchased": float(kind_totals.get("purchased", 0.0)),
                "spent": float(kind_totals.get("spent", 0.0)),
                "sources": sources,
            }
        )
    return buckets


def active_sources(bucket: IncomeBucket) -> list[tuple[str, float]]:
    """Non-zero sources of a bucket, largest movement first."""

    active = [(source, amount) for source, amount in bucket["sources"].items() if amount]
    return sorted(active, key=lambda item: abs(item[1]), reverse=True)


def build_bucket_frame(buckets: Sequence[IncomeBucket]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "BucketStart": pd.Timestamp(bucket["bucket_start"]),
                "Label": bucket["label"],
                "Earned": bucket["earned"],
                "Purchased": bucket["purchased"],
                "Spent": bucket["spent"],
                "Total": bucket["total"],
                "Sources": "<br>".join(f"{source}: {amount:,.0f}" for source, amount in active_sources(bucket)),
            }
            for bucket in buckets
        ],
        columns=["BucketStart", "Label", "Earned", "Purchased", "Spent", "Total", "Sources"],
    )


def build_source_frame(buckets: Sequence[IncomeBucket]) -> pd.DataFrame:
    """Bucket-by-source table of the non-zero amounts."""

    records = [
        {"Bucket": bucket["label"], "Source": source, "Amount": amount}
        for bucket in buckets
        for source, amount in active_sources(bucket)
    ]
    frame = pd.DataFrame(records, columns=["Bucket", "Source", "Amount"])
    if frame.empty:
        return frame
    return frame.pivot_table(index="Bucket", columns="Source", values="Amount", aggfunc="sum", fill_value=0.0)
