"""Shared data model definitions for the PrimoLedger dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Literal, TypedDict, Union

import pandas as pd

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from analytics.trends import TrendSummary

BannerCategory = Literal["character", "weapon", "standard", "chronicled"]
TransactionKind = Literal["snapshot", "purchase", "pull_spending"]
RateSource = Literal["snapshots", "pulls", "none", "manual"]


@dataclass(frozen=True)
class Snapshot:
    """User-entered holdings at a point in time; the only ground truth."""

    id: str
    timestamp: datetime
    primary_currency: int
    secondary_fate_count: int
    paid_currency: int = 0
    standard_fate_count: int = 0
    starglitter: int = 0
    stardust: int = 0


@dataclass(frozen=True)
class PullRecord:
    id: str
    timestamp: datetime
    banner_category: BannerCategory
    rarity: int


@dataclass(frozen=True)
class PurchaseEntry:
    """Manual ledger row: positive amounts are gains, negative are non-pull spend."""

    id: str
    timestamp: datetime
    amount: int
    source: str
    notes: str = ""


@dataclass(frozen=True)
class HistoricalDataPoint:
    day: date
    balance: float
    balance_with_purchases: float
    is_snapshot_day: bool
    is_today: bool
    cumulative_pulls: int
    cumulative_purchases: int


@dataclass(frozen=True)
class ProjectionDataPoint:
    day: date
    projected_balance: float
    is_today: bool


@dataclass(frozen=True)
class ChartDataPoint:
    """A single day of the merged history + projection series."""

    day: date
    historical: float | None
    historical_with_purchases: float | None
    projected: float | None
    projected_with_purchases: float | None
    is_snapshot_day: bool
    is_today: bool
    cumulative_pulls: int
    cumulative_purchases: int


@dataclass(frozen=True)
class TransactionLogEntry:
    """One row of the merged ledger log.

    ``original_ref`` depends on ``kind``: a :class:`Snapshot` for snapshots,
    a :class:`PurchaseEntry` for purchases and a tuple of the day's
    :class:`PullRecord` objects for aggregated pull spending.
    """

    id: str
    timestamp: datetime
    day: date
    kind: TransactionKind
    amount: int
    description: str
    editable: bool
    original_ref: Union[Snapshot, PurchaseEntry, tuple[PullRecord, ...]]
    notes: str = ""


@dataclass(frozen=True)
class PeriodTrendPoint:
    period_start: date
    period_end: date
    daily_rate: float
    total_income: float
    days: int
    is_ground_truth: bool
    label: str


@dataclass(frozen=True)
class RateEstimate:
    daily_rate: float
    source: RateSource


class LedgerSummary(TypedDict):
    current_balance: float
    current_balance_with_purchases: float
    last_snapshot: datetime | None
    holdings: Snapshot | None
    available_pulls: float
    daily_rate: float
    rate_source: RateSource
    estimated_rate: float
    projection_days: int
    projected_balance: float
    projected_pulls: float
    days_until_pity: int | None
    total_costing_pulls: int


class LedgerData(TypedDict):
    chart_df: pd.DataFrame
    trend_df: pd.DataFrame
    historical: tuple[HistoricalDataPoint, ...]
    chart_points: list[ChartDataPoint]
    trend_points: list[PeriodTrendPoint]
    trend_summary: "TrendSummary"
    transaction_log: list[TransactionLogEntry]
    rate: RateEstimate
    summary: LedgerSummary
    insights: list[str]


__all__ = [
    "BannerCategory",
    "TransactionKind",
    "RateSource",
    "Snapshot",
    "PullRecord",
    "PurchaseEntry",
    "HistoricalDataPoint",
    "ProjectionDataPoint",
    "ChartDataPoint",
    "TransactionLogEntry",
    "PeriodTrendPoint",
    "RateEstimate",
    "LedgerSummary",
    "LedgerData",
]
