"""Core domain package for the PrimoLedger application."""

from .economy import DEFAULT_ECONOMY, EconomyConfig
from .models import (
    ChartDataPoint,
    HistoricalDataPoint,
    LedgerData,
    LedgerSummary,
    PeriodTrendPoint,
    ProjectionDataPoint,
    PullRecord,
    PurchaseEntry,
    RateEstimate,
    Snapshot,
    TransactionLogEntry,
)

__all__ = [
    "DEFAULT_ECONOMY",
    "EconomyConfig",
    "ChartDataPoint",
    "HistoricalDataPoint",
    "LedgerData",
    "LedgerSummary",
    "PeriodTrendPoint",
    "ProjectionDataPoint",
    "PullRecord",
    "PurchaseEntry",
    "RateEstimate",
    "Snapshot",
    "TransactionLogEntry",
]
