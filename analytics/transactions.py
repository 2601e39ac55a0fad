"""Merged ledger log of snapshots, manual entries and daily pull spending."""

from __future__ import annotations

from datetime import datetime, time
from typing import Sequence

from analytics.days import DayIndex, build_day_index, local_wall_time, record_day
from core.economy import EconomyConfig
from core.models import PullRecord, PurchaseEntry, Snapshot, TransactionKind, TransactionLogEntry

__all__ = [
    "build_transaction_log",
    "describe_pull_day",
    "filter_transaction_log",
]

PULL_DAY_TIME = time(12, 0)


def describe_pull_day(pulls: Sequence[PullRecord], economy: EconomyConfig) -> str:
    """Summarise one day of pulls, e.g. ``Spent 480 primogems (3 pulls) → 1x 4★``."""

    spent = len(pulls) * economy.currency_per_pull
    description = f"Spent {spent:,} {economy.currency_name} ({len(pulls)} pulls)"

    results: list[str] = []
    for rarity in (5, 4):
        count = sum(1 for pull in pulls if pull.rarity == rarity)
        if count:
            results.append(f"{count}x {rarity}★")
    if results:
        description += f" → {', '.join(results)}"
    return description


def _describe_entry(entry: PurchaseEntry, economy: EconomyConfig) -> str:
    if entry.amount >= 0:
        verb = "Purchased" if entry.source == economy.purchase_source else "Earned"
        return f"{verb} {entry.amount:,} {economy.currency_name} ({entry.source})"
    return f"Spent {abs(entry.amount):,} {economy.currency_name} ({entry.source})"


def build_transaction_log(
    snapshots: Sequence[Snapshot],
    pulls: Sequence[PullRecord],
    purchases: Sequence[PurchaseEntry],
    economy: EconomyConfig,
    *,
    index: DayIndex | None = None,
) -> list[TransactionLogEntry]:
    """Return every ledger event, most recent first."""

    if index is None:
        index = build_day_index(snapshots, pulls, purchases, economy)

    entries: list[TransactionLogEntry] = []
    for snapshot in index.snapshots:
        entries.append(
            TransactionLogEntry(
                id=f"snapshot-{snapshot.id}",
                timestamp=snapshot.timestamp,
                day=record_day(snapshot.timestamp),
                kind="snapshot",
                amount=snapshot.primary_currency,
                description=f"Resource snapshot: {snapshot.primary_currency:,} {economy.currency_name}",
                editable=False,
                original_ref=snapshot,
            )
        )

    for entry in index.purchases:
        entries.append(
            TransactionLogEntry(
                id=f"purchase-{entry.id}",
                timestamp=entry.timestamp,
                day=record_day(entry.timestamp),
                kind="purchase",
                amount=entry.amount,
                description=_describe_entry(entry, economy),
                editable=True,
                original_ref=entry,
                notes=entry.notes,
            )
        )

    for day, day_pulls in index.pulls_by_day.items():
        entries.append(
            TransactionLogEntry(
                id=f"pulls-{day.isoformat()}",
                timestamp=datetime.combine(day, PULL_DAY_TIME, tzinfo=day_pulls[0].timestamp.tzinfo),
                day=day,
                kind="pull_spending",
                amount=-len(day_pulls) * economy.currency_per_pull,
                description=describe_pull_day(day_pulls, economy),
                editable=False,
                original_ref=day_pulls,
            )
        )

    entries.sort(key=lambda item: (local_wall_time(item.timestamp), item.id), reverse=True)
    return entries


def filter_transaction_log(
    entries: Sequence[TransactionLogEntry],
    kind: TransactionKind | str = "all",
    limit: int | None = None,
) -> list[TransactionLogEntry]:
    filtered = [entry for entry in entries if kind == "all" or entry.kind == kind]
    if limit is not None:
        return filtered[: max(limit, 0)]
    return filtered
