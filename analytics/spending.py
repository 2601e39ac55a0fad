"""Pull spending helpers: which pulls cost primary currency and how much."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, Literal, Sequence

from core.economy import EconomyConfig
from core.models import PullRecord, PurchaseEntry, Snapshot

__all__ = [
    "FateType",
    "PullSpendingTotals",
    "calculate_available_pulls",
    "calculate_pull_spending",
    "extract_costing_pulls",
    "fate_type_for",
    "holdings_since",
    "is_costing_pull",
]

FateType = Literal["intertwined", "acquaint"]


@dataclass(frozen=True)
class PullSpendingTotals:
    total_pulls: int
    currency_equivalent: int
    pulls_by_fate: dict[str, int]


def is_costing_pull(pull: PullRecord, economy: EconomyConfig) -> bool:
    """Return ``True`` when the pull is paid for out of primary currency."""

    return pull.banner_category in economy.costing_categories


def extract_costing_pulls(pulls: Iterable[PullRecord], economy: EconomyConfig) -> tuple[PullRecord, ...]:
    """Keep only the pulls whose category debits the primary currency.

    Standard-banner pulls use a separately earned fate and never count as
    spend anywhere in the ledger.
    """

    return tuple(pull for pull in pulls if is_costing_pull(pull, economy))


def fate_type_for(pull: PullRecord, economy: EconomyConfig) -> FateType:
    return "intertwined" if is_costing_pull(pull, economy) else "acquaint"


def calculate_pull_spending(
    pulls: Iterable[PullRecord],
    economy: EconomyConfig,
    since: datetime | None = None,
) -> PullSpendingTotals:
    """Count pulls per fate type, optionally only those strictly after ``since``."""

    pulls_by_fate = {"intertwined": 0, "acquaint": 0}
    for pull in pulls:
        if since is not None and pull.timestamp.replace(tzinfo=None) <= since.replace(tzinfo=None):
            continue
        pulls_by_fate[fate_type_for(pull, economy)] += 1

    return PullSpendingTotals(
        total_pulls=pulls_by_fate["intertwined"] + pulls_by_fate["acquaint"],
        currency_equivalent=pulls_by_fate["intertwined"] * economy.currency_per_pull,
        pulls_by_fate=pulls_by_fate,
    )


def calculate_available_pulls(snapshot: Snapshot | None, economy: EconomyConfig) -> float:
    """Pulls the snapshot's holdings could buy right now."""

    if snapshot is None:
        return 0.0
    currency_pulls = (snapshot.primary_currency + snapshot.paid_currency) / economy.currency_per_pull
    starglitter_pulls = math.floor(snapshot.starglitter / economy.starglitter_per_pull)
    return float(
        currency_pulls
        + snapshot.secondary_fate_count
        + snapshot.standard_fate_count
        + starglitter_pulls
    )


def holdings_since(
    snapshot: Snapshot | None,
    pulls: Iterable[PullRecord],
    purchases: Sequence[PurchaseEntry],
    economy: EconomyConfig,
) -> Snapshot | None:
    """Carry the snapshot's holdings forward over later entries and pulls.

    Costing pulls use up held fates before currency; every holding is
    clamped at zero.
    """

    if snapshot is None:
        return None

    cutoff = snapshot.timestamp.replace(tzinfo=None)
    gained = sum(
        entry.amount for entry in purchases if entry.timestamp.replace(tzinfo=None) > cutoff
    )
    spending = calculate_pull_spending(pulls, economy, since=snapshot.timestamp)
    costing = spending.pulls_by_fate["intertwined"]
    from_fates = min(costing, snapshot.secondary_fate_count)
    from_currency = (costing - from_fates) * economy.currency_per_pull

    return replace(
        snapshot,
        primary_currency=max(0, snapshot.primary_currency + gained - from_currency),
        secondary_fate_count=snapshot.secondary_fate_count - from_fates,
        standard_fate_count=max(0, snapshot.standard_fate_count - spending.pulls_by_fate["acquaint"]),
    )
