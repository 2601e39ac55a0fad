"""Fixed economy constants passed explicitly into every ledger calculation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

__all__ = ["EconomyConfig", "DEFAULT_ECONOMY"]


@dataclass(frozen=True)
class EconomyConfig:
    """Immutable exchange rates and window defaults for one game economy."""

    currency_per_pull: int = 160
    costing_categories: frozenset[str] = field(
        default_factory=lambda: frozenset({"character", "weapon", "chronicled"})
    )
    banner_reference_date: date = date(2020, 9, 28)
    banner_period_days: int = 21
    lookback_days: int = 90
    projection_days: int = 42
    rate_lookback_days: int = 14
    pity_pulls: int = 90
    starglitter_per_pull: int = 5
    purchase_source: str = "purchase"
    spending_sources: frozenset[str] = field(default_factory=lambda: frozenset({"cosmetic"}))
    currency_name: str = "primogems"


DEFAULT_ECONOMY = EconomyConfig()
