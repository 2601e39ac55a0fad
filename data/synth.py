"""Synthetic ledger generator for PrimoLedger.

Simulates a player's daily income, banner-start pull sessions, occasional
top-ups and periodic snapshots so that the three ledger CSVs stay mutually
consistent: every snapshot matches the simulated balance at that moment.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Optional, Sequence, Tuple, TypeVar

import numpy as np
import pandas as pd

from analytics.trends import period_index
from core.economy import DEFAULT_ECONOMY, EconomyConfig

T = TypeVar("T")

SNAPSHOT_FIELDS: Tuple[str, ...] = (
    "id",
    "timestamp",
    "primary_currency",
    "secondary_fate_count",
    "paid_currency",
    "standard_fate_count",
    "starglitter",
    "stardust",
)
PULL_FIELDS: Tuple[str, ...] = ("id", "timestamp", "banner_category", "rarity")
PURCHASE_FIELDS: Tuple[str, ...] = ("id", "timestamp", "amount", "source", "notes")


@dataclass(frozen=True)
class IncomeProfile:
    """Daily and periodic currency income for the simulated player."""

    daily_commission: int = 60
    welkin_daily: int = 90
    abyss_reward: int = 600
    banner_event_low: int = 900
    banner_event_high: int = 1600
    topup_probability: float = 0.03
    cosmetic_probability: float = 0.01


PULL_CATEGORIES: Sequence[Tuple[str, float]] = (
    ("character", 0.7),
    ("weapon", 0.2),
    ("chronicled", 0.1),
)

TOPUP_AMOUNTS: Sequence[int] = (300, 980, 1980)


def generate_synthetic_ledger(
    *,
    days: int = 120,
    end_date: Optional[date] = None,
    seed: Optional[int] = None,
    economy: EconomyConfig = DEFAULT_ECONOMY,
    profile: IncomeProfile = IncomeProfile(),
    snapshot_every: Tuple[int, int] = (9, 16),
) -> dict[str, pd.DataFrame]:
    """Return ``snapshots``, ``pulls`` and ``purchases`` frames for ``days`` days."""

    if days <= 0:
        raise ValueError("days must be a positive integer")

    rng = np.random.default_rng(seed)
    end = end_date or date.today()
    start = end - timedelta(days=days - 1)

    balance = int(rng.integers(2000, 6000))
    fates = 0
    standard_fates = int(rng.integers(0, 10))
    starglitter = int(rng.integers(0, 40))

    snapshots: list[dict] = []
    pulls: list[dict] = []
    purchases: list[dict] = []
    ids = itertools.count(1)

    next_snapshot = start
    for offset in range(days):
        day = start + timedelta(days=offset)

        balance += profile.daily_commission + profile.welkin_daily
        if day.day in (1, 16):
            balance += profile.abyss_reward

        banner_start = period_index(day, economy) != period_index(day - timedelta(days=1), economy)
        if banner_start:
            reward = int(rng.integers(profile.banner_event_low, profile.banner_event_high))
            balance += reward
            purchases.append(
                _purchase(next(ids), day, reward, "event", "Banner event rewards", rng)
            )

        if rng.random() < profile.topup_probability:
            amount = _rng_choice(TOPUP_AMOUNTS, rng)
            balance += amount
            purchases.append(_purchase(next(ids), day, amount, economy.purchase_source, "Top-up", rng))

        if rng.random() < profile.cosmetic_probability and balance > 1680:
            balance -= 1680
            purchases.append(_purchase(next(ids), day, -1680, "cosmetic", "Outfit", rng))

        if banner_start or rng.random() < 0.05:
            affordable = balance // economy.currency_per_pull
            if affordable >= 10:
                count = int(min(affordable, rng.integers(10, 41)))
                balance -= count * economy.currency_per_pull
                category = _weighted_choice(PULL_CATEGORIES, rng)
                pulls.extend(_pull_session(ids, day, count, category, rng))

        if rng.random() < 0.02 and standard_fates:
            pulls.extend(_pull_session(ids, day, standard_fates, "standard", rng))
            standard_fates = 0

        if day >= next_snapshot:
            if rng.random() < 0.3 and balance >= economy.currency_per_pull:
                balance -= economy.currency_per_pull
                fates += 1
            snapshots.append(
                {
                    "id": f"snap_{next(ids):05d}",
                    "timestamp": datetime.combine(day, time(23, 0)).isoformat(),
                    "primary_currency": balance,
                    "secondary_fate_count": fates,
                    "paid_currency": 0,
                    "standard_fate_count": standard_fates,
                    "starglitter": starglitter,
                    "stardust": int(rng.integers(0, 1200)),
                }
            )
            next_snapshot = day + timedelta(days=int(rng.integers(*snapshot_every)))

    return {
        "snapshots": pd.DataFrame.from_records(snapshots, columns=SNAPSHOT_FIELDS),
        "pulls": pd.DataFrame.from_records(pulls, columns=PULL_FIELDS),
        "purchases": pd.DataFrame.from_records(purchases, columns=PURCHASE_FIELDS),
    }


def write_ledger_csvs(directory: str | Path, *, seed: Optional[int] = None, **kwargs) -> dict[str, pd.DataFrame]:
    """Generate a synthetic ledger and persist it under ``directory``.

    Additional keyword arguments are forwarded to
    :func:`generate_synthetic_ledger`.
    """

    target = Path(directory)
    target.mkdir(parents=True, exist_ok=True)
    frames = generate_synthetic_ledger(seed=seed, **kwargs)
    for name, frame in frames.items():
        frame.to_csv(target / f"{name}.csv", index=False)
    return frames


def _purchase(
    entry_id: int,
    day: date,
    amount: int,
    source: str,
    notes: str,
    rng: np.random.Generator,
) -> dict:
    moment = datetime.combine(day, time(int(rng.integers(8, 22)), int(rng.integers(0, 60))))
    return {
        "id": f"entry_{entry_id:05d}",
        "timestamp": moment.isoformat(),
        "amount": int(amount),
        "source": source,
        "notes": notes,
    }


def _pull_session(
    ids: itertools.count,
    day: date,
    count: int,
    category: str,
    rng: np.random.Generator,
) -> list[dict]:
    # sessions start mid-afternoon, one pull every few seconds
    start = datetime.combine(day, time(int(rng.integers(12, 20)), 0))
    rows = []
    for position in range(count):
        roll = rng.random()
        rarity = 5 if roll < 0.016 else 4 if roll < 0.146 else 3
        rows.append(
            {
                "id": f"pull_{next(ids):05d}",
                "timestamp": (start + timedelta(seconds=5 * position)).isoformat(),
                "banner_category": category,
                "rarity": rarity,
            }
        )
    return rows


def _weighted_choice(options: Sequence[Tuple[str, float]], rng: np.random.Generator) -> str:
    labels = [label for label, _ in options]
    weights = np.array([weight for _, weight in options], dtype=float)
    return labels[int(rng.choice(len(labels), p=weights / weights.sum()))]


def _rng_choice(options: Sequence[T], rng: np.random.Generator) -> T:
    if not options:
        raise ValueError("Cannot choose from an empty sequence")
    idx = int(rng.integers(0, len(options)))
    return options[idx]
