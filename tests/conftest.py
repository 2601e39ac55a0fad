"""Shared fixtures and record builders for the PrimoLedger tests."""

from __future__ import annotations

import sys
from datetime import date, datetime, time
from pathlib import Path

import pytest
import streamlit as st

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.economy import EconomyConfig  # noqa: E402
from core.models import PullRecord, PurchaseEntry, Snapshot  # noqa: E402


def at(day: date, hour: int = 12, minute: int = 0, second: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute, second))


def snapshot(day: date, primary: int, fates: int = 0, *, hour: int = 20, snapshot_id: str | None = None) -> Snapshot:
    return Snapshot(
        id=snapshot_id or f"{day.isoformat()}-{hour}",
        timestamp=at(day, hour),
        primary_currency=primary,
        secondary_fate_count=fates,
    )


def pulls(day: date, count: int, category: str = "character", *, hour: int = 15, rarity: int = 3) -> list[PullRecord]:
    return [
        PullRecord(
            id=f"{day.isoformat()}-{category}-{position}",
            timestamp=at(day, hour, second=position),
            banner_category=category,  # type: ignore[arg-type]
            rarity=rarity,
        )
        for position in range(count)
    ]


def entry(day: date, amount: int, source: str = "purchase", *, hour: int = 18, notes: str = "") -> PurchaseEntry:
    return PurchaseEntry(
        id=f"{day.isoformat()}-{source}-{amount}",
        timestamp=at(day, hour),
        amount=amount,
        source=source,
        notes=notes,
    )


@pytest.fixture(autouse=True)
def clear_streamlit_secrets(monkeypatch):
    """Provide an empty secrets mapping so tests don't rely on Streamlit runtime."""

    monkeypatch.setattr(st, "secrets", {}, raising=False)


@pytest.fixture()
def economy() -> EconomyConfig:
    return EconomyConfig(banner_reference_date=date(2024, 1, 1))
