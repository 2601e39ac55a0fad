"""CSV loading for the PrimoLedger pipeline.

The loader is the only place raw rows are coerced into model records; the
analytics engine assumes well-formed inputs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Final, TypeVar

import pandas as pd

from core.models import PullRecord, PurchaseEntry, Snapshot

__all__ = [
    "LedgerDataError",
    "LedgerRecords",
    "load_ledger",
    "load_pulls",
    "load_purchases",
    "load_snapshots",
]

logger = logging.getLogger(__name__)

_CACHE_SIZE: Final[int] = 8

SNAPSHOTS_FILE: Final[str] = "snapshots.csv"
PULLS_FILE: Final[str] = "pulls.csv"
PURCHASES_FILE: Final[str] = "purchases.csv"

_SNAPSHOT_COLUMNS = ("id", "timestamp", "primary_currency", "secondary_fate_count")
_PULL_COLUMNS = ("id", "timestamp", "banner_category", "rarity")
_PURCHASE_COLUMNS = ("id", "timestamp", "amount", "source")

T = TypeVar("T")


class LedgerDataError(ValueError):
    """Raised when a ledger CSV cannot be turned into records."""


@dataclass(frozen=True)
class LedgerRecords:
    snapshots: tuple[Snapshot, ...]
    pulls: tuple[PullRecord, ...]
    purchases: tuple[PurchaseEntry, ...]


def _parse_timestamp(value: Any) -> datetime:
    # per-row parsing keeps each record's own UTC offset
    return pd.Timestamp(value).to_pydatetime()


def _int(value: Any) -> int:
    if value is None or pd.isna(value):
        return 0
    return int(value)


def _read_csv(path: Path, required: tuple[str, ...]) -> pd.DataFrame | None:
    if not path.exists():
        logger.debug("Ledger file %s not found; treating as empty", path)
        return None

    df = pd.read_csv(path, dtype={"id": str})
    missing = [column for column in required if column not in df.columns]
    if missing:
        raise LedgerDataError(f"{path.name} is missing columns: {', '.join(missing)}")
    return df.dropna(subset=["timestamp"])


def _load(path: Path, required: tuple[str, ...], build: Callable[[dict[str, Any]], T]) -> tuple[T, ...]:
    df = _read_csv(path, required)
    if df is None or df.empty:
        return ()
    records = tuple(build(row) for row in df.to_dict(orient="records"))
    logger.debug("Loaded %d rows from %s", len(records), path.name)
    return records


def _snapshot(row: dict[str, Any]) -> Snapshot:
    return Snapshot(
        id=str(row["id"]),
        timestamp=_parse_timestamp(row["timestamp"]),
        primary_currency=_int(row["primary_currency"]),
        secondary_fate_count=_int(row["secondary_fate_count"]),
        paid_currency=_int(row.get("paid_currency")),
        standard_fate_count=_int(row.get("standard_fate_count")),
        starglitter=_int(row.get("starglitter")),
        stardust=_int(row.get("stardust")),
    )


def _pull(row: dict[str, Any]) -> PullRecord:
    return PullRecord(
        id=str(row["id"]),
        timestamp=_parse_timestamp(row["timestamp"]),
        banner_category=str(row["banner_category"]).strip().lower(),  # type: ignore[arg-type]
        rarity=_int(row["rarity"]),
    )


def _purchase(row: dict[str, Any]) -> PurchaseEntry:
    notes = row.get("notes")
    return PurchaseEntry(
        id=str(row["id"]),
        timestamp=_parse_timestamp(row["timestamp"]),
        amount=_int(row["amount"]),
        source=str(row["source"]).strip().lower(),
        notes="" if notes is None or pd.isna(notes) else str(notes),
    )


def load_snapshots(path: str | Path) -> tuple[Snapshot, ...]:
    return _load(Path(path), _SNAPSHOT_COLUMNS, _snapshot)


def load_pulls(path: str | Path) -> tuple[PullRecord, ...]:
    return _load(Path(path), _PULL_COLUMNS, _pull)


def load_purchases(path: str | Path) -> tuple[PurchaseEntry, ...]:
    return _load(Path(path), _PURCHASE_COLUMNS, _purchase)


@lru_cache(maxsize=_CACHE_SIZE)
def load_ledger(data_dir: str | Path) -> LedgerRecords:
    """Return every ledger record stored under ``data_dir``.

    Missing files load as empty collections. Results are cached and made of
    immutable tuples so repeated dashboard recomputations share one copy.
    """

    directory = Path(data_dir)
    if not directory.is_dir():
        raise FileNotFoundError(f"Ledger data directory not found: {directory}")

    records = LedgerRecords(
        snapshots=load_snapshots(directory / SNAPSHOTS_FILE),
        pulls=load_pulls(directory / PULLS_FILE),
        purchases=load_purchases(directory / PURCHASES_FILE),
    )
    logger.info(
        "Loaded ledger from %s: %d snapshots, %d pulls, %d ledger entries",
        directory,
        len(records.snapshots),
        len(records.pulls),
        len(records.purchases),
    )
    return records
