"""Calendar-day helpers and the per-call day index shared by the ledger engine."""

from __future__ import annotations

from bisect import bisect_right
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Sequence

from analytics.spending import extract_costing_pulls
from core.economy import EconomyConfig
from core.models import PullRecord, PurchaseEntry, Snapshot

__all__ = [
    "DayIndex",
    "build_day_index",
    "day_range",
    "local_wall_time",
    "record_day",
    "resolve_today",
    "snapshot_total",
]


def record_day(timestamp: datetime) -> date:
    """Return the record's own local calendar day.

    Timestamps are not normalised across time zones; a record written at
    23:30 in one offset and another at 00:30 in a different offset keep their
    own wall-clock days.
    """

    return timestamp.date()


def local_wall_time(timestamp: datetime) -> datetime:
    """Drop tz info so records from different offsets remain comparable."""

    return timestamp.replace(tzinfo=None)


def resolve_today(today: date | None) -> date:
    return today if today is not None else date.today()


def day_range(start: date, end: date, *, step: int = 1) -> Iterator[date]:
    """Yield days from ``start`` to ``end`` inclusive, walking backwards when ``step`` < 0."""

    current = start
    delta = timedelta(days=step)
    if step > 0:
        while current <= end:
            yield current
            current += delta
    else:
        while current >= end:
            yield current
            current += delta


def snapshot_total(snapshot: Snapshot, economy: EconomyConfig) -> int:
    """Currency-equivalent holdings of a snapshot.

    Fates are folded in at the pull rate so converting currency into fates
    never shows up as a dip.
    """

    return snapshot.primary_currency + snapshot.secondary_fate_count * economy.currency_per_pull


@dataclass(frozen=True)
class DayIndex:
    """Per-day lookups built once from one consistent set of inputs."""

    snapshots: tuple[Snapshot, ...]
    costing_pulls: tuple[PullRecord, ...]
    purchases: tuple[PurchaseEntry, ...]
    snapshot_by_day: Mapping[date, Snapshot]
    pulls_by_day: Mapping[date, tuple[PullRecord, ...]]
    purchase_by_day: Mapping[date, int]
    pull_days: tuple[date, ...]
    gain_days: tuple[date, ...]
    gain_prefix: tuple[int, ...]

    def pull_count(self, day: date) -> int:
        return len(self.pulls_by_day.get(day, ()))

    def pull_spend(self, day: date, economy: EconomyConfig) -> int:
        return self.pull_count(day) * economy.currency_per_pull

    def purchase_amount(self, day: date) -> int:
        return self.purchase_by_day.get(day, 0)

    def has_snapshot(self, day: date) -> bool:
        return day in self.snapshot_by_day

    def cumulative_pulls(self, day: date) -> int:
        """Count every costing pull recorded on or before ``day``."""

        return bisect_right(self.pull_days, day)

    def cumulative_purchases(self, day: date) -> int:
        """Sum every positive ledger amount recorded on or before ``day``."""

        position = bisect_right(self.gain_days, day)
        return self.gain_prefix[position]

    def pulls_between(self, start: date, end: date) -> int:
        """Costing pulls with a day in ``[start, end]``."""

        if end < start:
            return 0
        return bisect_right(self.pull_days, end) - bisect_right(self.pull_days, start - timedelta(days=1))

    @property
    def latest_snapshot(self) -> Snapshot | None:
        return self.snapshots[-1] if self.snapshots else None

    @property
    def first_data_day(self) -> date | None:
        candidates = [record_day(self.snapshots[0].timestamp)] if self.snapshots else []
        if self.pull_days:
            candidates.append(self.pull_days[0])
        return min(candidates) if candidates else None


def _sorted_by_time(records: Iterable) -> tuple:
    return tuple(sorted(records, key=lambda record: local_wall_time(record.timestamp)))


def build_day_index(
    snapshots: Sequence[Snapshot],
    pulls: Sequence[PullRecord],
    purchases: Sequence[PurchaseEntry],
    economy: EconomyConfig,
) -> DayIndex:
    """Sort the inputs and build the per-day maps used by every ledger builder."""

    sorted_snapshots = _sorted_by_time(snapshots)
    sorted_pulls = _sorted_by_time(extract_costing_pulls(pulls, economy))
    sorted_purchases = _sorted_by_time(purchases)

    snapshot_by_day: dict[date, Snapshot] = {}
    for snapshot in sorted_snapshots:
        snapshot_by_day[record_day(snapshot.timestamp)] = snapshot

    pulls_by_day: dict[date, list[PullRecord]] = defaultdict(list)
    for pull in sorted_pulls:
        pulls_by_day[record_day(pull.timestamp)].append(pull)

    purchase_by_day: dict[date, int] = defaultdict(int)
    for purchase in sorted_purchases:
        purchase_by_day[record_day(purchase.timestamp)] += purchase.amount

    pull_days = tuple(sorted(record_day(pull.timestamp) for pull in sorted_pulls))

    gains = sorted(
        (record_day(purchase.timestamp), purchase.amount)
        for purchase in sorted_purchases
        if purchase.amount > 0
    )
    gain_prefix = [0]
    for _, amount in gains:
        gain_prefix.append(gain_prefix[-1] + amount)

    return DayIndex(
        snapshots=sorted_snapshots,
        costing_pulls=sorted_pulls,
        purchases=sorted_purchases,
        snapshot_by_day=MappingProxyType(snapshot_by_day),
        pulls_by_day=MappingProxyType({day: tuple(items) for day, items in pulls_by_day.items()}),
        purchase_by_day=MappingProxyType(dict(purchase_by_day)),
        pull_days=pull_days,
        gain_days=tuple(day for day, _ in gains),
        gain_prefix=tuple(gain_prefix),
    )
