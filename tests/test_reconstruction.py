"""Tests for snapshot-anchored balance reconstruction."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from analytics.days import build_day_index, snapshot_total
from analytics.reconstruction import backward_pass, build_historical_data, forward_pass
from conftest import entry, pulls, snapshot


@pytest.fixture()
def march_ledger():
    snapshots = [
        snapshot(date(2024, 3, 1), 1000, fates=2),
        snapshot(date(2024, 3, 10), 2000),
        snapshot(date(2024, 3, 20), 500, fates=1),
    ]
    pull_records = (
        pulls(date(2024, 3, 5), 3)
        + pulls(date(2024, 3, 15), 2, "weapon")
        + pulls(date(2024, 3, 15), 4, "standard")
        + pulls(date(2024, 3, 22), 1)
    )
    purchases = [entry(date(2024, 3, 12), 300), entry(date(2024, 3, 21), 500)]
    return snapshots, pull_records, purchases


def _by_day(points):
    return {point.day: point for point in points}


def test_no_snapshots_yields_empty_series(economy):
    result = build_historical_data([], pulls(date(2024, 3, 5), 3), [], economy, today=date(2024, 3, 25))

    assert result == ()


def test_single_snapshot_forward_subtracts_pull_spend(economy):
    result = build_historical_data(
        [snapshot(date(2024, 3, 6), 3000, hour=10)],
        pulls(date(2024, 3, 8), 2),
        [],
        economy,
        today=date(2024, 3, 8),
    )

    assert [point.day for point in result] == [date(2024, 3, 6), date(2024, 3, 7), date(2024, 3, 8)]
    assert [point.balance for point in result] == [3000, 3000, 2680]
    assert result[0].is_snapshot_day
    assert result[-1].is_today


def test_single_snapshot_backward_pass_is_constant(economy):
    index = build_day_index([snapshot(date(2024, 3, 6), 3000)], [], [], economy)

    history = backward_pass(index, date(2024, 3, 6), date(2024, 3, 1), date(2024, 3, 8), economy)

    assert [point.day for point in history] == [date(2024, 3, day) for day in range(1, 6)]
    assert all(point.balance == 3000 for point in history)
    assert all(point.balance_with_purchases == 3000 for point in history)


def test_snapshot_days_match_snapshot_totals_exactly(march_ledger, economy):
    snapshots, pull_records, purchases = march_ledger

    result = _by_day(build_historical_data(snapshots, pull_records, purchases, economy, today=date(2024, 3, 25)))

    for snap in snapshots:
        point = result[snap.timestamp.date()]
        assert point.is_snapshot_day
        assert point.balance == snapshot_total(snap, economy)
        assert point.balance_with_purchases == snapshot_total(snap, economy)
    assert result[date(2024, 3, 1)].balance == 1320
    assert result[date(2024, 3, 20)].balance == 660


def test_backward_pass_reverses_following_day_activity(march_ledger, economy):
    snapshots, pull_records, purchases = march_ledger

    result = _by_day(build_historical_data(snapshots, pull_records, purchases, economy, today=date(2024, 3, 25)))

    # the day before a snapshot is not adjusted: the snapshot already holds that day's activity
    assert result[date(2024, 3, 19)].balance == 660
    assert result[date(2024, 3, 15)].balance == 660
    # weapon pulls on the 15th are added back; standard pulls never cost currency
    assert result[date(2024, 3, 14)].balance == 980
    assert result[date(2024, 3, 12)].balance_with_purchases == 980
    assert result[date(2024, 3, 11)].balance == 980
    assert result[date(2024, 3, 11)].balance_with_purchases == 680
    assert result[date(2024, 3, 4)].balance == 2480
    assert result[date(2024, 3, 2)].balance == 2480


def test_forward_pass_applies_purchases_after_anchor_only(march_ledger, economy):
    snapshots, pull_records, purchases = march_ledger
    index = build_day_index(snapshots, pull_records, purchases, economy)

    forward = _by_day(forward_pass(index, date(2024, 3, 20), date(2024, 3, 25), economy))

    assert forward[date(2024, 3, 20)].balance_with_purchases == 660
    assert forward[date(2024, 3, 21)].balance == 660
    assert forward[date(2024, 3, 21)].balance_with_purchases == 1160
    assert forward[date(2024, 3, 22)].balance == 500
    assert forward[date(2024, 3, 22)].balance_with_purchases == 1000
    assert forward[date(2024, 3, 25)].balance == 500


def test_series_covers_effective_start_through_today(march_ledger, economy):
    snapshots, pull_records, purchases = march_ledger

    result = build_historical_data(snapshots, pull_records, purchases, economy, today=date(2024, 3, 25))

    days = [point.day for point in result]
    assert days[0] == date(2024, 3, 1)
    assert days[-1] == date(2024, 3, 25)
    assert len(days) == 25
    assert all(later - earlier == timedelta(days=1) for earlier, later in zip(days, days[1:]))


def test_lookback_horizon_trims_older_days(march_ledger, economy):
    snapshots, pull_records, purchases = march_ledger

    result = build_historical_data(
        snapshots, pull_records, purchases, economy, lookback_days=5, today=date(2024, 3, 25)
    )

    assert result[0].day == date(2024, 3, 20)
    assert result[-1].day == date(2024, 3, 25)


def test_anchor_older_than_lookback_still_emits_window(economy):
    result = build_historical_data(
        [snapshot(date(2024, 1, 1), 800)],
        pulls(date(2024, 3, 10), 1),
        [],
        economy,
        lookback_days=10,
        today=date(2024, 3, 20),
    )

    assert result[0].day == date(2024, 3, 10)
    assert result[0].balance == 640
    assert result[-1].day == date(2024, 3, 20)


def test_balances_are_clamped_at_zero(economy):
    result = build_historical_data(
        [snapshot(date(2024, 3, 1), 100)],
        pulls(date(2024, 3, 2), 3),
        [entry(date(2024, 3, 3), -400, "cosmetic")],
        economy,
        today=date(2024, 3, 4),
    )

    assert result[-1].balance == 0
    assert result[-1].balance_with_purchases == 0
    assert all(point.balance >= 0 and point.balance_with_purchases >= 0 for point in result)


def test_cumulative_counters_never_decrease(march_ledger, economy):
    snapshots, pull_records, purchases = march_ledger
    purchases = purchases + [entry(date(2024, 3, 13), -200, "cosmetic")]

    result = build_historical_data(snapshots, pull_records, purchases, economy, today=date(2024, 3, 25))

    pulls_seen = [point.cumulative_pulls for point in result]
    purchases_seen = [point.cumulative_purchases for point in result]
    assert pulls_seen == sorted(pulls_seen)
    assert purchases_seen == sorted(purchases_seen)
    by_day = _by_day(result)
    assert by_day[date(2024, 3, 4)].cumulative_pulls == 0
    assert by_day[date(2024, 3, 15)].cumulative_pulls == 5
    assert by_day[date(2024, 3, 25)].cumulative_pulls == 6
    assert by_day[date(2024, 3, 21)].cumulative_purchases == 800


def test_same_day_snapshots_last_one_wins(economy):
    early = snapshot(date(2024, 3, 10), 500, hour=9, snapshot_id="early")
    late = snapshot(date(2024, 3, 10), 800, hour=21, snapshot_id="late")

    result = build_historical_data([late, early], [], [], economy, today=date(2024, 3, 10))

    assert len(result) == 1
    assert result[0].balance == 800


def test_reconstruction_is_idempotent(march_ledger, economy):
    snapshots, pull_records, purchases = march_ledger

    first = build_historical_data(snapshots, pull_records, purchases, economy, today=date(2024, 3, 25))
    second = build_historical_data(snapshots, pull_records, purchases, economy, today=date(2024, 3, 25))

    assert first == second
