"""Tests for banner-period income trends and calendar income buckets."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from analytics.trends import (
    IncomeBucketFilters,
    active_sources,
    bucket_income_entries,
    build_bucket_frame,
    build_source_frame,
    build_trend_frame,
    calculate_income_rate_trend,
    classify_entry,
    period_bounds,
    period_index,
    split_income,
    summarize_trend,
)
from core.models import PeriodTrendPoint
from conftest import entry, pulls, snapshot


@pytest.fixture()
def ledger_entries():
    return [
        entry(date(2024, 1, 1), 100, "daily_commission"),
        entry(date(2024, 1, 3), 300, "purchase"),
        entry(date(2024, 1, 7), -50, "cosmetic"),
        entry(date(2024, 1, 8), 200, "event"),
    ]


def _trend_point(rate: float) -> PeriodTrendPoint:
    return PeriodTrendPoint(
        period_start=date(2024, 1, 1),
        period_end=date(2024, 1, 21),
        daily_rate=rate,
        total_income=rate * 21,
        days=21,
        is_ground_truth=False,
        label="Jan 01",
    )


def test_period_index_uses_floor_division(economy):
    assert period_index(date(2024, 1, 1), economy) == 0
    assert period_index(date(2024, 1, 21), economy) == 0
    assert period_index(date(2024, 1, 22), economy) == 1
    assert period_index(date(2023, 12, 31), economy) == -1
    assert period_bounds(-1, economy) == (date(2023, 12, 11), date(2023, 12, 31))


def test_trend_periods_are_contiguous_through_today(economy):
    today = date(2024, 2, 20)
    pull_records = pulls(date(2023, 12, 20), 2) + pulls(date(2024, 2, 1), 4)

    points = calculate_income_rate_trend([], pull_records, economy, today)

    assert [point.period_start for point in points] == [
        date(2023, 12, 11),
        date(2024, 1, 1),
        date(2024, 1, 22),
        date(2024, 2, 12),
    ]
    for earlier, later in zip(points, points[1:]):
        assert later.period_start == earlier.period_end + timedelta(days=1)
    assert points[-1].period_end == today
    assert points[-1].days == 9


def test_trend_uses_snapshots_as_ground_truth(economy):
    snapshots = [snapshot(date(2024, 1, 1), 1000), snapshot(date(2024, 1, 15), 2080)]
    pull_records = pulls(date(2024, 1, 10), 2) + pulls(date(2024, 1, 25), 3)

    first, second = calculate_income_rate_trend(snapshots, pull_records, economy, date(2024, 2, 11))

    assert first.is_ground_truth
    assert first.daily_rate == pytest.approx(100.0)
    assert first.total_income == pytest.approx(2100.0)
    assert not second.is_ground_truth
    assert second.total_income == pytest.approx(480.0)
    assert second.daily_rate == pytest.approx(480 / 21)


def test_trend_is_empty_without_data(economy):
    assert calculate_income_rate_trend([], [], economy, date(2024, 2, 11)) == []


def test_summarize_trend_compares_halves():
    summary = summarize_trend([_trend_point(rate) for rate in (10, 20, 30, 40)])

    assert summary["average_rate"] == pytest.approx(25.0)
    assert summary["early_average"] == pytest.approx(15.0)
    assert summary["recent_average"] == pytest.approx(35.0)
    assert summary["change_percent"] == pytest.approx(400 / 3)


def test_summarize_trend_needs_four_periods():
    summary = summarize_trend([_trend_point(rate) for rate in (10, 20, 30)])

    assert summary["average_rate"] == pytest.approx(20.0)
    assert summary["change_percent"] is None
    assert summarize_trend([])["average_rate"] == 0.0


def test_trend_frame_columns(economy):
    points = calculate_income_rate_trend([], pulls(date(2024, 1, 5), 2), economy, date(2024, 1, 10))

    frame = build_trend_frame(points)

    assert frame["Label"].tolist() == ["Jan 01"]
    assert frame["GroundTruth"].tolist() == [False]
    assert frame["TotalIncome"].tolist() == [320.0]


def test_classify_and_split_income(ledger_entries, economy):
    assert classify_entry("purchase", economy) == "purchased"
    assert classify_entry("cosmetic", economy) == "spent"
    assert classify_entry("abyss", economy) == "earned"

    totals = split_income(ledger_entries, economy)

    assert totals == {"earned": 300.0, "purchased": 300.0, "spent": -50.0, "total": 550.0}


def test_weekly_buckets_start_on_monday(ledger_entries, economy):
    buckets = bucket_income_entries(ledger_entries, IncomeBucketFilters(), economy)

    assert [bucket["label"] for bucket in buckets] == ["2024-01-01", "2024-01-08"]
    first = buckets[0]
    assert first["total"] == pytest.approx(350.0)
    assert first["earned"] == pytest.approx(100.0)
    assert first["purchased"] == pytest.approx(300.0)
    assert first["spent"] == pytest.approx(-50.0)
    assert first["sources"]["daily_commission"] == pytest.approx(100.0)
    assert first["sources"]["abyss"] == 0.0
    assert buckets[1]["total"] == pytest.approx(200.0)


def test_monthly_buckets(ledger_entries, economy):
    buckets = bucket_income_entries(ledger_entries, IncomeBucketFilters(interval="month"), economy)

    assert len(buckets) == 1
    assert buckets[0]["label"] == "2024-01"
    assert buckets[0]["bucket_start"] == date(2024, 1, 1)
    assert buckets[0]["total"] == pytest.approx(550.0)


def test_bucket_filters(ledger_entries, economy):
    without_purchases = bucket_income_entries(
        ledger_entries, IncomeBucketFilters(include_purchases=False), economy
    )
    events_only = bucket_income_entries(ledger_entries, IncomeBucketFilters(source="event"), economy)
    from_second_week = bucket_income_entries(
        ledger_entries, IncomeBucketFilters(start_date=date(2024, 1, 8)), economy
    )

    assert without_purchases[0]["total"] == pytest.approx(50.0)
    assert [bucket["label"] for bucket in events_only] == ["2024-01-08"]
    assert [bucket["label"] for bucket in from_second_week] == ["2024-01-08"]
    assert bucket_income_entries(ledger_entries, IncomeBucketFilters(source="codes"), economy) == []


def test_bucket_frame(ledger_entries, economy):
    frame = build_bucket_frame(bucket_income_entries(ledger_entries, IncomeBucketFilters(), economy))

    assert frame["Total"].tolist() == [350.0, 200.0]
    assert build_bucket_frame([]).empty


def test_bucket_frame_keeps_per_source_breakdown(ledger_entries, economy):
    buckets = bucket_income_entries(ledger_entries, IncomeBucketFilters(), economy)

    frame = build_bucket_frame(buckets)

    assert active_sources(buckets[0]) == [("purchase", 300.0), ("daily_commission", 100.0), ("cosmetic", -50.0)]
    assert frame["Sources"].tolist() == [
        "purchase: 300<br>daily_commission: 100<br>cosmetic: -50",
        "event: 200",
    ]


def test_source_frame_pivots_non_zero_sources(ledger_entries, economy):
    buckets = bucket_income_entries(ledger_entries, IncomeBucketFilters(), economy)

    table = build_source_frame(buckets)

    assert list(table.index) == ["2024-01-01", "2024-01-08"]
    assert sorted(table.columns) == ["cosmetic", "daily_commission", "event", "purchase"]
    assert table.loc["2024-01-08", "event"] == pytest.approx(200.0)
    assert table.loc["2024-01-08", "purchase"] == 0.0
    assert build_source_frame([]).empty


def test_date_range_filters_bucket_sources(ledger_entries, economy):
    filters = IncomeBucketFilters(start_date=date(2024, 1, 2), end_date=date(2024, 1, 7))

    (bucket,) = bucket_income_entries(ledger_entries, filters, economy)

    assert active_sources(bucket) == [("purchase", 300.0), ("cosmetic", -50.0)]
    assert bucket["total"] == pytest.approx(250.0)
