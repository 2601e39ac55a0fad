"""Tests for the linear projection and chart series."""

from __future__ import annotations

from datetime import date

import pytest

from analytics.forecasting import (
    build_chart_data,
    build_chart_frame,
    build_projection,
    days_until_pity,
    projected_pulls,
)
from analytics.reconstruction import build_historical_data
from conftest import pulls, snapshot


@pytest.fixture()
def short_history(economy):
    return build_historical_data(
        [snapshot(date(2024, 3, 6), 3000, hour=10)],
        pulls(date(2024, 3, 8), 2),
        [],
        economy,
        today=date(2024, 3, 8),
    )


def test_projection_is_linear_from_day_zero():
    points = build_projection(1000, 50, 3, date(2024, 3, 1))

    assert [point.day for point in points] == [date(2024, 3, day) for day in range(1, 5)]
    assert [point.projected_balance for point in points] == [1000, 1050, 1100, 1150]
    assert [point.is_today for point in points] == [True, False, False, False]


def test_projection_never_goes_negative():
    points = build_projection(100, -60, 3, date(2024, 3, 1))

    assert [point.projected_balance for point in points] == [100, 40, 0, 0]


def test_chart_data_appends_projection_after_history(short_history):
    points = build_chart_data(short_history, 100, 2, date(2024, 3, 8))

    assert len(points) == 5
    history, projection = points[:3], points[3:]
    assert all(point.projected is None for point in history)
    assert [point.historical for point in history] == [3000, 3000, 2680]
    assert all(point.historical is None for point in projection)
    assert [point.projected for point in projection] == [2780, 2880]
    assert [point.day for point in projection] == [date(2024, 3, 9), date(2024, 3, 10)]
    assert all(point.cumulative_pulls == 2 for point in projection)


def test_chart_data_without_history_projects_from_zero():
    points = build_chart_data([], 30, 2, date(2024, 3, 8))

    assert [point.projected for point in points] == [30, 60]
    assert points[0].day == date(2024, 3, 9)


def test_chart_frame_joins_actual_and_projected_lines(short_history):
    frame = build_chart_frame(build_chart_data(short_history, 100, 2, date(2024, 3, 8)))

    actual = frame[frame["Series"] == "Actual"]
    projected = frame[frame["Series"] == "Projected"]
    assert len(actual) == 3
    assert len(projected) == 3
    assert projected["Balance"].tolist() == [2680, 2780, 2880]
    assert actual["IsSnapshot"].tolist() == [True, False, False]


def test_chart_frame_empty_input_keeps_columns():
    frame = build_chart_frame([])

    assert frame.empty
    assert list(frame.columns) == ["Day", "Balance", "BalanceWithPurchases", "Series", "IsSnapshot"]


def test_days_until_pity(economy):
    assert days_until_pity(160, economy) == 90
    assert days_until_pity(150, economy) == 96
    assert days_until_pity(0, economy) is None


def test_projected_pulls(economy):
    assert projected_pulls(1600, 80, 10, economy) == pytest.approx(15.0)
    assert projected_pulls(100, -50, 10, economy) == 0.0
