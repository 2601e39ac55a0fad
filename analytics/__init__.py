"""Analytics helpers shared across PrimoLedger services."""

from analytics.days import DayIndex, build_day_index, record_day, snapshot_total
from analytics.forecasting import (
    build_chart_data,
    build_chart_frame,
    build_projection,
    days_until_pity,
    projected_pulls,
)
from analytics.rates import (
    estimate_daily_rate,
    rate_from_pulls,
    rate_from_snapshots,
    resolve_effective_rate,
)
from analytics.reconstruction import backward_pass, build_historical_data, forward_pass
from analytics.spending import (
    calculate_available_pulls,
    calculate_pull_spending,
    extract_costing_pulls,
    is_costing_pull,
)
from analytics.transactions import build_transaction_log, filter_transaction_log
from analytics.trends import (
    IncomeBucket,
    IncomeBucketFilters,
    TrendSummary,
    bucket_income_entries,
    calculate_income_rate_trend,
    period_bounds,
    period_index,
    split_income,
    summarize_trend,
)

__all__ = [
    "DayIndex",
    "build_day_index",
    "record_day",
    "snapshot_total",
    "build_chart_data",
    "build_chart_frame",
    "build_projection",
    "days_until_pity",
    "projected_pulls",
    "estimate_daily_rate",
    "rate_from_pulls",
    "rate_from_snapshots",
    "resolve_effective_rate",
    "backward_pass",
    "build_historical_data",
    "forward_pass",
    "calculate_available_pulls",
    "calculate_pull_spending",
    "extract_costing_pulls",
    "is_costing_pull",
    "build_transaction_log",
    "filter_transaction_log",
    "IncomeBucket",
    "IncomeBucketFilters",
    "TrendSummary",
    "bucket_income_entries",
    "calculate_income_rate_trend",
    "period_bounds",
    "period_index",
    "split_income",
    "summarize_trend",
]
