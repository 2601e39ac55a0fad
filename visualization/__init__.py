"""Visualization utilities for PrimoLedger dashboards."""

from .charts import (
    build_balance_chart,
    build_income_bucket_chart,
    build_income_trend_chart,
)
from .theme import theme_tokens

__all__ = [
    "build_balance_chart",
    "build_income_bucket_chart",
    "build_income_trend_chart",
    "theme_tokens",
]
