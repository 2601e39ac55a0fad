"""Centralised configuration handling for PrimoLedger."""

from __future__ import annotations

import logging
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import streamlit as st
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.economy import DEFAULT_ECONOMY, EconomyConfig

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "seed"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _streamlit_section(name: str) -> Mapping[str, Any] | None:
    """Return a mapping from Streamlit secrets for the given section."""

    try:
        if hasattr(st, "secrets") and name in st.secrets:
            section = st.secrets[name]
            if isinstance(section, Mapping):
                return section
            return dict(section)
    except Exception:  # pragma: no cover - accessing secrets may fail in tests
        return None
    return None


class Settings(BaseSettings):
    """Application settings sourced from env vars and Streamlit secrets."""

    data_dir: Path = DEFAULT_DATA_DIR
    currency_per_pull: int = DEFAULT_ECONOMY.currency_per_pull
    banner_reference_date: date = DEFAULT_ECONOMY.banner_reference_date
    banner_period_days: int = DEFAULT_ECONOMY.banner_period_days
    lookback_days: int = DEFAULT_ECONOMY.lookback_days
    projection_days: int = DEFAULT_ECONOMY.projection_days
    rate_lookback_days: int = DEFAULT_ECONOMY.rate_lookback_days
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="LEDGER_", extra="ignore")

    def economy(self) -> EconomyConfig:
        return EconomyConfig(
            currency_per_pull=self.currency_per_pull,
            banner_reference_date=self.banner_reference_date,
            banner_period_days=self.banner_period_days,
            lookback_days=self.lookback_days,
            projection_days=self.projection_days,
            rate_lookback_days=self.rate_lookback_days,
        )


@lru_cache
def get_settings() -> Settings:
    """Load and cache application settings."""

    overrides: dict[str, Any] = {}
    secrets_section = _streamlit_section("ledger")
    if secrets_section:
        overrides = {key: secrets_section.get(key) for key in Settings.model_fields}

    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def configure_logging(level: str | int = "INFO") -> None:
    """Install a root handler once; later calls only adjust the level."""

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root.setLevel(level)
