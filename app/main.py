"""PrimoLedger dashboard entrypoint."""

from __future__ import annotations

import logging

import streamlit as st

from app.layout import (
    NAV_LINKS,
    LedgerControls,
    determine_active_page,
    inject_css,
    render_navbar,
    render_sidebar_controls,
)
from app.pages import render_history_page, render_overview_page
from config import configure_logging, get_settings
from core.data_loader import LedgerDataError, load_ledger
from core.models import LedgerData
from core.ledger_service import prepare_ledger_data

logger = logging.getLogger(__name__)


@st.cache_data(show_spinner=False)
def _load_ledger_data(data_dir: str, controls: LedgerControls) -> LedgerData:
    """Load and cache ledger data for one combination of sidebar controls."""

    return prepare_ledger_data(
        data_dir,
        get_settings().economy(),
        lookback_days=controls.lookback_days,
        projection_days=controls.projection_days,
        rate_lookback_days=controls.rate_lookback_days,
        manual_rate=controls.manual_rate,
    )


def main() -> None:
    """Application entrypoint for the PrimoLedger dashboard."""

    st.set_page_config(
        page_title="PrimoLedger",
        page_icon="💎",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    settings = get_settings()
    configure_logging(settings.log_level)
    economy = settings.economy()

    inject_css()
    active_page = determine_active_page(link.slug for link in NAV_LINKS if link.enabled)
    render_navbar(active_page)
    controls = render_sidebar_controls(economy)

    data_dir = str(settings.data_dir)
    try:
        data = _load_ledger_data(data_dir, controls)
    except (FileNotFoundError, LedgerDataError) as exc:
        logger.error("Could not load ledger data: %s", exc)
        st.error(f"Could not load ledger data: {exc}")
        st.stop()
        return

    if active_page == "history":
        render_history_page(data, load_ledger(data_dir).purchases, economy)
    else:
        render_overview_page(data, show_purchases=controls.show_purchases)


if __name__ == "__main__":
    main()
