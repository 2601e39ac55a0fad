"""Plotly chart builders for the PrimoLedger dashboard."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

from .theme import theme_tokens

TOKENS = theme_tokens()

__all__ = [
    "build_balance_chart",
    "build_income_bucket_chart",
    "build_income_trend_chart",
]


def _empty_plotly_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(
        annotations=[
            dict(
                text=message,
                x=0.5,
                y=0.5,
                xref="paper",
                yref="paper",
                showarrow=False,
                font=dict(color=TOKENS.muted_text, size=14, family=TOKENS.font_family),
            )
        ],
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
        margin=dict(l=0, r=0, t=20, b=0),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def _apply_layout(fig: go.Figure, yaxis_title: str) -> go.Figure:
    fig.update_layout(
        title="",
        yaxis_title=yaxis_title,
        margin=dict(l=0, r=0, t=20, b=0),
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1.0),
        xaxis=dict(showgrid=False),
        yaxis=dict(showgrid=True, gridcolor=TOKENS.gridline, zeroline=False),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def build_balance_chart(chart_df: pd.DataFrame, show_purchases: bool = True) -> go.Figure:
    """Reconstructed balance history joined to the linear projection."""

    if chart_df.empty:
        return _empty_plotly_figure("Add a snapshot to reconstruct your history.")

    hover_template = f"%{{x|{TOKENS.day_format}}}<br>%{{y:,.0f}}<extra></extra>"
    actual = chart_df[chart_df["Series"] == "Actual"]
    projected = chart_df[chart_df["Series"] == "Projected"]

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=actual["Day"],
            y=actual["Balance"],
            mode="lines",
            name="Reconstructed",
            line=dict(color=TOKENS.balance_line, width=3),
            fill="tozeroy",
            fillcolor=TOKENS.balance_fill,
            hovertemplate=hover_template,
        )
    )
    if show_purchases:
        fig.add_trace(
            go.Scatter(
                x=actual["Day"],
                y=actual["BalanceWithPurchases"],
                mode="lines",
                name="With purchases",
                line=dict(color=TOKENS.purchases_line, width=2),
                hovertemplate=hover_template,
            )
        )

    snapshots = actual[actual["IsSnapshot"]]
    if not snapshots.empty:
        fig.add_trace(
            go.Scatter(
                x=snapshots["Day"],
                y=snapshots["Balance"],
                mode="markers",
                name="Snapshots",
                marker=dict(size=10, color=TOKENS.snapshot_marker, line=dict(color=TOKENS.marker_outline, width=2)),
                hovertemplate=hover_template,
            )
        )

    if not projected.empty:
        fig.add_trace(
            go.Scatter(
                x=projected["Day"],
                y=projected["Balance"],
                mode="lines",
                name="Projected",
                line=dict(color=TOKENS.projection_line, width=2, dash="dash"),
                hovertemplate=hover_template,
            )
        )

    return _apply_layout(fig, "Balance")


def build_income_trend_chart(trend_df: pd.DataFrame, average_rate: float | None = None) -> go.Figure:
    """Daily income rate per banner period; estimated periods are drawn muted."""

    if trend_df.empty:
        return _empty_plotly_figure("Import pulls or add snapshots to see income trends.")

    colors = [
        TOKENS.ground_truth_bar if ground_truth else TOKENS.estimated_bar
        for ground_truth in trend_df["GroundTruth"]
    ]
    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=trend_df["Label"],
            y=trend_df["DailyRate"],
            name="Daily income rate",
            marker=dict(color=colors),
            customdata=trend_df[["TotalIncome", "Days"]].to_numpy(),
            hovertemplate="%{x}<br>%{y:,.0f}/day<br>%{customdata[0]:,.0f} over %{customdata[1]} days<extra></extra>",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=trend_df["Label"],
            y=trend_df["DailyRate"],
            mode="lines",
            name="Trend",
            line=dict(color=TOKENS.trend_line, width=2),
            hoverinfo="skip",
        )
    )
    if average_rate is not None:
        fig.add_hline(
            y=average_rate,
            line=dict(color=TOKENS.average_line, dash="dash"),
            annotation_text=f"Avg: {average_rate:,.0f}",
        )
    return _apply_layout(fig, "Daily rate")


def build_income_bucket_chart(bucket_df: pd.DataFrame) -> go.Figure:
    if bucket_df.empty:
        return _empty_plotly_figure("No ledger entries match these filters.")

    fig = go.Figure()
    for column, color in (
        ("Earned", TOKENS.earned_bar),
        ("Purchased", TOKENS.purchased_bar),
        ("Spent", TOKENS.spent_bar),
    ):
        fig.add_trace(
            go.Bar(
                x=bucket_df["Label"],
                y=bucket_df[column],
                name=column,
                marker=dict(color=color),
                customdata=bucket_df["Sources"],
                hovertemplate=f"%{{x}}<br>{column}: %{{y:,.0f}}<br>%{{customdata}}<extra></extra>",
            )
        )
    fig.update_layout(barmode="relative")
    return _apply_layout(fig, "Amount")
