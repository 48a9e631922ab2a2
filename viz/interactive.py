from __future__ import annotations

"""Plotly figures for the Streamlit charts panel.

Each builder takes one `ChartSeries` and returns a `plotly.graph_objects.Figure`.
"""

import plotly.graph_objects as go

from gametracker.ui_logic.chart_aggregator import ChartBundle, ChartSeries
from viz.plots import INTEREST_COLORS, REASON_COLORS, SCORE_COLOR

_LAYOUT = dict(
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    margin=dict(l=10, r=10, t=40, b=10),
    height=320,
)


def interest_figure(series: ChartSeries) -> go.Figure:
    fig = go.Figure(go.Pie(
        labels=series.labels,
        values=series.values,
        hole=0.5,
        marker=dict(colors=INTEREST_COLORS, line=dict(color="#2c2c2c", width=4)),
        sort=False,
    ))
    fig.update_layout(title=series.title, **_LAYOUT)
    return fig


def score_figure(series: ChartSeries) -> go.Figure:
    fig = go.Figure(go.Bar(
        x=series.values,
        y=series.labels,
        orientation="h",
        marker=dict(color=SCORE_COLOR, line=dict(color="#22c55e", width=2)),
    ))
    fig.update_layout(title=series.title, showlegend=False, **_LAYOUT)
    fig.update_xaxes(rangemode="tozero", dtick=1)
    return fig


def reason_figure(series: ChartSeries) -> go.Figure:
    fig = go.Figure(go.Pie(
        labels=series.labels,
        values=series.values,
        marker=dict(colors=REASON_COLORS, line=dict(color="#2c2c2c", width=4)),
        sort=False,
    ))
    fig.update_layout(title=series.title, **_LAYOUT)
    return fig


def build_figures(bundle: ChartBundle) -> dict[str, go.Figure]:
    return {
        "interest": interest_figure(bundle.interest),
        "scores": score_figure(bundle.scores),
        "reasons": reason_figure(bundle.reasons),
    }
