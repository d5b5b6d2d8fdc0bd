from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from config import THEME

CHART_COLORS = ["#8884D8", "#82CA9D", "#FFC658", "#FF8042", THEME["accent_primary"], THEME["purple_800"]]


@dataclass(frozen=True)
class Kpi:
    label: str
    value: str
    icon: str = ""
    help: Optional[str] = None


def render_kpi_row(kpis: list[Kpi]) -> None:
    cols = st.columns(len(kpis))
    for c, k in zip(cols, kpis):
        with c:
            title = f' title="{k.help}"' if k.help else ""
            st.markdown(
                f"""
<div class="metric-card"{title}>
  <div class="metric-label">{k.icon} {k.label}</div>
  <div class="metric-value">{k.value}</div>
</div>
                """,
                unsafe_allow_html=True,
            )


def render_share_bars(rows: pd.DataFrame, label_col: str, value_col: str, share_col: str, value_fmt=str) -> None:
    """Label + value + proportional bar per row (registration overview style)."""
    for _, row in rows.iterrows():
        share = max(0.0, min(100.0, float(row[share_col])))
        st.markdown(
            f"""
<div class="share-row">
  <div class="share-row-head"><span>{row[label_col]}</span><b>{value_fmt(row[value_col])}</b></div>
  <div class="share-track"><div class="share-fill" style="width:{share:.1f}%"></div></div>
</div>
            """,
            unsafe_allow_html=True,
        )


def apply_plotly_theme(fig: go.Figure, x_title: str = "", y_title: str = "") -> go.Figure:
    fig.update_layout(
        margin=dict(l=10, r=10, t=44, b=10),
        font=dict(family="Nunito, system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif", color=THEME["text_primary"]),
        paper_bgcolor=THEME["bg_card"],
        plot_bgcolor=THEME["bg_card"],
        colorway=CHART_COLORS,
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0),
        title_font=dict(color=THEME["purple_900"], size=16),
    )
    fig.update_xaxes(title_text=x_title, gridcolor=THEME["grid"], zeroline=False, linecolor=THEME["border_color"])
    fig.update_yaxes(title_text=y_title, gridcolor=THEME["grid"], zeroline=False, linecolor=THEME["border_color"])
    return fig


def line_chart(df: pd.DataFrame, x: str, y: str, title: str = "", x_title: str = "", y_title: str = "") -> None:
    fig = px.line(df, x=x, y=y, title=title, markers=True)
    fig.update_traces(line=dict(width=3))
    st.plotly_chart(apply_plotly_theme(fig, x_title or x, y_title or y), use_container_width=True)


def bar_chart(df: pd.DataFrame, x: str, y: str, title: str = "", horizontal: bool = False) -> None:
    if horizontal:
        fig = px.bar(df, x=y, y=x, orientation="h", title=title)
        fig.update_yaxes(autorange="reversed")
        fig = apply_plotly_theme(fig, y, "")
    else:
        fig = apply_plotly_theme(px.bar(df, x=x, y=y, title=title), x, y)
    st.plotly_chart(fig, use_container_width=True)


def pie_chart(df: pd.DataFrame, names: str, values: str, title: str = "") -> None:
    fig = px.pie(df, names=names, values=values, title=title, color_discrete_sequence=CHART_COLORS)
    fig.update_traces(textinfo="label+percent")
    st.plotly_chart(apply_plotly_theme(fig), use_container_width=True)
