# views/dashboard.py
import logging

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from turnover_predictor.api import ApiClient, ApiError
from turnover_predictor.dashboard import (
    department_distribution_frame, department_risk_frame, has_risk_data, parse_stats,
    risk_status_frame, summary_cards, top_risk_frame,
)
from turnover_predictor.risk import RISK_COLORS, RISK_LEVELS, SEMANTIC_HEX
from turnover_predictor.session import SessionStore
from turnover_predictor.views.layout import metric_card

logger = logging.getLogger(__name__)


def _style_top_risk(view: pd.DataFrame, colors: pd.DataFrame) -> pd.DataFrame:
    styles = pd.DataFrame("", index=view.index, columns=view.columns)
    styles["Risk Level"] = [f"color: {SEMANTIC_HEX[c]}; font-weight: 600" for c in colors["risk_color"]]
    styles["Risk Score"] = [f"color: {SEMANTIC_HEX[c]}; font-weight: 500" for c in colors["score_color"]]
    return styles


def top_risk_table(frame: pd.DataFrame) -> None:
    if frame.empty:
        st.info("No at-risk employees to show.")
        return
    view = frame[["name", "department", "risk_level", "risk_score"]].rename(columns={
        "name": "Name", "department": "Department", "risk_level": "Risk Level", "risk_score": "Risk Score",
    })
    st.dataframe(view.style.apply(_style_top_risk, colors=frame, axis=None), hide_index=True)


def department_risk_chart(frame: pd.DataFrame) -> None:
    if frame.empty:
        st.info("No department risk data available.")
        return
    fig = go.Figure([
        go.Bar(name=level, x=frame["department"], y=frame[level], marker_color=RISK_COLORS[level])
        for level in RISK_LEVELS
    ])
    fig.update_layout(barmode="group", xaxis_title="Department", yaxis_title="Number of Employees",
                      xaxis_tickangle=-45, height=400, legend_title_text="Risk")
    st.plotly_chart(fig)


def risk_status_chart(frame: pd.DataFrame) -> None:
    if not has_risk_data(frame):
        st.info("No risk distribution data available")
        return
    fig = px.pie(frame, names="status", values="count", hole=0.5, color="status",
                 color_discrete_map=RISK_COLORS, category_orders={"status": list(RISK_LEVELS)})
    fig.update_traces(sort=False, textinfo="value+percent")
    fig.update_layout(height=400, legend_orientation="h")
    st.plotly_chart(fig)


def department_chart(frame: pd.DataFrame) -> None:
    if frame.empty:
        st.info("No department data available.")
        return
    fig = px.bar(frame, x="department", y="count", labels={"department": "Department", "count": "Count"})
    fig.update_layout(xaxis_tickangle=-45, height=400)
    st.plotly_chart(fig)


def render(session: SessionStore) -> None:
    st.header("Dashboard Overview")
    client = ApiClient(session)
    try:
        with st.spinner("Loading dashboard..."):
            raw_stats, top_risk, dept_risks = client.fetch_dashboard()
    except ApiError as exc:
        st.error(str(exc))
        return
    logger.debug("Dashboard stats: %s", raw_stats)

    stats = parse_stats(raw_stats)
    for col, card in zip(st.columns(4), summary_cards(stats)):
        with col:
            metric_card(card["title"], card["value"], card["trend"])

    st.divider()

    a, b = st.columns(2)
    with a:
        st.subheader("Top 5 Risk Employees")
        top_risk_table(top_risk_frame(top_risk))
    with b:
        st.subheader("Department Risk Distribution")
        department_risk_chart(department_risk_frame(dept_risks))

    c, d = st.columns(2)
    with c:
        st.subheader("Risk Status Distribution")
        risk_status_chart(risk_status_frame(stats))
    with d:
        st.subheader("Employee Distribution by Department")
        department_chart(department_distribution_frame(stats))
