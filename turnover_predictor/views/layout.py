# views/layout.py
from datetime import date

import plotly.express as px
import streamlit as st

from turnover_predictor.config import APP_NAME
from turnover_predictor.routing import DASHBOARD, EMPLOYEES, LOGIN, UPLOAD, param_from_path
from turnover_predictor.session import SessionStore

THEME_CSS = """
<style>
.card { border: 1px solid #e6e6e6; border-radius: 10px; padding: 14px 16px; background: linear-gradient(135deg, #ffffff 0%, #f5f5f5 100%); box-shadow: 0 1px 0 rgba(0,0,0,.03); }
.app-title { font-size: 22px; font-weight: 600; color: #1976d2; margin: 0; }
.app-footer { text-align: center; color: #6b7280; font-size: 13px; padding: 18px 0 6px 0; }
.app-footer a { color: inherit; }
hr { margin: .8rem 0; }
</style>
"""


def apply_theme() -> None:
    px.defaults.template = "plotly_white"
    px.defaults.color_discrete_sequence = ["#2196F3", "#4CAF50", "#FFC107", "#E91E63", "#9C27B0", "#FF5722"]
    st.markdown(THEME_CSS, unsafe_allow_html=True)


def navigate(path: str) -> None:
    st.query_params["page"] = param_from_path(path)
    st.rerun()


def logout(session: SessionStore) -> None:
    session.clear_token()
    session.reset_client_state()
    navigate(LOGIN)


def render_header(session: SessionStore) -> None:
    # nothing to navigate to before login
    if not session.is_authenticated:
        return
    title, nav_dash, nav_emp, nav_up, nav_out = st.columns([4, 1, 1, 1, 1])
    title.markdown(f"<p class='app-title'>📊 {APP_NAME}</p>", unsafe_allow_html=True)
    if nav_dash.button("Dashboard", key="nav_dashboard", width="stretch"):
        navigate(DASHBOARD)
    if nav_emp.button("Employees", key="nav_employees", width="stretch"):
        navigate(EMPLOYEES)
    if nav_up.button("Upload", key="nav_upload", width="stretch"):
        navigate(UPLOAD)
    if nav_out.button("Logout", key="nav_logout", width="stretch"):
        logout(session)
    st.divider()


def render_footer() -> None:
    st.markdown(
        f"<div class='app-footer'>© {date.today().year} {APP_NAME}. All rights reserved. "
        "<a href='/privacy'>Privacy Policy</a> | <a href='/terms'>Terms of Service</a></div>",
        unsafe_allow_html=True,
    )


def metric_card(title, value, trend=None):
    st.metric(title, value, delta=f"{trend:g}% vs last month" if trend is not None else None,
              border=True)
