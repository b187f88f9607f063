# app.py
import logging

import streamlit as st

from turnover_predictor.config import APP_NAME, configure_logging
from turnover_predictor.routing import (
    DASHBOARD, EMPLOYEES, LOGIN, UPLOAD, param_from_path, path_from_param, resolve_route,
)
from turnover_predictor.session import SessionStore
from turnover_predictor.views import dashboard, employees, login, upload
from turnover_predictor.views.layout import apply_theme, render_footer, render_header

configure_logging()
logger = logging.getLogger("turnover_predictor.app")

# ======================== APP CONFIG / THEME ========================
st.set_page_config(
    page_title=APP_NAME,
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="collapsed",
)
apply_theme()

PAGES = {
    LOGIN: login.render,
    DASHBOARD: dashboard.render,
    EMPLOYEES: employees.render,
    UPLOAD: upload.render,
}

# ======================== SESSION / ROUTING ========================
session = SessionStore(st.session_state)

requested = path_from_param(st.query_params.get("page"))
route = resolve_route(requested, session.is_authenticated)
if route != requested:
    logger.debug("Redirecting %s -> %s", requested, route)
    st.query_params["page"] = param_from_path(route)

# ======================== LAYOUT ========================
render_header(session)
PAGES[route](session)
render_footer()
