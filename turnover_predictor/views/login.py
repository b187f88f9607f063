# views/login.py
import streamlit as st

from turnover_predictor.api import ApiClient, ApiError
from turnover_predictor.config import APP_NAME
from turnover_predictor.routing import DASHBOARD
from turnover_predictor.session import SessionStore
from turnover_predictor.views.layout import navigate


def render(session: SessionStore) -> None:
    st.markdown(f"<h2 style='text-align:center;color:#1976d2;'>{APP_NAME}</h2>", unsafe_allow_html=True)
    _, center, _ = st.columns([1, 2, 1])
    with center:
        st.subheader("Sign in")
        username = st.text_input("Username", key="login_username")
        password = st.text_input("Password", type="password", key="login_password")
        if st.button("Log in", key="login_submit", type="primary"):
            try:
                with st.spinner("Signing in..."):
                    ApiClient(session).login(username, password)
            except ApiError as exc:
                st.error(str(exc))
                return
            # employees cached for a previous login are stale now
            session.clear_employees()
            navigate(DASHBOARD)
