# views/upload.py
import streamlit as st

from turnover_predictor.api import ApiClient, ApiError
from turnover_predictor.models import is_csv_file
from turnover_predictor.session import SessionStore

INSTRUCTIONS = """
1. Prepare your employee data in a CSV file with the following columns:
    - Name
    - Department
    - Position
    - Email
    - Salary
    - Performance Score
    - Projects (comma-separated)
    - Skills (comma-separated)
2. Make sure all required fields are filled and data is properly formatted.
3. Choose the file above and press **Upload**.
"""


def render(session: SessionStore) -> None:
    st.header("Upload Employee Data")
    uploaded = st.file_uploader("Choose File", key="upload_file", help="Supported format: CSV")

    if uploaded is not None and st.button("Upload", key="upload_submit", type="primary"):
        if not is_csv_file(uploaded.name, uploaded.type):
            st.error("Please upload a CSV file")
        else:
            try:
                with st.spinner("Uploading..."):
                    ApiClient(session).upload_employees(uploaded.name, uploaded.getvalue(),
                                                        uploaded.type or "text/csv")
            except ApiError as exc:
                st.error(str(exc))
            else:
                # roster changed server-side
                session.clear_employees()
                st.success(f"Uploaded {uploaded.name}")

    st.subheader("Instructions")
    st.markdown(INSTRUCTIONS)
