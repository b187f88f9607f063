# views/employees.py
import logging
from datetime import date
from typing import Any, Dict, List, Optional

import streamlit as st

from turnover_predictor.api import ApiClient, ApiError
from turnover_predictor.config import DEFAULT_PAGE_SIZE, PAGE_SIZES
from turnover_predictor.employee_table import (
    RISK_FILTERS, SORT_FIELDS, build_table_view, delete_employee, save_employee,
)
from turnover_predictor.models import RISK_LEVEL_CHOICES, employee_from_form
from turnover_predictor.risk import backend_label, chip_color, colored, table_label
from turnover_predictor.session import SessionStore

logger = logging.getLogger(__name__)

NEW = "__new__"
SORT_LABELS = {
    "name": "Name", "department": "Department", "position": "Position",
    "risk_level": "Risk Level", "salary": "Salary",
}
COLUMN_WIDTHS = [3, 2, 2, 1.3, 1.5, 3, 0.8, 0.8]


# ---------------------- STATE HELPERS ----------------------
def load_employees(client: ApiClient, session: SessionStore) -> List[Dict[str, Any]]:
    """The shared employee list, fetched once per login / reload."""
    cached = session.cached_employees()
    if cached is not None:
        return cached
    try:
        with st.spinner("Loading employees..."):
            employees = client.list_employees()
    except ApiError as exc:
        st.error(str(exc))
        return []
    session.cache_employees(employees)
    return employees


def _reset_page():
    st.session_state["emp_page"] = 0


def _shift_page(step: int):
    st.session_state["emp_page"] = max(0, st.session_state.get("emp_page", 0) + step)


def _parse_date(value) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _float_or_none(value) -> Optional[float]:
    try:
        return float(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


def format_salary(salary) -> str:
    if salary is None or salary == "":
        return "-"
    try:
        return f"${float(salary):,.0f}"
    except (TypeError, ValueError):
        return str(salary)


# ---------------------- TOOLBAR ----------------------
def _export(client: ApiClient, fmt: str, with_recommendations: bool):
    try:
        with st.spinner("Preparing export..."):
            if with_recommendations:
                st.session_state["export_file"] = client.export_with_recommendations(fmt)
            else:
                st.session_state["export_file"] = client.export(fmt)
    except ApiError as exc:
        st.session_state.pop("export_file", None)
        st.error(str(exc))


def toolbar(client: ApiClient) -> None:
    title, add, excel, pdf = st.columns([4, 1.3, 1.3, 1.3])
    title.header("Employees")
    if add.button("➕ Add Employee", key="add_employee", type="primary", width="stretch"):
        st.session_state["editing"] = NEW
    for col, fmt, label in ((excel, "excel", "Export Excel"), (pdf, "pdf", "Export PDF")):
        with col.popover(f"⬇️ {label}"):
            if st.button("Basic Export", key=f"export_{fmt}"):
                _export(client, fmt, False)
            if st.button("With Recommendations", key=f"export_rec_{fmt}"):
                _export(client, fmt, True)

    export_file = st.session_state.get("export_file")
    if export_file is not None:
        st.download_button(f"📥 Download {export_file.filename}", export_file.content,
                           file_name=export_file.filename, mime=export_file.mime, key="export_download")


def filters() -> None:
    search, risk, sort_field, sort_order = st.columns([4, 1.5, 1.5, 1.5])
    search.text_input("Search employees", key="emp_search", on_change=_reset_page)
    risk.selectbox("Risk Level", RISK_FILTERS, key="emp_risk", format_func=str.capitalize,
                   on_change=_reset_page)
    sort_field.selectbox("Sort by", SORT_FIELDS, key="emp_sort_field", format_func=SORT_LABELS.get)
    sort_order.radio("Order", ["asc", "desc"], key="emp_sort_order", horizontal=True,
                     format_func=lambda o: "Ascending" if o == "asc" else "Descending")


# ---------------------- DIALOGS ----------------------
def confirm_delete(client: ApiClient, session: SessionStore, employees: List[Dict[str, Any]]) -> None:
    employee_id = st.session_state.get("pending_delete")
    if not employee_id:
        return
    target = next((e for e in employees if e.get("_id") == employee_id), None)
    if target is None:
        st.session_state.pop("pending_delete", None)
        return
    st.warning(f"Are you sure you want to delete {target.get('name', 'this employee')}?")
    ok, cancel, _ = st.columns([1, 1, 6])
    if ok.button("Delete", key="confirm_delete", type="primary"):
        session.cache_employees(delete_employee(client, employees, employee_id))
        st.session_state.pop("pending_delete", None)
        st.rerun()
    if cancel.button("Cancel", key="cancel_delete"):
        st.session_state.pop("pending_delete", None)
        st.rerun()


def employee_form(client: ApiClient, session: SessionStore, employees: List[Dict[str, Any]]) -> None:
    editing = st.session_state.get("editing")
    if not editing:
        return
    existing = {} if editing == NEW else next((e for e in employees if e.get("_id") == editing), {})
    employee_id = None if editing == NEW else editing
    prefix = f"form_{editing}"

    with st.form(key=f"{prefix}_form"):
        st.subheader("Add Employee" if editing == NEW else f"Edit {existing.get('name', 'Employee')}")
        c1, c2, c3 = st.columns(3)
        values = {
            "first_name": c1.text_input("First name", existing.get("first_name", ""), key=f"{prefix}_first"),
            "last_name": c2.text_input("Last name", existing.get("last_name", ""), key=f"{prefix}_last"),
            "name": c3.text_input("Display name", existing.get("name", ""), key=f"{prefix}_name"),
            "email": c1.text_input("Email", existing.get("email", ""), key=f"{prefix}_email"),
            "department": c2.text_input("Department", existing.get("department", ""), key=f"{prefix}_dept"),
            "position": c3.text_input("Position", existing.get("position", ""), key=f"{prefix}_position"),
            "risk_level": c1.selectbox(
                "Risk level", RISK_LEVEL_CHOICES,
                index=RISK_LEVEL_CHOICES.index(backend_label(existing.get("risk_level"))),
                key=f"{prefix}_risk"),
            "turnover_probability": c2.number_input(
                "Turnover probability", min_value=0.0, max_value=1.0, step=0.01,
                value=_float_or_none(existing.get("turnover_probability")) or 0.0, key=f"{prefix}_prob"),
            "salary": c3.number_input("Salary", min_value=0.0, step=1000.0,
                                      value=_float_or_none(existing.get("salary")), key=f"{prefix}_salary"),
            "performance_score": c1.number_input("Performance score", min_value=0.0,
                                                 value=_float_or_none(existing.get("performance_score")),
                                                 key=f"{prefix}_perf"),
            "hire_date": c2.date_input("Hire date", _parse_date(existing.get("hire_date")),
                                       key=f"{prefix}_hired"),
            "last_evaluation_date": c3.date_input(
                "Last evaluation", _parse_date(existing.get("last_evaluation_date")), key=f"{prefix}_eval"),
            "projects": st.text_area("Projects (comma-separated)", ", ".join(existing.get("projects") or []),
                                     key=f"{prefix}_projects"),
            "skills": st.text_area("Skills (comma-separated)", ", ".join(existing.get("skills") or []),
                                   key=f"{prefix}_skills"),
        }
        save, cancel, _ = st.columns([1, 1, 6])
        submitted = save.form_submit_button("Save", type="primary")
        cancelled = cancel.form_submit_button("Cancel")

    if cancelled:
        st.session_state.pop("editing", None)
        st.rerun()
    if submitted:
        employee = employee_from_form({**existing, **values}, employee_id)
        try:
            with st.spinner("Saving..."):
                save_employee(client, employee.to_payload(), employee_id)
        except ApiError as exc:
            st.error(str(exc))
            return
        # full reload: drop every cached list and widget, keep the login
        session.reset_client_state()
        st.rerun()


# ---------------------- TABLE ----------------------
def employee_rows(rows: List[Dict[str, Any]]) -> None:
    head = st.columns(COLUMN_WIDTHS)
    for col, label in zip(head, ["Name", "Department", "Position", "Risk Level", "Salary", "Email", "", ""]):
        col.markdown(f"**{label}**")
    for emp in rows:
        emp_id = emp.get("_id")
        cols = st.columns(COLUMN_WIDTHS)
        cols[0].write(emp.get("name", ""))
        cols[1].write(emp.get("department", ""))
        cols[2].write(emp.get("position", ""))
        cols[3].markdown(colored(table_label(emp.get("risk_level")), chip_color(emp.get("risk_level"))))
        cols[4].write(format_salary(emp.get("salary")))
        cols[5].write(emp.get("email", ""))
        if cols[6].button("✏️", key=f"edit_{emp_id}", help="Edit"):
            st.session_state["editing"] = emp_id
            st.rerun()
        if cols[7].button("🗑️", key=f"delete_{emp_id}", help="Delete"):
            st.session_state["pending_delete"] = emp_id
            st.rerun()


def pagination(view) -> None:
    size, label, prev, nxt = st.columns([1.5, 4, 1, 1])
    size.selectbox("Rows per page", PAGE_SIZES, key="emp_page_size", on_change=_reset_page)
    label.caption(f"{view.first_index}–{view.last_index} of {view.total}")
    prev.button("‹ Prev", key="page_prev", on_click=_shift_page, args=(-1,), disabled=view.page <= 0)
    nxt.button("Next ›", key="page_next", on_click=_shift_page, args=(1,),
               disabled=view.page >= view.pages - 1)


def render(session: SessionStore) -> None:
    client = ApiClient(session)
    st.session_state.setdefault("emp_page", 0)
    st.session_state.setdefault("emp_page_size", DEFAULT_PAGE_SIZE)

    toolbar(client)
    employees = load_employees(client, session)
    employee_form(client, session, employees)
    filters()
    confirm_delete(client, session, employees)

    view = build_table_view(
        employees,
        search=st.session_state.get("emp_search", ""),
        risk_filter=st.session_state.get("emp_risk", "all"),
        sort_field=st.session_state.get("emp_sort_field", "name"),
        sort_order=st.session_state.get("emp_sort_order", "asc"),
        page=st.session_state["emp_page"],
        page_size=st.session_state["emp_page_size"],
    )
    st.session_state["emp_page"] = view.page

    if view.total == 0:
        st.info("No employees match the current filters.")
    else:
        employee_rows(view.rows)
    pagination(view)
