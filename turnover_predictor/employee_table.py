# employee_table.py
import locale
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import pandas as pd

from turnover_predictor.api import ApiClient, ApiError
from turnover_predictor.config import PAGE_SIZES
from turnover_predictor.risk import lookup_risk_level, risk_rank

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ["name", "first_name", "last_name", "department", "position", "email"]
SORT_FIELDS = ["name", "department", "position", "risk_level", "salary"]
RISK_FILTERS = ["all", "low", "medium", "high"]

Employee = Dict[str, Any]


@dataclass
class TableView:
    rows: List[Employee]
    total: int
    page: int
    page_size: int
    pages: int

    @property
    def first_index(self) -> int:
        return self.page * self.page_size + 1 if self.total else 0

    @property
    def last_index(self) -> int:
        return min((self.page + 1) * self.page_size, self.total)


def _frame(employees: List[Employee], columns: List[str]) -> pd.DataFrame:
    # positional index so results map straight back onto the input list
    return pd.DataFrame(employees, columns=columns)


def _text_key(s: pd.Series) -> pd.Series:
    # case-insensitive, then collated by whatever locale the process has set
    return s.fillna("").astype(str).map(lambda v: locale.strxfrm(v.casefold()))


def filter_employees(employees: List[Employee], search: str = "", risk_filter: str = "all") -> List[Employee]:
    if not employees:
        return []
    frame = _frame(employees, SEARCH_FIELDS + ["risk_level"])
    mask = pd.Series(True, index=frame.index)

    term = (search or "").strip().lower()
    if term:
        text = frame[SEARCH_FIELDS].fillna("").astype(str)
        hits = text.apply(lambda col: col.str.lower().str.contains(term, regex=False))
        mask &= hits.any(axis=1)

    if risk_filter and risk_filter != "all":
        levels = frame["risk_level"].map(lookup_risk_level)
        mask &= levels.fillna("").str.lower() == risk_filter.lower()

    return [employees[i] for i in frame.index[mask.to_numpy()]]


def sort_employees(employees: List[Employee], field: str = "name", order: str = "asc") -> List[Employee]:
    """Stable single-field sort.

    ``risk_level`` compares by severity rank with High first for "asc"; the
    direction toggle then reverses that, so "desc" lists
    unknown labels first, then Low.
    """
    if field not in SORT_FIELDS:
        raise ValueError(f"Unsupported sort field: {field}")
    if not employees:
        return []
    frame = _frame(employees, [field])
    ascending = order != "desc"

    if field == "risk_level":
        key = lambda s: s.map(risk_rank)
        ascending = not ascending
    elif field == "salary":
        key = lambda s: pd.to_numeric(s, errors="coerce")
    else:
        key = _text_key

    ordered = frame.sort_values(field, ascending=ascending, kind="stable", key=key, na_position="last")
    return [employees[i] for i in ordered.index]


def page_count(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if page_size else 0


def paginate(employees: List[Employee], page: int, page_size: int) -> List[Employee]:
    start = page * page_size
    return employees[start:start + page_size]


def build_table_view(employees: List[Employee], search: str = "", risk_filter: str = "all",
                     sort_field: str = "name", sort_order: str = "asc",
                     page: int = 0, page_size: int = 10) -> TableView:
    if page_size not in PAGE_SIZES:
        raise ValueError(f"Page size must be one of {PAGE_SIZES}")
    rows = sort_employees(filter_employees(employees, search, risk_filter), sort_field, sort_order)
    pages = page_count(len(rows), page_size)
    page = max(0, min(page, pages - 1))
    return TableView(paginate(rows, page, page_size), len(rows), page, page_size, pages)


def remove_employee(employees: List[Employee], employee_id: str) -> List[Employee]:
    return [e for e in employees if e.get("_id") != employee_id]


# ---------------------- MUTATIONS ----------------------
def delete_employee(client: ApiClient, employees: List[Employee], employee_id: str) -> List[Employee]:
    """Delete on the server, then drop the row locally (no re-fetch).

    Failures are only logged and the list comes back unchanged.
    """
    try:
        client.delete_employee(employee_id)
    except ApiError:
        logger.exception("Error deleting employee %s", employee_id)
        return employees
    return remove_employee(employees, employee_id)


def save_employee(client: ApiClient, payload: Dict[str, Any], employee_id: Optional[str] = None) -> Employee:
    """Create or update; the caller follows up with a full reload."""
    if employee_id:
        return client.update_employee(employee_id, payload)
    return client.create_employee(payload)
