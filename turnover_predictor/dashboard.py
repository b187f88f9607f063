# dashboard.py
"""Shape the three dashboard responses into cards, tables and chart frames."""
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from turnover_predictor.models import DashboardStats, DepartmentRisk
from turnover_predictor.risk import (
    RISK_COLORS, RISK_LEVELS, chip_color, dashboard_label, lookup_risk_level, probability_color,
)

SEVERITY_WEIGHTS = np.array([3, 2, 1])  # High, Medium, Low
TOP_RISK_LIMIT = 5


def parse_stats(raw: Optional[Dict[str, Any]]) -> DashboardStats:
    return DashboardStats.model_validate(raw or {})


def summary_cards(stats: DashboardStats) -> List[Dict[str, Any]]:
    trends = stats.risk_trends
    return [
        {"title": "Total Employees", "value": f"{stats.total_employees}", "trend": None},
        {"title": "High Risk Employees", "value": f"{stats.high_risk_count}",
         "trend": trends.high if trends else None},
        {"title": "Average Risk Score", "value": f"{stats.average_risk * 100:.1f}%",
         "trend": trends.average if trends else None},
        {"title": "Total Departments", "value": f"{stats.department_count}", "trend": None},
    ]


def department_distribution_frame(stats: DashboardStats) -> pd.DataFrame:
    rows = [{"department": d.department or "Unknown", "count": d.count}
            for d in stats.department_distribution]
    return pd.DataFrame(rows, columns=["department", "count"])


def risk_status_frame(stats: DashboardStats) -> pd.DataFrame:
    counts = {"High": stats.high_risk_count, "Medium": stats.medium_risk_count, "Low": stats.low_risk_count}
    return pd.DataFrame(
        [{"status": level, "count": counts[level], "color": RISK_COLORS[level]} for level in RISK_LEVELS],
        columns=["status", "count", "color"],
    )


def has_risk_data(frame: pd.DataFrame) -> bool:
    return not frame.empty and frame["count"].sum() > 0


def top_risk_frame(top_risk: Optional[List[Dict[str, Any]]], limit: int = TOP_RISK_LIMIT) -> pd.DataFrame:
    rows = []
    for emp in (top_risk or [])[:limit]:
        p = emp.get("turnover_probability") or 0.0
        rows.append({
            "id": emp.get("_id"),
            "name": emp.get("name", ""),
            "department": emp.get("department", ""),
            "risk_level": dashboard_label(emp.get("risk_level")),
            "risk_color": chip_color(emp.get("risk_level")),
            "risk_score": f"{p * 100:.1f}%",
            "score_color": probability_color(p),
        })
    return pd.DataFrame(rows, columns=["id", "name", "department", "risk_level",
                                       "risk_color", "risk_score", "score_color"])


def department_risk_frame(raw: Optional[List[Dict[str, Any]]]) -> pd.DataFrame:
    """One row per department, most severe first.

    Counts are summed per canonical level (unknown labels dropped) and ordered
    by High*3 + Medium*2 + Low; equal scores keep the backend's order.
    """
    rows = []
    for item in raw or []:
        dept = DepartmentRisk.model_validate(item)
        counts = dict.fromkeys(RISK_LEVELS, 0)
        for risk in dept.risk_distribution:
            level = lookup_risk_level(risk.risk_level)
            if level:
                counts[level] += risk.count
        rows.append({"department": dept.department, **counts})

    frame = pd.DataFrame(rows, columns=["department", *RISK_LEVELS])
    if frame.empty:
        return frame.assign(score=pd.Series(dtype="int64"))
    frame["score"] = frame[list(RISK_LEVELS)].to_numpy() @ SEVERITY_WEIGHTS
    return frame.sort_values("score", ascending=False, kind="stable").reset_index(drop=True)
