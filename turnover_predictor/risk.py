# risk.py
"""Risk-level normalization shared by the dashboard and the employee table.

The backend labels risk inconsistently ("High Risk", "high", ...). Everything
funnels through :func:`lookup_risk_level`; the other helpers are thin display
wrappers for a particular screen.
"""
from typing import Optional

HIGH, MEDIUM, LOW = "High", "Medium", "Low"
RISK_LEVELS = (HIGH, MEDIUM, LOW)

RISK_LEVEL_MAPPING = {
    "High Risk": HIGH,
    "Medium Risk": MEDIUM,
    "Low Risk": LOW,
    "high": HIGH,
    "medium": MEDIUM,
    "low": LOW,
    "High": HIGH,
    "Medium": MEDIUM,
    "Low": LOW,
    "high risk": HIGH,
    "medium risk": MEDIUM,
    "low risk": LOW,
}

RISK_RANK = {HIGH: 3, MEDIUM: 2, LOW: 1}

RISK_COLORS = {
    HIGH: "#f44336",
    MEDIUM: "#FFC107",
    LOW: "#4CAF50",
}

# chip semantics -> streamlit markdown colors
SEMANTIC_COLORS = {
    "error": "red",
    "warning": "orange",
    "success": "green",
    "default": "gray",
}

SEMANTIC_HEX = {
    "error": "#d32f2f",
    "warning": "#ed6c02",
    "success": "#2e7d32",
    "default": "#757575",
}

_CHIP = {HIGH: "error", MEDIUM: "warning", LOW: "success"}


def lookup_risk_level(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    return RISK_LEVEL_MAPPING.get(str(raw).strip())


def canonical_risk_level(raw: Optional[str]) -> str:
    """Map any backend label to High/Medium/Low; unknown labels become Medium."""
    return lookup_risk_level(raw) or MEDIUM


def risk_rank(raw: Optional[str]) -> int:
    return RISK_RANK.get(lookup_risk_level(raw), 0)


def backend_label(raw: Optional[str]) -> str:
    return f"{canonical_risk_level(raw)} Risk"


def dashboard_label(raw: Optional[str]) -> str:
    return canonical_risk_level(raw)


def table_label(raw: Optional[str]) -> str:
    text = (raw or "").strip()
    if text.endswith(" Risk"):
        text = text[: -len(" Risk")]
    return text or "Unknown"


def chip_color(raw: Optional[str]) -> str:
    return _CHIP.get(lookup_risk_level(raw), "default")


def risk_color(level: str) -> str:
    return RISK_COLORS[canonical_risk_level(level)]


def probability_color(probability: Optional[float]) -> str:
    p = probability or 0.0
    if p >= 0.7:
        return "error"
    if p >= 0.3:
        return "warning"
    return "success"


def colored(text: str, semantic: str) -> str:
    """Streamlit markdown with the color for a chip semantic."""
    return f":{SEMANTIC_COLORS.get(semantic, 'gray')}[{text}]"