import pytest

from turnover_predictor.risk import (
    backend_label, canonical_risk_level, chip_color, colored, dashboard_label, probability_color,
    risk_color, risk_rank, table_label,
)


def test_known_labels_canonicalize(risk_variant):
    raw, expected = risk_variant
    assert canonical_risk_level(raw) == expected


def test_display_wrappers_agree_on_level(risk_variant):
    raw, expected = risk_variant
    assert dashboard_label(raw) == expected
    assert backend_label(raw) == f"{expected} Risk"
    assert chip_color(raw) == {"High": "error", "Medium": "warning", "Low": "success"}[expected]
    assert risk_rank(raw) == {"High": 3, "Medium": 2, "Low": 1}[expected]


@pytest.mark.parametrize("raw", ["", "HIGH", "critical", "Very High Risk", None, "n/a"])
def test_unknown_labels_fall_back_to_medium(raw):
    assert canonical_risk_level(raw) == "Medium"
    assert risk_rank(raw) == 0
    assert chip_color(raw) == "default"


def test_table_label_strips_suffix():
    assert table_label("High Risk") == "High"
    assert table_label("low") == "low"
    assert table_label("") == "Unknown"
    assert table_label(None) == "Unknown"


def test_risk_color_uses_canonical_level():
    assert risk_color("High Risk") == "#f44336"
    assert risk_color("whatever") == "#FFC107"


@pytest.mark.parametrize("p, expected", [
    (0.95, "error"), (0.7, "error"), (0.69, "warning"), (0.3, "warning"), (0.29, "success"), (None, "success"),
])
def test_probability_color_thresholds(p, expected):
    assert probability_color(p) == expected


def test_colored_markdown():
    assert colored("High", "error") == ":red[High]"
    assert colored("?", "default") == ":gray[?]"
