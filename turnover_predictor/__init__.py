"""Turnover Predictor: HR workforce-turnover analytics UI."""

__version__ = "0.1.0"
