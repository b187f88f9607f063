# config.py
import os
import logging

API_BASE_URL = os.getenv("TURNOVER_API_URL", "http://localhost:5000").rstrip("/")

STREAMLIT_HOST = os.getenv("STREAMLIT_HOST", "127.0.0.1")
STREAMLIT_PORT = int(os.getenv("STREAMLIT_PORT", "8501"))

LOG_LEVEL = os.getenv("TURNOVER_LOG_LEVEL", "INFO").upper()

TOKEN_KEY = "token"

PAGE_SIZES = (5, 10, 25)
DEFAULT_PAGE_SIZE = int(os.getenv("TURNOVER_DEFAULT_PAGE_SIZE", "10"))
if DEFAULT_PAGE_SIZE not in PAGE_SIZES:
    DEFAULT_PAGE_SIZE = 10

APP_NAME = "Turnover Predictor"

_configured = False


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Set up root logging once per process; later calls are no-ops."""
    global _configured
    if _configured:
        return
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _configured = True
