# utils/log_config.py
from __future__ import annotations
import logging
import os
from typing import Optional


def configure_logging(level: Optional[str] = None) -> None:
    """Configure basic logging for CLI usage. LOG_LEVEL from .env is the fallback."""
    level = level or os.getenv("LOG_LEVEL") or "INFO"
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # requests/urllib3 are chatty at DEBUG and would echo the api_key query param
    logging.getLogger("urllib3").setLevel(logging.WARNING)
