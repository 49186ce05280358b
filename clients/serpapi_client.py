# clients/serpapi_client.py
from __future__ import annotations
import logging
import os
import requests
from typing import Any, Dict, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

SERPAPI_URL = "https://serpapi.com/search"
_PLACEHOLDER_KEYS = {"", "YOUR_SERPAPI_API_KEY_PLACEHOLDER", "changeme"}


class SerpApiClient:
    """
    Minimal SerpApi wrapper shared by the flight, hotel and airport lookups.
    Locale defaults (currency/hl) come from the environment so every call in
    one search, including departure_token continuations, uses the same ones.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: int = 15,
        currency: Optional[str] = None,
        hl: Optional[str] = None,
    ):
        load_dotenv()
        key = api_key or os.getenv("SERPAPI_KEY") or os.getenv("SERPAPI_API_KEY") or ""
        self.api_key = None if key.strip() in _PLACEHOLDER_KEYS else key.strip()
        self.timeout = timeout
        self.currency = currency or os.getenv("SERPAPI_CURRENCY") or "USD"
        self.hl = hl or os.getenv("SERPAPI_HL") or "en"

    def enabled(self) -> bool:
        return bool(self.api_key)

    def get(self, engine: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise ValueError("SERPAPI_KEY is missing.")
        full = {"currency": self.currency, "hl": self.hl}
        full.update({k: v for k, v in params.items() if v is not None})
        full["engine"] = engine
        full["api_key"] = self.api_key
        logger.debug("SerpApi %s request: %s", engine, {k: v for k, v in full.items() if k != "api_key"})
        res = requests.get(SERPAPI_URL, params=full, timeout=self.timeout)
        res.raise_for_status()
        return res.json()
