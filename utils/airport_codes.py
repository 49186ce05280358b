# utils/airport_codes.py
from __future__ import annotations
import logging
import re
from typing import Any, Dict, List, Optional

import requests

from clients.serpapi_client import SerpApiClient

logger = logging.getLogger(__name__)

CITY_TO_AIRPORT = {
    # Azerbaijan
    "Baku": "GYD",

    # Turkey
    "Istanbul": "IST",
    "Ankara": "ESB",
    "Izmir": "ADB",

    # Georgia
    "Tbilisi": "TBS",

    # UAE
    "Dubai": "DXB",
    "Abu Dhabi": "AUH",

    # Europe
    "Amsterdam": "AMS",
    "Athens": "ATH",
    "Barcelona": "BCN",
    "Berlin": "BER",
    "Brussels": "BRU",
    "Budapest": "BUD",
    "Copenhagen": "CPH",
    "Dublin": "DUB",
    "Frankfurt": "FRA",
    "Helsinki": "HEL",
    "Lisbon": "LIS",
    "London": "LHR",
    "Madrid": "MAD",
    "Manchester": "MAN",
    "Munich": "MUC",
    "Oslo": "OSL",
    "Paris": "CDG",
    "Prague": "PRG",
    "Rome": "FCO",
    "Stockholm": "ARN",
    "Vienna": "VIE",
    "Warsaw": "WAW",
    "Zurich": "ZRH",

    # Middle East
    "Doha": "DOH",
    "Riyadh": "RUH",

    # Asia
    "Bangkok": "BKK",
    "Hong Kong": "HKG",
    "Mumbai": "BOM",
    "New Delhi": "DEL",
    "Seoul": "ICN",
    "Singapore": "SIN",
    "Tokyo": "HND",

    # North America
    "Chicago": "ORD",
    "Los Angeles": "LAX",
    "New York": "JFK",
    "Miami": "MIA",
    "San Francisco": "SFO",
    "Toronto": "YYZ",

    # Latin America / Africa / Oceania
    "Mexico City": "MEX",
    "Sao Paulo": "GRU",
    "Cairo": "CAI",
    "Cape Town": "CPT",
    "Sydney": "SYD",
}

IATA_ALIASES = {
    # City codes to primary airports
    "BAK": "GYD",
    "ROM": "FCO",
    "PAR": "CDG",
    "NYC": "JFK",
    "LON": "LHR",
}

_CITY_LOOKUP = {city.lower(): code for city, code in CITY_TO_AIRPORT.items()}
_IATA = re.compile(r"^[A-Za-z]{3}$")
_ANSWER_CODE = re.compile(r"\b([A-Z]{3})\b")
_DESCRIPTION_CODE = re.compile(r"IATA: ([A-Z]{3})", re.IGNORECASE)
_SNIPPET_PATTERNS = [
    re.compile(r"\b([A-Z]{3})\b is the IATA code for", re.IGNORECASE),
    re.compile(r"IATA code for .*? is \b([A-Z]{3})\b", re.IGNORECASE),
    re.compile(r"airport code for .*? is \b([A-Z]{3})\b", re.IGNORECASE),
    re.compile(r"\(([A-Z]{3})\)"),
]


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _code_from_search(data: Dict[str, Any]) -> Optional[str]:
    airports = _as_list(data.get("airports"))
    if airports and _as_dict(airports[0]).get("id"):
        return str(airports[0]["id"])

    answer = _as_dict(data.get("answer_box")).get("answer")
    if answer:
        match = _ANSWER_CODE.search(str(answer))
        if match:
            return match.group(1)

    graph = _as_dict(data.get("knowledge_graph"))
    if graph.get("iata_code"):
        return str(graph["iata_code"])
    if graph.get("description"):
        match = _DESCRIPTION_CODE.search(str(graph["description"]))
        if match:
            return match.group(1).upper()

    for result in _as_list(data.get("organic_results")):
        if not isinstance(result, dict):
            continue
        text = f"{result.get('title') or ''} {result.get('snippet') or ''}"
        for pattern in _SNIPPET_PATTERNS:
            match = pattern.search(text)
            if match:
                return match.group(1).upper()
    return None


def to_airport_code(value: Optional[str], serpapi: Optional[SerpApiClient] = None) -> Optional[str]:
    """
    Best-effort place name -> IATA code. Returns None when unknown so the
    caller can fall back to the free-text name.
    """
    v = (value or "").strip()
    if len(v) < 2 or "current location" in v.lower():
        return None

    # already an IATA code
    if _IATA.match(v):
        code = v.upper()
        return IATA_ALIASES.get(code, code)

    if v.lower() in _CITY_LOOKUP:
        return _CITY_LOOKUP[v.lower()]

    if serpapi is None or not serpapi.enabled():
        return None

    try:
        data = serpapi.get(
            engine="google_flights_travel_partners",
            params={"q": f"{v} airport code"},
        )
    except (requests.RequestException, ValueError) as e:
        logger.warning("⚠️ Airport code lookup failed for %s: %s", v, e)
        return None

    code = _code_from_search(data) if isinstance(data, dict) else None
    logger.info("Airport code for %r: %s", v, code)
    return code
