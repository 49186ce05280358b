from typing import Any, Dict, List, Optional

import pytest


class FakeSerpApi:
    """Stands in for SerpApiClient. Responses are keyed by engine or departure_token."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None, enabled: bool = True):
        self.responses = responses or {}
        self.calls: List[Dict[str, Any]] = []
        self._enabled = enabled
        self.currency = "USD"
        self.hl = "en"

    def enabled(self) -> bool:
        return self._enabled

    def get(self, engine: str, params: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append({"engine": engine, **params})
        key = params.get("departure_token") or engine
        response = self.responses.get(key, {})
        if isinstance(response, Exception):
            raise response
        return response


def make_leg(
    number: str,
    dep: str = "Heydar Aliyev International Airport",
    arr: str = "Istanbul Airport",
    duration: Any = 180,
    dep_time: str = "2026-03-05 07:40",
    arr_time: str = "2026-03-05 10:40",
) -> Dict[str, Any]:
    return {
        "departure_airport": {"name": dep, "id": dep[:3].upper(), "time": dep_time},
        "arrival_airport": {"name": arr, "id": arr[:3].upper(), "time": arr_time},
        "duration": duration,
        "airline": "Azerbaijan Airlines",
        "airline_logo": "https://www.gstatic.com/flights/airline_logos/70px/J2.png",
        "flight_number": number,
        "airplane": "Airbus A320",
        "travel_class": "Economy",
        "extensions": ["Average legroom (29 in)", "Carry-on bag included"],
    }


def make_flight(price: Any = 250, legs: Optional[List[Dict[str, Any]]] = None, **extra: Any) -> Dict[str, Any]:
    legs = legs if legs is not None else [make_leg("J2 71")]
    entry = {
        "flights": legs,
        "total_duration": sum(int(l.get("duration") or 0) for l in legs),
        "price": price,
        "type": "One way",
    }
    entry.update(extra)
    return entry


@pytest.fixture
def fake_serpapi():
    return FakeSerpApi()
