# agents/flight_processor.py
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional

from models.flight import (
    ONE_WAY,
    ROUND_TRIP,
    Airport,
    CarbonEmissions,
    FlightLeg,
    FlightOption,
    Layover,
)
from utils.money import coerce_minutes, coerce_price

_TRIP_TYPES = {
    "round-trip": ROUND_TRIP,
    "roundtrip": ROUND_TRIP,
    "one-way": ONE_WAY,
    "oneway": ONE_WAY,
}


def normalize_trip_type(raw: Any) -> Optional[str]:
    """SerpApi says "Round trip" / "One way"; we use "round-trip" / "one-way"."""
    if not isinstance(raw, str):
        return None
    key = "-".join(raw.strip().lower().replace("_", " ").replace("-", " ").split())
    return _TRIP_TYPES.get(key)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_airport(raw: Any) -> Airport:
    if not isinstance(raw, dict):
        return Airport()
    return Airport(
        name=_text(raw.get("name")),
        code=_text(raw.get("id") or raw.get("code")),
        time=_text(raw.get("time")),
    )


def _parse_leg(raw: Dict[str, Any]) -> FlightLeg:
    extensions = raw.get("extensions") or []
    if not isinstance(extensions, list):
        extensions = [extensions]
    return FlightLeg(
        departure_airport=_parse_airport(raw.get("departure_airport")),
        arrival_airport=_parse_airport(raw.get("arrival_airport")),
        duration=coerce_minutes(raw.get("duration")),
        airline=_text(raw.get("airline")),
        airline_logo=_text(raw.get("airline_logo")),
        flight_number=_text(raw.get("flight_number")),
        airplane=_text(raw.get("airplane")),
        travel_class=_text(raw.get("travel_class")),
        legroom=_text(raw.get("legroom")),
        extensions=tuple(str(e) for e in extensions if e),
        overnight=bool(raw.get("overnight")),
        often_delayed=bool(raw.get("often_delayed_by_over_30_min")),
    )


def _parse_layover(raw: Dict[str, Any]) -> Layover:
    return Layover(
        duration=coerce_minutes(raw.get("duration")),
        name=_text(raw.get("name")),
        code=_text(raw.get("id") or raw.get("code")),
        overnight=bool(raw.get("overnight")),
    )


def _parse_carbon(raw: Any) -> Optional[CarbonEmissions]:
    if not isinstance(raw, dict):
        return None
    return CarbonEmissions(
        this_flight=_optional_int(raw.get("this_flight")),
        typical_for_this_route=_optional_int(raw.get("typical_for_this_route")),
        difference_percent=_optional_int(raw.get("difference_percent")),
    )


def _dicts(items: Any) -> Iterable[Dict[str, Any]]:
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def build_flight_option(raw: Dict[str, Any]) -> FlightOption:
    legs = tuple(_parse_leg(l) for l in _dicts(raw.get("flights") or raw.get("segments")))
    layovers = tuple(_parse_layover(l) for l in _dicts(raw.get("layovers")))
    first_leg = legs[0] if legs else FlightLeg()

    return FlightOption(
        legs=legs,
        layovers=layovers,
        total_duration=coerce_minutes(raw.get("total_duration")),
        price=coerce_price(raw.get("price")),
        trip_type=normalize_trip_type(raw.get("type")),
        airline=_text(raw.get("airline")) or first_leg.airline,
        airline_logo=_text(raw.get("airline_logo")) or first_leg.airline_logo,
        link=_text(raw.get("link")),
        carbon_emissions=_parse_carbon(raw.get("carbon_emissions")),
        departure_token=_text(raw.get("departure_token")),
        booking_token=_text(raw.get("booking_token")),
    )


def is_usable(option: FlightOption) -> bool:
    return option.price is not None and (
        option.derived_departure_airport_name is not None or len(option.legs) > 0
    )


def process_flight_results(raw_list: Any) -> List[FlightOption]:
    """
    Normalize one SerpApi flight bucket (best_flights / other_flights / flights).
    Entries without a usable price or route are dropped; order is preserved.
    """
    options = (build_flight_option(raw) for raw in _dicts(raw_list))
    return [o for o in options if is_usable(o)]
