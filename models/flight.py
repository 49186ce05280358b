# models/flight.py
from __future__ import annotations
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

ONE_WAY = "one-way"
ROUND_TRIP = "round-trip"


@dataclass(frozen=True)
class Airport:
    name: Optional[str] = None
    code: Optional[str] = None
    # local time string as reported by the provider, e.g. "2025-03-05 07:40"
    time: Optional[str] = None


@dataclass(frozen=True)
class FlightLeg:
    departure_airport: Airport = field(default_factory=Airport)
    arrival_airport: Airport = field(default_factory=Airport)
    duration: Optional[int] = None  # minutes
    airline: Optional[str] = None
    airline_logo: Optional[str] = None
    flight_number: Optional[str] = None
    airplane: Optional[str] = None
    travel_class: Optional[str] = None
    legroom: Optional[str] = None
    extensions: Tuple[str, ...] = ()
    overnight: bool = False
    often_delayed: bool = False


@dataclass(frozen=True)
class Layover:
    duration: Optional[int] = None  # minutes
    name: Optional[str] = None
    code: Optional[str] = None
    overnight: bool = False


@dataclass(frozen=True)
class CarbonEmissions:
    this_flight: Optional[int] = None
    typical_for_this_route: Optional[int] = None
    difference_percent: Optional[int] = None


def _plural_stops(count: int) -> str:
    return f"{count} stop{'' if count == 1 else 's'}"


def derive_stops_description(
    legs: Sequence[FlightLeg],
    layovers: Sequence[Layover],
    trip_type: Optional[str] = None,
) -> str:
    """
    Human readable stop summary. The rules are applied in priority order
    because providers often omit layover objects for round trips.
    """
    is_round_trip = trip_type == ROUND_TRIP

    if not legs:
        return "Unknown stops"
    if len(legs) == 1 and not layovers:
        return "Non-stop"
    if is_round_trip and len(legs) == 2 and not layovers:
        return "Non-stop (each way)"

    if not layovers:
        expected_segments = 2 if is_round_trip else 1
        if len(legs) <= expected_segments:
            return "Non-stop"
        stops = max(0, math.ceil(len(legs) / expected_segments) - 1)
        if stops == 0:
            return "Non-stop"
        return f"{_plural_stops(stops)} (details unclear)"

    airports = ", ".join(l.name or l.code or "Unknown" for l in layovers)
    return f"{_plural_stops(len(layovers))} in {airports}"


@dataclass(frozen=True)
class FlightOption:
    """
    One bookable journey: legs in flown order with the layovers between them.
    The derived_* values are computed from the legs every time they are read.
    """
    legs: Tuple[FlightLeg, ...] = ()
    layovers: Tuple[Layover, ...] = ()
    total_duration: Optional[int] = None  # minutes
    price: Optional[float] = None
    trip_type: Optional[str] = None
    airline: Optional[str] = None
    airline_logo: Optional[str] = None
    link: Optional[str] = None
    carbon_emissions: Optional[CarbonEmissions] = None
    # set on outbound-only round trip results until the return is merged in
    departure_token: Optional[str] = None
    booking_token: Optional[str] = None

    @property
    def derived_departure_time(self) -> Optional[str]:
        return self.legs[0].departure_airport.time if self.legs else None

    @property
    def derived_departure_airport_name(self) -> Optional[str]:
        return self.legs[0].departure_airport.name if self.legs else None

    @property
    def derived_arrival_time(self) -> Optional[str]:
        return self.legs[-1].arrival_airport.time if self.legs else None

    @property
    def derived_arrival_airport_name(self) -> Optional[str]:
        return self.legs[-1].arrival_airport.name if self.legs else None

    @property
    def derived_flight_numbers(self) -> str:
        return ", ".join(leg.flight_number for leg in self.legs if leg.flight_number)

    @property
    def derived_stops_description(self) -> str:
        return derive_stops_description(self.legs, self.layovers, self.trip_type)

    @property
    def awaiting_return(self) -> bool:
        return bool(self.departure_token)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.update(
            derived_departure_time=self.derived_departure_time,
            derived_arrival_time=self.derived_arrival_time,
            derived_departure_airport_name=self.derived_departure_airport_name,
            derived_arrival_airport_name=self.derived_arrival_airport_name,
            derived_flight_numbers=self.derived_flight_numbers,
            derived_stops_description=self.derived_stops_description,
        )
        return data


@dataclass
class FlightSearchCriteria:
    origin: str
    destination: str
    departure_date: str  # YYYY-MM-DD
    return_date: Optional[str] = None
    trip_type: str = ROUND_TRIP
    currency: str = "USD"
    hl: str = "en"
    adults: int = 1

    @property
    def is_round_trip(self) -> bool:
        return self.trip_type == ROUND_TRIP and bool(self.return_date)


@dataclass
class FlightSearchResult:
    best_flights: List[FlightOption] = field(default_factory=list)
    other_flights: List[FlightOption] = field(default_factory=list)
    search_summary: Optional[str] = None
    price_insights: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def top_pick(self) -> Optional[FlightOption]:
        return (self.best_flights or self.other_flights or [None])[0]
