# agents/flight_ranker.py
from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

from models.flight import FlightOption

FlightKey = Tuple[str, Optional[float], Optional[int], Optional[str], Optional[str]]

PROMOTED_BEST_COUNT = 3


@dataclass
class RankedFlights:
    best_flights: List[FlightOption] = field(default_factory=list)
    other_flights: List[FlightOption] = field(default_factory=list)


def flight_key(option: FlightOption) -> FlightKey:
    return (
        option.derived_flight_numbers,
        option.price,
        option.total_duration,
        option.derived_departure_airport_name,
        option.derived_arrival_airport_name,
    )


def _price_sort_key(option: FlightOption) -> float:
    return option.price if option.price is not None else math.inf


def deduplicate_and_rank(
    best: Sequence[FlightOption],
    other: Sequence[FlightOption],
    generic: Sequence[FlightOption],
) -> RankedFlights:
    """
    Collapse the provider buckets into best/other lists.

    Duplicates are resolved first-seen-wins in best -> other -> generic order.
    An option stays "best" when its key came from the best bucket. Other flights are sorted by price, unknown prices last, and
    when nothing qualifies as best the cheapest few are promoted.
    """
    seen: Set[FlightKey] = set()
    unique: List[FlightOption] = []
    for option in [*best, *other, *generic]:
        key = flight_key(option)
        if key in seen:
            continue
        seen.add(key)
        unique.append(option)

    wanted = {flight_key(o) for o in best}
    ranked = RankedFlights()
    for option in unique:
        if flight_key(option) in wanted:
            ranked.best_flights.append(option)
        else:
            ranked.other_flights.append(option)

    ranked.other_flights.sort(key=_price_sort_key)

    if not ranked.best_flights and ranked.other_flights:
        ranked.best_flights = ranked.other_flights[:PROMOTED_BEST_COUNT]
        ranked.other_flights = ranked.other_flights[PROMOTED_BEST_COUNT:]

    return ranked
