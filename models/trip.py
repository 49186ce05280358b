# models/trip.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from models.budget import BudgetBreakdown
from models.flight import FlightOption, FlightSearchResult
from models.hotel import HotelSearchResult, HotelSuggestion
from models.travel_dates import ParsedDateRange


@dataclass
class TripQuote:
    origin: str
    destination: str
    dates: ParsedDateRange
    flights: FlightSearchResult
    hotels: HotelSearchResult
    budget: BudgetBreakdown

    @property
    def best_flight(self) -> Optional[FlightOption]:
        return self.flights.top_pick

    @property
    def best_hotel(self) -> Optional[HotelSuggestion]:
        return self.hotels.hotels[0] if self.hotels.hotels else None
