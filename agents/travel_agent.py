# agents/travel_agent.py
from __future__ import annotations

import asyncio
import logging
from datetime import date, timedelta
from typing import Optional

from agents.flight_finder_agent import FlightFinderAgent
from agents.hotel_finder_agent import HotelFinderAgent
from clients.serpapi_client import SerpApiClient
from models.budget import BudgetBreakdown
from models.flight import ONE_WAY, ROUND_TRIP, FlightSearchCriteria, FlightSearchResult
from models.hotel import HotelSearchCriteria, HotelSearchResult
from models.trip import TripQuote
from utils.date_parser import resolve_travel_dates

logger = logging.getLogger(__name__)


class TravelAgent:
    """
    Orchestrator: turns "origin, destination, free-text dates" into a quote
    with ranked flights and hotels. Flight and hotel searches run side by side.
    """

    def __init__(
        self,
        serpapi: Optional[SerpApiClient] = None,
        flight_agent: Optional[FlightFinderAgent] = None,
        hotel_agent: Optional[HotelFinderAgent] = None,
    ):
        self.serpapi = serpapi or SerpApiClient()
        self.flight_agent = flight_agent or FlightFinderAgent(self.serpapi)
        self.hotel_agent = hotel_agent or HotelFinderAgent(self.serpapi)

    def run(self, origin: str, destination: str, travel_dates: str, guests: int = 2,
            today: Optional[date] = None) -> TripQuote:
        return asyncio.run(self.plan(origin, destination, travel_dates, guests=guests, today=today))

    async def plan(self, origin: str, destination: str, travel_dates: str, guests: int = 2,
                   today: Optional[date] = None) -> TripQuote:
        dates = resolve_travel_dates(travel_dates, today=today)
        logger.info(
            "Planning %s -> %s: %s to %s (%d days)",
            origin, destination, dates.departure_iso, dates.return_iso or "one-way", dates.duration_days,
        )

        flight_criteria = FlightSearchCriteria(
            origin=origin,
            destination=destination,
            departure_date=dates.departure_iso,
            return_date=dates.return_iso,
            trip_type=ROUND_TRIP if dates.is_round_trip else ONE_WAY,
            currency=self.serpapi.currency,
            hl=self.serpapi.hl,
        )
        # one-way trips still need a check-out date for the hotel search
        check_out = dates.return_date or dates.departure_date + timedelta(days=dates.duration_days - 1)
        # a stay needs at least one night
        check_out = max(check_out, dates.departure_date + timedelta(days=1))
        hotel_criteria = HotelSearchCriteria(
            destination=destination,
            check_in_date=dates.departure_iso,
            check_out_date=check_out.strftime("%Y-%m-%d"),
            guests=guests,
            currency=self.serpapi.currency,
            hl=self.serpapi.hl,
        )

        flights, hotels = await asyncio.gather(
            self.flight_agent.search(flight_criteria),
            self.hotel_agent.search(hotel_criteria),
        )
        return TripQuote(
            origin=origin,
            destination=destination,
            dates=dates,
            flights=flights,
            hotels=hotels,
            budget=self._budget(flights, hotels, dates.duration_days),
        )

    def _budget(self, flights: FlightSearchResult, hotels: HotelSearchResult, nights: int) -> BudgetBreakdown:
        best_flight = flights.top_pick
        best_hotel = hotels.hotels[0] if hotels.hotels else None
        return BudgetBreakdown(
            flights=best_flight.price if best_flight else None,
            hotels=best_hotel.stay_cost(nights) if best_hotel else None,
        )
