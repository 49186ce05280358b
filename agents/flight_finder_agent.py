import asyncio
import logging
from typing import Any, Dict, List, Optional

import requests

from agents.flight_processor import process_flight_results
from agents.flight_ranker import deduplicate_and_rank
from agents.round_trip_merger import RoundTripMerger
from clients.serpapi_client import SerpApiClient
from models.flight import FlightOption, FlightSearchCriteria, FlightSearchResult
from utils.airport_codes import to_airport_code

logger = logging.getLogger(__name__)

FLIGHT_BUCKETS = ("best_flights", "other_flights", "flights")


class FlightFinderAgent:
    """
    Searches Google Flights via SerpApi and returns ranked, normalized flight options.
    Round trip results are completed with their return legs before ranking.
    """

    def __init__(self, serpapi: Optional[SerpApiClient] = None, merger: Optional[RoundTripMerger] = None):
        self.serpapi = serpapi or SerpApiClient()
        self.merger = merger or RoundTripMerger(self.serpapi)

    def run(self, criteria: FlightSearchCriteria) -> FlightSearchResult:
        return asyncio.run(self.search(criteria))

    async def search(self, criteria: FlightSearchCriteria) -> FlightSearchResult:
        if not self.serpapi.enabled():
            logger.error("SerpApi key is not configured; flight search disabled.")
            return FlightSearchResult(error="Flight search service is not configured.")

        origin = await asyncio.to_thread(to_airport_code, criteria.origin, self.serpapi) or criteria.origin
        destination = (
            await asyncio.to_thread(to_airport_code, criteria.destination, self.serpapi) or criteria.destination
        )
        params = self._search_params(criteria, origin, destination)

        logger.info("🔎 Searching flights: %s -> %s on %s", origin, destination, criteria.departure_date)
        try:
            data = await asyncio.to_thread(self.serpapi.get, "google_flights", params)
        except (requests.RequestException, ValueError) as e:
            logger.error("❌ API error for %s->%s: %s", origin, destination, e)
            return FlightSearchResult(error=f"Failed to fetch flights: {e}")

        if data.get("error"):
            logger.error("❌ API error for %s->%s: %s", origin, destination, data.get("error"))
            return FlightSearchResult(error=f"SerpApi error: {data.get('error')}")

        buckets: List[List[FlightOption]] = []
        for name in FLIGHT_BUCKETS:
            buckets.append(await self._enrich(data.get(name), criteria))

        ranked = deduplicate_and_rank(*buckets)
        total = len(ranked.best_flights) + len(ranked.other_flights)
        summary = (data.get("search_information") or {}).get("displayed_query")

        logger.info(
            "✅ Found %d unique flights for %s → %s (best: %d, other: %d)",
            total, origin, destination, len(ranked.best_flights), len(ranked.other_flights),
        )
        return FlightSearchResult(
            best_flights=ranked.best_flights,
            other_flights=ranked.other_flights,
            search_summary=summary or f"Processed {total} flight options.",
            price_insights=data.get("price_insights"),
        )

    async def _enrich(self, bucket: Any, criteria: FlightSearchCriteria) -> List[FlightOption]:
        options = process_flight_results(bucket)
        if not criteria.is_round_trip:
            return options
        return await self.merger.merge_all(options, criteria)

    def _search_params(self, criteria: FlightSearchCriteria, origin: str, destination: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "departure_id": origin,
            "arrival_id": destination,
            "outbound_date": criteria.departure_date,
            "currency": criteria.currency,
            "hl": criteria.hl,
            "adults": criteria.adults,
        }
        if criteria.is_round_trip:
            params["return_date"] = criteria.return_date
            params["type"] = 1  # round-trip
        else:
            params["type"] = 2  # one-way
        return params
