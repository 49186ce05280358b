# agents/round_trip_merger.py
from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence

import requests

from agents.flight_processor import process_flight_results
from clients.serpapi_client import SerpApiClient
from models.flight import ROUND_TRIP, FlightOption, FlightSearchCriteria

logger = logging.getLogger(__name__)

RETURN_BUCKETS = ("best_flights", "other_flights", "flights")


@dataclass(frozen=True)
class MergeResult:
    option: FlightOption
    merged: bool
    reason: Optional[str] = None


def combine_journeys(outbound: FlightOption, inbound: FlightOption) -> FlightOption:
    """Glue the return journey onto the outbound one as a single round trip."""
    legs = outbound.legs + inbound.legs
    layovers = outbound.layovers + inbound.layovers
    total = sum(leg.duration or 0 for leg in legs) + sum(l.duration or 0 for l in layovers)
    return replace(
        outbound,
        legs=legs,
        layovers=layovers,
        total_duration=total,
        trip_type=ROUND_TRIP,
        departure_token=None,
    )


def pick_return_journey(payload: Dict[str, Any]) -> Optional[FlightOption]:
    # TODO: rank candidates by price/duration instead of taking the first;
    # doing so changes the round trip fares users see.
    for bucket in RETURN_BUCKETS:
        candidates = process_flight_results(payload.get(bucket))
        if candidates:
            return candidates[0]
    return None


class RoundTripMerger:
    """
    Completes outbound-only round trip options by replaying their
    departure_token against Google Flights and appending the return legs.
    Failures are never raised: the outbound option comes back unmerged.
    """

    def __init__(self, serpapi: Optional[SerpApiClient] = None):
        self.serpapi = serpapi or SerpApiClient()

    async def merge(self, option: FlightOption, criteria: Optional[FlightSearchCriteria] = None) -> MergeResult:
        if not option.departure_token:
            return MergeResult(option=option, merged=False, reason="no departure token")

        params = {"departure_token": option.departure_token}
        if criteria is not None:
            params.update(currency=criteria.currency, hl=criteria.hl)

        logger.info("🔁 Fetching return journey for token %s", option.departure_token[:16])
        try:
            payload = await asyncio.to_thread(self.serpapi.get, "google_flights", params)
        except (requests.RequestException, ValueError) as e:
            logger.warning("⚠️ Return journey request failed: %s", e)
            return MergeResult(option=option, merged=False, reason=str(e))

        if not isinstance(payload, dict):
            return MergeResult(option=option, merged=False, reason="unexpected payload")
        if payload.get("error"):
            logger.warning("⚠️ Return journey request returned an error: %s", payload.get("error"))
            return MergeResult(option=option, merged=False, reason=str(payload.get("error")))

        inbound = pick_return_journey(payload)
        if inbound is None:
            logger.warning("⚠️ Token %s did not yield a usable return journey", option.departure_token[:16])
            return MergeResult(option=option, merged=False, reason="no usable return journey")

        return MergeResult(option=combine_journeys(option, inbound), merged=True)

    async def merge_all(
        self, options: Sequence[FlightOption], criteria: Optional[FlightSearchCriteria] = None
    ) -> List[FlightOption]:
        """Fan out one continuation per option; results keep the input order."""
        results = await asyncio.gather(*(self.merge(o, criteria) for o in options))
        return [r.option for r in results]


async def merge_return_journey(
    option: FlightOption,
    criteria: Optional[FlightSearchCriteria] = None,
    serpapi: Optional[SerpApiClient] = None,
) -> FlightOption:
    if not option.departure_token:
        return option
    result = await RoundTripMerger(serpapi).merge(option, criteria)
    return result.option
