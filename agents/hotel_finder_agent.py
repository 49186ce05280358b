import asyncio
import logging
from typing import Any, Dict, List, Optional

import requests

from clients.serpapi_client import SerpApiClient
from models.hotel import (
    Coordinates,
    HotelImage,
    HotelSearchCriteria,
    HotelSearchResult,
    HotelSuggestion,
)
from utils.money import coerce_price

logger = logging.getLogger(__name__)


def _first_present(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _int(value: Any) -> Optional[int]:
    number = _float(value)
    return int(number) if number is not None else None


def _amenities(h: Dict[str, Any]) -> List[str]:
    objects = h.get("amenities_objects")
    if isinstance(objects, list) and objects:
        return [str(a["name"]) for a in objects if isinstance(a, dict) and a.get("name")]
    plain = h.get("amenities")
    if isinstance(plain, list):
        return [str(a) for a in plain if a]
    return []


def _images(h: Dict[str, Any]) -> List[HotelImage]:
    images = h.get("images")
    if not isinstance(images, list):
        return []
    return [
        HotelImage(thumbnail=img.get("thumbnail"), original_image=img.get("original_image"))
        for img in images
        if isinstance(img, dict)
    ]


def _coordinates(h: Dict[str, Any]) -> Optional[Coordinates]:
    gps = h.get("gps_coordinates")
    if not isinstance(gps, dict):
        return None
    return Coordinates(latitude=_float(gps.get("latitude")), longitude=_float(gps.get("longitude")))


def build_hotel_suggestion(h: Dict[str, Any]) -> HotelSuggestion:
    rate = h.get("rate_per_night")
    lowest_rate = rate.get("lowest") if isinstance(rate, dict) else None
    per_night_source = _first_present(lowest_rate, h.get("price_per_night"), h.get("price"), h.get("extracted_price"))
    price_per_night = coerce_price(per_night_source)

    total = h.get("total_price")
    total_source = total.get("extracted_lowest") if isinstance(total, dict) else total
    total_price = coerce_price(total_source)

    if isinstance(per_night_source, str):
        price_details: Optional[str] = per_night_source
    elif price_per_night is not None:
        amount = int(price_per_night) if price_per_night.is_integer() else price_per_night
        price_details = f"${amount}"
    else:
        price_details = None

    images = _images(h)
    return HotelSuggestion(
        name=str(h.get("name") or "").strip(),
        type=h.get("type"),
        description=h.get("overall_info") or h.get("description"),
        price_per_night=price_per_night,
        total_price=total_price,
        price_details=price_details,
        rating=_float(h.get("overall_rating") or h.get("rating")),
        reviews=_int(h.get("reviews")),
        amenities=_amenities(h),
        link=h.get("link"),
        thumbnail=(images[0].thumbnail if images else None) or h.get("thumbnail"),
        images=images,
        coordinates=_coordinates(h),
        check_in_time=h.get("check_in_time"),
        check_out_time=h.get("check_out_time"),
    )


def process_hotel_results(raw_list: Any) -> List[HotelSuggestion]:
    """Normalize Google Hotels properties, dropping entries with no name or no price at all."""
    if not isinstance(raw_list, list):
        return []
    hotels = [build_hotel_suggestion(h) for h in raw_list if isinstance(h, dict)]
    return [
        h for h in hotels
        if h.name and (h.price_per_night is not None or h.total_price is not None or h.price_details)
    ]


class HotelFinderAgent:
    """
    Searches for hotels using SerpApi's Google Hotels engine.
    Returns normalized hotel suggestions for the requested stay.
    """

    def __init__(self, serpapi: Optional[SerpApiClient] = None):
        self.serpapi = serpapi or SerpApiClient()

    def run(self, criteria: HotelSearchCriteria) -> HotelSearchResult:
        return asyncio.run(self.search(criteria))

    async def search(self, criteria: HotelSearchCriteria) -> HotelSearchResult:
        if not self.serpapi.enabled():
            logger.error("SerpApi key is not configured; hotel search disabled.")
            return HotelSearchResult(error="Hotel search service is not configured.")

        params = {
            "q": criteria.destination,
            "check_in_date": criteria.check_in_date,
            "check_out_date": criteria.check_out_date,
            "adults": criteria.guests,
            "currency": criteria.currency,
            "hl": criteria.hl,
        }

        logger.info("🏨 Searching hotels in %s from %s to %s", criteria.destination, criteria.check_in_date, criteria.check_out_date)
        try:
            data = await asyncio.to_thread(self.serpapi.get, "google_hotels", params)
        except (requests.RequestException, ValueError) as e:
            logger.error("❌ Hotel API error for %s: %s", criteria.destination, e)
            return HotelSearchResult(error=f"Failed to fetch hotels: {e}")

        if data.get("error"):
            logger.error("❌ Hotel API error for %s: %s", criteria.destination, data.get("error"))
            return HotelSearchResult(error=f"SerpApi error: {data.get('error')}")

        hotels = process_hotel_results(data.get("properties"))
        logger.info("✅ Found %d hotels in %s", len(hotels), criteria.destination)
        summary = (data.get("search_information") or {}).get("displayed_query")
        return HotelSearchResult(
            hotels=hotels,
            search_summary=summary or f"Found {len(hotels)} hotel options.",
            error=None if hotels else "No hotels found for this query.",
        )
