# models/hotel.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class HotelImage:
    thumbnail: Optional[str] = None
    original_image: Optional[str] = None


@dataclass(frozen=True)
class Coordinates:
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class HotelSuggestion:
    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    # per-night and total price are independent; either may be missing
    price_per_night: Optional[float] = None
    total_price: Optional[float] = None
    price_details: Optional[str] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    amenities: List[str] = field(default_factory=list)
    link: Optional[str] = None
    thumbnail: Optional[str] = None
    images: List[HotelImage] = field(default_factory=list)
    coordinates: Optional[Coordinates] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None

    def stay_cost(self, nights: int) -> Optional[float]:
        """Per-night price times nights when known, else the quoted total."""
        if self.price_per_night is not None:
            return self.price_per_night * max(1, nights)
        return self.total_price


@dataclass
class HotelSearchCriteria:
    destination: str
    check_in_date: str  # YYYY-MM-DD
    check_out_date: str
    guests: int = 2
    currency: str = "USD"
    hl: str = "en"


@dataclass
class HotelSearchResult:
    hotels: List[HotelSuggestion] = field(default_factory=list)
    search_summary: Optional[str] = None
    error: Optional[str] = None
