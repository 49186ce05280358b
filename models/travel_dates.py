# models/travel_dates.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class ParsedDateRange:
    departure_date: date
    return_date: Optional[date]
    duration_days: int

    @property
    def is_round_trip(self) -> bool:
        return self.return_date is not None

    @property
    def departure_iso(self) -> str:
        return self.departure_date.strftime("%Y-%m-%d")

    @property
    def return_iso(self) -> Optional[str]:
        return self.return_date.strftime("%Y-%m-%d") if self.return_date else None
