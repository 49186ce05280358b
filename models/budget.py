# models/budget.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass
class BudgetBreakdown:
    """Cheapest known cost of a trip; None means no price was found for that part."""
    flights: Optional[float] = None
    hotels: Optional[float] = None

    @property
    def total(self) -> Optional[float]:
        if self.flights is None and self.hotels is None:
            return None
        return float((self.flights or 0.0) + (self.hotels or 0.0))

    def notes(self) -> str:
        parts = []
        parts.append(f"Flight ~${self.flights:,.0f}" if self.flights is not None else "No specific flight price found.")
        parts.append(f"Hotel ~${self.hotels:,.0f}" if self.hotels is not None else "No specific hotel price found.")
        return " ".join(parts)
