# main.py
from __future__ import annotations
import argparse
from typing import List, Optional

from dotenv import load_dotenv

from agents.travel_agent import TravelAgent
from models.trip import TripQuote
from utils.log_config import configure_logging


def render(quote: TripQuote) -> str:
    dates = quote.dates
    lines: List[str] = [
        f"✈️  {quote.origin} → {quote.destination}",
        f"📅 {dates.departure_iso} → {dates.return_iso or 'one-way'} ({dates.duration_days} days)",
        "",
    ]

    if quote.flights.error:
        lines.append(f"Flights: {quote.flights.error}")
    for f in quote.flights.best_flights:
        price = f"${f.price:,.0f}" if f.price is not None else "n/a"
        lines.append(f"  • {f.airline or 'Unknown airline'} {f.derived_flight_numbers} — {price}")
        lines.append(f"    {f.derived_departure_time} → {f.derived_arrival_time} | {f.derived_stops_description}")

    if quote.hotels.error:
        lines.append(f"Hotels: {quote.hotels.error}")
    for h in quote.hotels.hotels[:3]:
        lines.append(f"  • {h.name} ({h.rating or '-'}⭐) {h.price_details or ''}")

    lines.append("")
    lines.append(f"💵 {quote.budget.notes()}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Quote flights and hotels for a free-text trip request.")
    parser.add_argument("origin", help="Origin city or IATA code, e.g. Baku or GYD")
    parser.add_argument("destination", help="Destination city or IATA code")
    parser.add_argument("dates", nargs="?", default="", help='Travel dates, e.g. "next month for 5 days"')
    parser.add_argument("--guests", type=int, default=2)
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    load_dotenv()
    configure_logging(args.log_level)

    agent = TravelAgent()
    print(render(agent.run(args.origin, args.destination, args.dates, guests=args.guests)))


if __name__ == "__main__":
    main()
