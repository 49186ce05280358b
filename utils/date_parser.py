# utils/date_parser.py
from __future__ import annotations
import calendar
import logging
import re
from datetime import date, datetime, time, timedelta
from typing import Callable, List, NamedTuple, Optional, Tuple

import dateparser

from models.travel_dates import ParsedDateRange

logger = logging.getLogger(__name__)

DEFAULT_LEAD_DAYS = 30
DEFAULT_DURATION_DAYS = 7
WEEKEND_DURATION_DAYS = 3
DAYS_PER_MONTH = 30  # duration approximation, not calendar arithmetic
FRIDAY = 4

# Hint dateparser with the languages we commonly see (English, Turkish, Azerbaijani).
PREFERRED_LANGS = ["en", "tr", "az"]

_MONTHS = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}
_MONTH_WORD = "|".join(sorted(_MONTHS, key=len, reverse=True))

_ONE_WAY = re.compile(r"\bone[\s-]way\b")
_ORDINAL = r"(?:st|nd|rd|th)?"
_DATE_TOKEN = (
    r"(?:\d{4}-\d{1,2}-\d{1,2}"
    r"|\d{1,2}[/.\-]\d{1,2}(?:[/.\-]\d{2,4})?"
    rf"|[a-z]+\.?\s+\d{{1,2}}(?!\d){_ORDINAL}(?:,?\s*\d{{4}})?)"
)
_RANGE = re.compile(rf"({_DATE_TOKEN})\s*(?:to|-|until|&)\s*({_DATE_TOKEN})")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_NUMERIC_DATE = re.compile(r"^(\d{1,2})[/.\-](\d{1,2})(?:[/.\-](\d{2,4}))?$")
_NAMED_DATE = re.compile(rf"^([a-z]+)\.?\s+(\d{{1,2}}){_ORDINAL}(?:,?\s*(\d{{4}}))?$")
_DURATION = re.compile(r"(\d+)\s*(day|week|month)s?")
_IN_OFFSET = re.compile(r"\bin\s+(\d+)\s*(day|week|month)s?")
_MONTH_MENTION = re.compile(
    rf"\b({_MONTH_WORD})\b\.?(?:\s+(\d{{1,2}})(?!\d){_ORDINAL})?(?:,?\s*(\d{{4}}))?"
)
_ANY_YEAR = re.compile(r"\d{4}")


class DepartureHint(NamedTuple):
    departure: date
    duration_days: Optional[int] = None


DepartureStrategy = Callable[[str], Optional[DepartureHint]]


def add_months(day: date, months: int) -> date:
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def _next_year(day: date) -> date:
    try:
        return day.replace(year=day.year + 1)
    except ValueError:
        # Feb 29 -> Feb 28
        return day.replace(year=day.year + 1, day=28)


def _friday_on_or_before(day: date) -> date:
    return day - timedelta(days=(day.weekday() - FRIDAY) % 7)


class TravelDateResolver:
    """
    Resolves free text like "next month for 7 days", "Jul 10 to Jul 17" or
    "one-way in 2 weeks" into concrete travel dates.

    An explicit date range wins outright. Otherwise the duration is read
    first, then the departure strategies are tried in order and the first
    hit is used. The departure is never before ``today``: anything that
    would land in the past falls back to the default lead time.
    """

    def __init__(self, today: Optional[date] = None):
        self.today = today or date.today()
        self.departure_strategies: List[DepartureStrategy] = [
            self.next_month,
            self.this_month,
            self.next_weekend,
            self.this_weekend,
            self.in_offset,
            self.month_name,
        ]

    @property
    def default_departure(self) -> date:
        return self.today + timedelta(days=DEFAULT_LEAD_DAYS)

    def resolve(self, phrase: Optional[str]) -> ParsedDateRange:
        text = " ".join((phrase or "").lower().split())
        if not text:
            logger.warning("Empty travel dates phrase, using defaults.")
            return self._finish(self.default_departure, DEFAULT_DURATION_DAYS, round_trip=True)

        round_trip = not _ONE_WAY.search(text)

        explicit = self.explicit_range(text)
        if explicit is not None:
            logger.info("Parsed explicit range %s to %s", explicit.departure_iso, explicit.return_iso)
            return explicit

        duration = self.duration(text)
        if duration is None:
            duration = DEFAULT_DURATION_DAYS
        departure = self.default_departure
        for strategy in self.departure_strategies:
            hint = strategy(text)
            if hint is None:
                continue
            departure = hint.departure
            if hint.duration_days is not None:
                duration = hint.duration_days
            break

        if departure < self.today:
            logger.warning(
                "Departure %s is in the past, defaulting to %d days from today.", departure, DEFAULT_LEAD_DAYS
            )
            departure = self.default_departure

        return self._finish(departure, duration, round_trip)

    def _finish(self, departure: date, duration: int, round_trip: bool) -> ParsedDateRange:
        duration = max(1, duration)
        try:
            last_day = departure + timedelta(days=duration - 1)
        except OverflowError:
            logger.warning("Duration of %d days is out of range, using %d.", duration, DEFAULT_DURATION_DAYS)
            duration = DEFAULT_DURATION_DAYS
            last_day = departure + timedelta(days=duration - 1)
        return_date = last_day if round_trip else None
        return ParsedDateRange(departure_date=departure, return_date=return_date, duration_days=duration)

    # explicit "<date> to <date>" ranges

    def explicit_range(self, text: str) -> Optional[ParsedDateRange]:
        match = _RANGE.search(text)
        if not match:
            return None

        first = self.parse_date_token(match.group(1))
        second = self.parse_date_token(match.group(2))
        if first is None or second is None:
            return None

        start, start_has_year = first
        end, end_has_year = second
        if start < self.today and not start_has_year:
            start = _next_year(start)
        if end < start and not end_has_year:
            end = _next_year(end)

        if start < self.today or end < start:
            logger.info("Ignoring range %s -> %s outside the bookable window", start, end)
            return None

        return ParsedDateRange(departure_date=start, return_date=end, duration_days=(end - start).days + 1)

    def parse_date_token(self, token: str) -> Optional[Tuple[date, bool]]:
        """
        Parse one side of a range. Returns (date, has_explicit_year) or None.
        Year-less dates are placed in the current year; shifting is up to the caller.
        """
        token = token.strip().lower()
        parts = None
        iso = _ISO_DATE.match(token)
        numeric = _NUMERIC_DATE.match(token)
        named = _NAMED_DATE.match(token)

        if iso:
            parts = (int(iso.group(1)), int(iso.group(2)), int(iso.group(3)))
        elif numeric:
            parts = (self._full_year(numeric.group(3)), int(numeric.group(1)), int(numeric.group(2)))
        elif named and named.group(1) in _MONTHS:
            year = named.group(3)
            parts = (int(year) if year else None, _MONTHS[named.group(1)], int(named.group(2)))

        if parts is not None:
            year, month, day = parts
            try:
                return date(year or self.today.year, month, day), year is not None
            except ValueError:
                return None

        return self._dateparser_fallback(token)

    def _full_year(self, year: Optional[str]) -> Optional[int]:
        if year is None:
            return None
        value = int(year)
        return 2000 + value if value < 100 else value

    def _dateparser_fallback(self, token: str) -> Optional[Tuple[date, bool]]:
        # Catches month names outside English ("iyul 10", "mart 5").
        parsed = dateparser.parse(
            token,
            languages=PREFERRED_LANGS,
            settings={
                "RELATIVE_BASE": datetime.combine(self.today, time()),
                "REQUIRE_PARTS": ["month", "day"],
                "DATE_ORDER": "MDY",
            },
        )
        if parsed is None:
            return None
        return parsed.date(), bool(_ANY_YEAR.search(token))

    # duration

    def duration(self, text: str) -> Optional[int]:
        match = _DURATION.search(text)
        if not match:
            return None
        count = int(match.group(1))
        unit = match.group(2)
        if unit == "week":
            return count * 7
        if unit == "month":
            return count * DAYS_PER_MONTH
        return count

    # departure strategies, tried in order

    def next_month(self, text: str) -> Optional[DepartureHint]:
        if "next month" not in text:
            return None
        return DepartureHint(add_months(self.today.replace(day=1), 1))

    def this_month(self, text: str) -> Optional[DepartureHint]:
        if "this month" not in text:
            return None
        if self.today.day == 1:
            return DepartureHint(self.today)
        return DepartureHint(self.today + timedelta(days=1))

    def next_weekend(self, text: str) -> Optional[DepartureHint]:
        if "next weekend" not in text:
            return None
        friday = _friday_on_or_before(self.today + timedelta(days=7))
        return DepartureHint(friday, WEEKEND_DURATION_DAYS)

    def this_weekend(self, text: str) -> Optional[DepartureHint]:
        if "this weekend" not in text:
            return None
        friday = _friday_on_or_before(self.today)
        if friday < self.today:
            friday += timedelta(days=7)
        return DepartureHint(friday, WEEKEND_DURATION_DAYS)

    def in_offset(self, text: str) -> Optional[DepartureHint]:
        match = _IN_OFFSET.search(text)
        if not match:
            return None
        count = int(match.group(1))
        unit = match.group(2)
        try:
            if unit == "month":
                return DepartureHint(add_months(self.today, count))
            days = count * 7 if unit == "week" else count
            return DepartureHint(self.today + timedelta(days=days))
        except (OverflowError, ValueError):
            logger.warning("Offset %r is out of range, ignoring it.", match.group(0))
            return None

    def month_name(self, text: str) -> Optional[DepartureHint]:
        match = _MONTH_MENTION.search(text)
        if not match:
            return None
        month = _MONTHS[match.group(1)]
        day = int(match.group(2)) if match.group(2) else 1
        year = int(match.group(3)) if match.group(3) else self.today.year
        try:
            departure = date(year, month, day)
        except ValueError:
            return None
        if departure < self.today and not match.group(3) and not _ANY_YEAR.search(text):
            departure = _next_year(departure)
        return DepartureHint(departure)


def resolve_travel_dates(phrase: Optional[str], today: Optional[date] = None) -> ParsedDateRange:
    return TravelDateResolver(today).resolve(phrase)
