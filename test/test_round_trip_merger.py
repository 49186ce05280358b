import asyncio

import pytest
import requests
from conftest import FakeSerpApi, make_flight, make_leg

from agents.flight_processor import process_flight_results
from agents.round_trip_merger import RoundTripMerger, merge_return_journey
from models.flight import ROUND_TRIP, FlightSearchCriteria

CRITERIA = FlightSearchCriteria(
    origin="GYD",
    destination="IST",
    departure_date="2026-03-05",
    return_date="2026-03-12",
    currency="EUR",
    hl="tr",
)


def _outbound(token="TOKEN-1", price=310):
    raw = make_flight(
        price=price,
        type="Round trip",
        departure_token=token,
        legs=[make_leg("J2 71", duration=180)],
    )
    return process_flight_results([raw])[0]


def _return_payload(*flights):
    return {"best_flights": list(flights)}


def _inbound(number="J2 72", duration=175, layover=None):
    legs = [
        make_leg(number, dep="Istanbul Airport", arr="Heydar Aliyev International Airport",
                 duration=duration, arr_time="2026-03-12 22:05"),
    ]
    extra = {"layovers": [layover]} if layover else {}
    return make_flight(price=310, legs=legs, **extra)


@pytest.mark.asyncio
async def test_merge_appends_return_legs_and_recomputes_fields():
    serpapi = FakeSerpApi({"TOKEN-1": _return_payload(_inbound())})
    result = await RoundTripMerger(serpapi).merge(_outbound(), CRITERIA)

    merged = result.option
    assert result.merged
    assert [leg.flight_number for leg in merged.legs] == ["J2 71", "J2 72"]
    assert merged.total_duration == 180 + 175
    assert merged.trip_type == ROUND_TRIP
    assert merged.departure_token is None
    assert merged.derived_arrival_time == "2026-03-12 22:05"
    assert merged.derived_arrival_airport_name == "Heydar Aliyev International Airport"
    assert merged.derived_stops_description == "Non-stop (each way)"
    assert merged.price == 310.0


@pytest.mark.asyncio
async def test_continuation_reuses_search_locale():
    serpapi = FakeSerpApi({"TOKEN-1": _return_payload(_inbound())})
    await RoundTripMerger(serpapi).merge(_outbound(), CRITERIA)
    call = serpapi.calls[0]
    assert call["engine"] == "google_flights"
    assert call["departure_token"] == "TOKEN-1"
    assert call["currency"] == "EUR"
    assert call["hl"] == "tr"


@pytest.mark.asyncio
async def test_total_duration_counts_layovers():
    inbound = make_flight(
        price=310,
        legs=[make_leg("TK 1", duration=60), make_leg("TK 2", duration=70)],
        layovers=[{"duration": 45, "name": "Tbilisi International Airport", "id": "TBS"}],
    )
    serpapi = FakeSerpApi({"TOKEN-1": {"other_flights": [inbound]}})
    merged = await merge_return_journey(_outbound(), CRITERIA, serpapi)

    legs_total = sum(leg.duration or 0 for leg in merged.legs)
    layovers_total = sum(l.duration or 0 for l in merged.layovers)
    assert merged.total_duration == legs_total + layovers_total == 180 + 60 + 70 + 45
    assert merged.derived_stops_description == "1 stop in Tbilisi International Airport"


@pytest.mark.asyncio
async def test_first_candidate_wins_in_bucket_order():
    serpapi = FakeSerpApi({
        "TOKEN-1": {
            "best_flights": [make_flight(price=None)],
            "other_flights": [_inbound("OTHER 1")],
            "flights": [_inbound("GENERIC 1")],
        }
    })
    merged = await merge_return_journey(_outbound(), CRITERIA, serpapi)
    assert merged.legs[-1].flight_number == "OTHER 1"


@pytest.mark.asyncio
async def test_option_without_token_is_returned_unchanged(fake_serpapi):
    option = process_flight_results([make_flight()])[0]
    result = await RoundTripMerger(fake_serpapi).merge(option, CRITERIA)
    assert result.option is option
    assert not result.merged
    assert fake_serpapi.calls == []


@pytest.mark.asyncio
async def test_merging_twice_is_a_no_op():
    serpapi = FakeSerpApi({"TOKEN-1": _return_payload(_inbound())})
    once = await merge_return_journey(_outbound(), CRITERIA, serpapi)
    twice = await merge_return_journey(once, CRITERIA, serpapi)
    assert twice is once
    assert len(serpapi.calls) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        requests.ConnectionError("boom"),
        ValueError("SERPAPI_KEY is missing."),
        {"error": "Invalid departure_token"},
        {"best_flights": [], "other_flights": []},
    ],
)
async def test_failed_continuation_keeps_outbound(response):
    serpapi = FakeSerpApi({"TOKEN-1": response})
    outbound = _outbound()
    result = await RoundTripMerger(serpapi).merge(outbound, CRITERIA)
    assert not result.merged
    assert result.option is outbound
    assert result.reason


@pytest.mark.asyncio
async def test_merge_all_isolates_failures_and_keeps_order():
    serpapi = FakeSerpApi({
        "A": _return_payload(_inbound("RET A")),
        "B": requests.Timeout("slow"),
        "C": _return_payload(_inbound("RET C")),
    })
    outbounds = [_outbound("A", 100), _outbound("B", 200), _outbound("C", 300)]
    merged = await RoundTripMerger(serpapi).merge_all(outbounds, CRITERIA)

    assert [o.price for o in merged] == [100, 200, 300]
    assert merged[0].legs[-1].flight_number == "RET A"
    assert merged[1] is outbounds[1]
    assert merged[2].legs[-1].flight_number == "RET C"


def test_merge_can_run_without_criteria():
    serpapi = FakeSerpApi({"TOKEN-1": _return_payload(_inbound())})
    merged = asyncio.run(merge_return_journey(_outbound(), serpapi=serpapi))
    assert merged.departure_token is None
    assert "currency" not in serpapi.calls[0]
