import pytest
import requests
from conftest import FakeSerpApi

from utils.airport_codes import to_airport_code


def test_iata_codes_pass_through_with_aliases():
    assert to_airport_code("IST") == "IST"
    assert to_airport_code("ist") == "IST"
    assert to_airport_code("NYC") == "JFK"
    assert to_airport_code("BAK") == "GYD"


def test_city_table_is_case_insensitive():
    assert to_airport_code("Baku") == "GYD"
    assert to_airport_code("  new york ") == "JFK"
    assert to_airport_code("TBILISI") == "TBS"


def test_trivial_inputs_are_skipped(fake_serpapi):
    assert to_airport_code("", fake_serpapi) is None
    assert to_airport_code(None, fake_serpapi) is None
    assert to_airport_code("X", fake_serpapi) is None
    assert to_airport_code("Current Location", fake_serpapi) is None
    assert fake_serpapi.calls == []


def test_unknown_city_without_client_is_absent():
    assert to_airport_code("Gabala") is None


def test_lookup_uses_airports_first():
    serpapi = FakeSerpApi({"google_flights_travel_partners": {"airports": [{"id": "GBB"}]}})
    assert to_airport_code("Gabala", serpapi) == "GBB"
    assert serpapi.calls[0]["q"] == "Gabala airport code"


def test_lookup_falls_back_to_answer_box_and_snippets():
    answer = FakeSerpApi({"google_flights_travel_partners": {"answer_box": {"answer": "Code: NAJ"}}})
    assert to_airport_code("Nakhchivan", answer) == "NAJ"

    graph = FakeSerpApi({"google_flights_travel_partners": {"knowledge_graph": {"description": "Airport, IATA: kvd"}}})
    assert to_airport_code("Ganja", graph) == "KVD"

    organic = FakeSerpApi({
        "google_flights_travel_partners": {
            "organic_results": [{"title": "Lankaran International Airport (LLK)", "snippet": ""}]
        }
    })
    assert to_airport_code("Lankaran", organic) == "LLK"


def test_lookup_failure_is_absent():
    serpapi = FakeSerpApi({"google_flights_travel_partners": requests.HTTPError("429")})
    assert to_airport_code("Gabala", serpapi) is None
    assert to_airport_code("Gabala", FakeSerpApi({})) is None


@pytest.mark.parametrize(
    "payload",
    [
        {"organic_results": ["junk", None, 7]},
        {"answer_box": "GYD", "knowledge_graph": "Springfield"},
        {"airports": {"id": "SGF"}},
        {"airports": ["SGF"], "organic_results": {"title": "(SGF)"}},
    ],
)
def test_malformed_lookup_payloads_are_absent(payload):
    serpapi = FakeSerpApi({"google_flights_travel_partners": payload})
    assert to_airport_code("Springfield", serpapi) is None


def test_malformed_entries_are_skipped_not_fatal():
    serpapi = FakeSerpApi({
        "google_flights_travel_partners": {
            "organic_results": ["junk", {"title": "Springfield-Branson National Airport (SGF)"}]
        }
    })
    assert to_airport_code("Springfield", serpapi) == "SGF"
