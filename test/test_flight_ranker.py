from dataclasses import replace

from conftest import make_flight, make_leg

from agents.flight_processor import process_flight_results
from agents.flight_ranker import deduplicate_and_rank, flight_key


def _option(number, price, link=None):
    raw = make_flight(price=price, legs=[make_leg(number)], link=link)
    return process_flight_results([raw])[0]


def test_duplicates_keep_the_earliest_bucket():
    best = [_option("J2 71", 250, link="best")]
    other = [_option("J2 71", 250, link="other"), _option("TK 1", 300)]
    generic = [_option("J2 71", 250, link="generic")]

    ranked = deduplicate_and_rank(best, other, generic)
    everything = ranked.best_flights + ranked.other_flights
    matches = [o for o in everything if flight_key(o) == flight_key(best[0])]
    assert len(matches) == 1
    assert matches[0].link == "best"


def test_other_before_generic_when_not_in_best():
    other = [_option("TK 1", 300, link="other")]
    generic = [_option("TK 1", 300, link="generic")]
    ranked = deduplicate_and_rank([], other, generic)
    assert [o.link for o in ranked.best_flights] == ["other"]
    assert ranked.other_flights == []


def test_partition_and_price_sort():
    best = [_option("A 1", 500)]
    other = [_option("B 1", 300), _option("C 1", 100)]
    generic = [_option("D 1", 200)]

    ranked = deduplicate_and_rank(best, other, generic)
    assert [o.derived_flight_numbers for o in ranked.best_flights] == ["A 1"]
    assert [o.price for o in ranked.other_flights] == [100, 200, 300]


def test_absent_price_sorts_last():
    no_price = replace(_option("Z 1", 100), price=None)
    ranked = deduplicate_and_rank([_option("A 1", 500)], [no_price, _option("B 1", 900)], [])
    assert [o.derived_flight_numbers for o in ranked.other_flights] == ["B 1", "Z 1"]


def test_cheapest_three_promoted_when_best_is_empty():
    other = [_option(f"X {p}", p) for p in (400, 100, 300, 200, 500)]
    ranked = deduplicate_and_rank([], other, [])
    assert [o.price for o in ranked.best_flights] == [100, 200, 300]
    assert [o.price for o in ranked.other_flights] == [400, 500]


def test_promotion_with_fewer_than_three():
    ranked = deduplicate_and_rank([], [_option("X 1", 100)], [])
    assert len(ranked.best_flights) == 1
    assert ranked.other_flights == []


def test_no_results_at_all():
    ranked = deduplicate_and_rank([], [], [])
    assert ranked.best_flights == []
    assert ranked.other_flights == []


def test_same_flight_at_different_price_is_not_a_duplicate():
    ranked = deduplicate_and_rank([_option("A 1", 100)], [_option("A 1", 120)], [])
    assert len(ranked.best_flights) == 1
    assert len(ranked.other_flights) == 1
