from nearbite.recommendations.filters import filter_places
from nearbite.recommendations.models import BusinessStatus, Location, PlaceRecord, PriceTier


def _place(name, rating=4.5, price=PriceTier.inexpensive, status=BusinessStatus.operational):
    return PlaceRecord(
        name=name,
        rating=rating,
        price_level=price,
        business_status=status,
        location=Location(lat=13.75, lng=100.5),
    )


def test_closed_places_never_pass():
    places = [
        _place("Temporarily Closed", rating=5.0, status=BusinessStatus.closed_temporarily),
        _place("Gone", rating=5.0, status=BusinessStatus.closed_permanently),
        _place("Unknown Status", rating=5.0, status=BusinessStatus.unspecified),
        _place("Open"),
    ]

    kept = filter_places(places, [], 0.0)

    assert [p.name for p in kept] == ["Open"]


def test_rating_floor_treats_missing_rating_as_zero():
    places = [_place("Unrated", rating=None), _place("Good", rating=4.2), _place("Meh", rating=3.9)]

    assert [p.name for p in filter_places(places, [], 0.0)] == ["Unrated", "Good", "Meh"]
    assert [p.name for p in filter_places(places, [], 4.0)] == ["Good"]


def test_rating_floor_is_inclusive():
    assert len(filter_places([_place("Edge", rating=4.0)], [], 4.0)) == 1


def test_empty_budget_accepts_every_tier():
    places = [_place(t.value, price=t) for t in PriceTier]

    assert len(filter_places(places, [], 0.0)) == 4


def test_budget_limits_tiers():
    places = [_place(t.value, price=t) for t in PriceTier]

    kept = filter_places(places, [PriceTier.inexpensive, PriceTier.very_expensive], 0.0)

    assert [p.name for p in kept] == ["$", "$$$$"]


def test_unspecified_price_matches_as_moderate():
    places = [_place("No Price", price=None)]

    assert filter_places(places, ["$$"], 0.0) == places
    assert filter_places(places, ["$"], 0.0) == []


def test_output_is_ordered_subset_of_input():
    places = [
        _place("a", rating=4.1),
        _place("b", rating=2.0),
        _place("c", rating=4.9, price=PriceTier.expensive),
        _place("d", rating=4.6),
        _place("e", rating=4.3, status=BusinessStatus.closed_permanently),
        _place("f", rating=4.0),
    ]

    kept = filter_places(places, ["$", "$$"], 4.0)

    assert [p.name for p in kept] == ["a", "d", "f"]
    assert all(p in places for p in kept)


def test_empty_input_gives_empty_output():
    assert filter_places([], ["$"], 4.0) == []
