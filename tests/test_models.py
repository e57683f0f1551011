import random

import pytest

from tourplanner.domain.models import (
    CURRENT_LOCATION_LABEL,
    GeoPoint,
    LocationPoint,
    SelectionSet,
    Suggestion,
    Waypoint,
)


def test_geopoint_rejects_out_of_range():
    with pytest.raises(ValueError):
        GeoPoint(91.0, 0.0)
    with pytest.raises(ValueError):
        GeoPoint(0.0, -181.0)


def test_geopoint_param_format():
    assert GeoPoint(-33.9, 18.4).to_param() == "-33.9,18.4"


def test_text_edit_always_drops_coordinates():
    resolved = LocationPoint(address="Cape Town", coords=GeoPoint(-33.9, 18.4))
    edited = LocationPoint.from_text(resolved.address + " CBD")

    assert edited.coords is None
    assert not edited.is_resolved
    assert edited.address == "Cape Town CBD"
    # the original value is untouched
    assert resolved.is_resolved


def test_text_edit_with_same_text_still_drops_coordinates():
    assert LocationPoint.from_text("Cape Town").coords is None


def test_from_suggestion_and_device():
    suggestion = Suggestion(id="1", label="Stellenbosch, WC", coords=GeoPoint(-33.93, 18.86))
    point = LocationPoint.from_suggestion(suggestion)
    assert point == LocationPoint("Stellenbosch, WC", GeoPoint(-33.93, 18.86))

    device = LocationPoint.from_device(GeoPoint(-26.2, 28.0))
    assert device.address == CURRENT_LOCATION_LABEL
    assert device.is_current_location


class TestSelectionSet:
    def test_toggle_appends_then_removes(self, brewery_a, brewery_b):
        selection = SelectionSet()

        assert selection.toggle(brewery_a) is True
        assert selection.toggle(brewery_b) is True
        assert selection.ids == ("a", "b")

        assert selection.toggle(brewery_a) is False
        assert selection.ids == ("b",)
        assert brewery_a not in selection
        assert "b" in selection

    def test_re_adding_moves_to_the_end(self, brewery_a, brewery_b, brewery_c):
        selection = SelectionSet()
        for waypoint in (brewery_a, brewery_b, brewery_c):
            selection.toggle(waypoint)

        selection.toggle(brewery_a)
        selection.toggle(brewery_a)

        assert selection.ids == ("b", "c", "a")

    def test_removal_keeps_order_of_the_rest(self, brewery_a, brewery_b, brewery_c):
        selection = SelectionSet()
        for waypoint in (brewery_a, brewery_b, brewery_c):
            selection.toggle(waypoint)

        selection.toggle(brewery_b)

        assert [w.name for w in selection] == ["Brewery A", "Brewery C"]

    def test_identity_is_the_id(self, brewery_a):
        selection = SelectionSet()
        selection.toggle(brewery_a)
        twin = Waypoint(id="a", name="Renamed", address="", coords=GeoPoint(0, 0))

        selection.toggle(twin)

        assert len(selection) == 0

    def test_random_toggle_sequences(self):
        rng = random.Random(1234)
        pool = [
            Waypoint(id=str(i), name=f"W{i}", address="", coords=GeoPoint(-30, 20 + i / 10))
            for i in range(6)
        ]

        for _ in range(50):
            selection = SelectionSet()
            counts = {w.id: 0 for w in pool}
            last_added = {}
            for step in range(rng.randint(0, 40)):
                waypoint = rng.choice(pool)
                selection.toggle(waypoint)
                counts[waypoint.id] += 1
                if counts[waypoint.id] % 2 == 1:
                    last_added[waypoint.id] = step

            expected_members = {wid for wid, n in counts.items() if n % 2 == 1}
            assert set(selection.ids) == expected_members
            assert len(selection.ids) == len(set(selection.ids))
            assert list(selection.ids) == sorted(expected_members, key=last_added.__getitem__)
