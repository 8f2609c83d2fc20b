import pytest

from property_finder.common.constants import NOMINATIM_SEARCH_URL, OSRM_ROUTE_URL, OVERPASS_URL
from property_finder.common.errors import UpstreamUnavailable, ValidationError
from property_finder.common.geometry import haversine_km, round_km
from property_finder.common.models import Stop
from property_finder.geo.profile import OFFICES, normalise_address, resolve_transit_profile, walk_to_stop

SOUTH_MORANG = {"lat": "-37.65", "lon": "145.08", "display_name": "South Morang, City of Whittlesea, Victoria, Australia"}
STOPS_PAYLOAD = {
    "elements": [
        {"lat": -37.6455, "lon": 145.08, "tags": {"railway": "station", "name": "South Morang"}},
        {"lat": -37.6482, "lon": 145.08, "tags": {"highway": "bus_stop", "name": "Gorge Rd"}},
    ]
}


def test_normalise_address_appends_state():
    assert normalise_address("South Morang") == "South Morang, Victoria, Australia"
    assert normalise_address(" 1 Main St, Geelong VIC ") == "1 Main St, Geelong VIC"
    with pytest.raises(ValidationError):
        normalise_address("")


def test_walk_to_stop_formats_metres_and_kilometres():
    assert walk_to_stop(Stop("A", "Bus", 0.2, 0, 0)) == {"distance": "200 m", "duration": "~2 min walk"}
    assert walk_to_stop(Stop("B", "Train", 1.5, 0, 0)) == {"distance": "1.5 km", "duration": "~18 min walk"}
    assert walk_to_stop(None) is None


def test_profile_uses_driving_routes_when_available(fake_client_factory):
    client = fake_client_factory(
        json_responses={
            NOMINATIM_SEARCH_URL: [SOUTH_MORANG],
            OSRM_ROUTE_URL: {"code": "Ok", "routes": [{"distance": 28000.0, "duration": 1800.0}]},
        },
        post_responses={OVERPASS_URL: STOPS_PAYLOAD},
    )

    profile = resolve_transit_profile("South Morang", client)

    assert profile["found"] is True
    assert profile["suburb"] == "South Morang"
    assert profile["durationText"] == "50 min by train"
    assert profile["durationTextCollingwood"] == "45 min"
    assert [step["vehicleType"] for step in profile["steps"]] == ["Train", "Bus"]
    assert profile["walkToFirstStop"]["distance"] == "200 m"
    for office in OFFICES:
        assert profile[f"distance{office.key}Km"] == 28.0
        assert profile[f"distance{office.key}Source"] == "driving"
        assert profile[f"duration{office.key}DrivingMin"] == 30


def test_profile_falls_back_to_straight_line_when_routing_fails(fake_client_factory):
    client = fake_client_factory(
        json_responses={
            NOMINATIM_SEARCH_URL: [SOUTH_MORANG],
            OSRM_ROUTE_URL: UpstreamUnavailable("HTTP status 502", status_code=502),
        },
        post_responses={OVERPASS_URL: STOPS_PAYLOAD},
    )

    profile = resolve_transit_profile("South Morang", client)

    for office in OFFICES:
        expected = round_km(haversine_km(-37.65, 145.08, office.lat, office.lon))
        assert profile[f"distance{office.key}Km"] == expected
        assert profile[f"distance{office.key}Source"] == "straight-line"
        assert profile[f"duration{office.key}DrivingMin"] is None


def test_profile_outside_commute_tables_has_no_duration_text(fake_client_factory):
    bendigo = {"lat": "-36.7570", "lon": "144.2794", "display_name": "Bendigo, City of Greater Bendigo, Victoria, Australia"}
    client = fake_client_factory(
        json_responses={
            NOMINATIM_SEARCH_URL: [bendigo],
            OSRM_ROUTE_URL: {"code": "Ok", "routes": [{"distance": 150000.0, "duration": 6600.0}]},
        },
        post_responses={OVERPASS_URL: {"elements": []}},
    )

    profile = resolve_transit_profile("Bendigo", client)

    assert profile["found"] is True
    assert profile["suburb"] is None
    assert profile["durationText"] is None
    assert profile["durationTextCollingwood"] is None
    assert profile["walkToFirstStop"] is None


def test_profile_not_found_skips_other_lookups(fake_client_factory):
    client = fake_client_factory(json_responses={NOMINATIM_SEARCH_URL: []})

    profile = resolve_transit_profile("Atlantis", client)

    assert profile["found"] is False
    assert "South Morang" in profile["message"]
    assert len(client.calls) == 1
