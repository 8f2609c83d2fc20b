"""Nearest public-transport stops from Overpass."""

from __future__ import annotations

from property_finder.common.constants import OVERPASS_URL
from property_finder.common.errors import UpstreamDegraded, ValidationError
from property_finder.common.geometry import haversine_km, round_km, safe_float, valid_lat_lon
from property_finder.common.http import HttpClient, TimeoutConfig
from property_finder.common.models import NearbyStops, Stop

DEFAULT_RADIUS_M = 2500
STOP_FILTERS = (
    '["railway"="station"]',
    '["railway"="halt"]',
    '["public_transport"="stop_position"]',
    '["highway"="bus_stop"]',
)


def build_stops_query(lat: float, lon: float, radius_m: int = DEFAULT_RADIUS_M, timeout_seconds: int = 15) -> str:
    around = f"(around:{radius_m},{lat},{lon})"
    nodes = "".join(f"node{tag_filter}{around};" for tag_filter in STOP_FILTERS)
    return f"[out:json][timeout:{timeout_seconds}];({nodes});out body;"


def classify_stop(tags: dict) -> str:
    if tags.get("railway") in ("station", "halt"):
        return "Train"
    if tags.get("tram") == "yes" or tags.get("light_rail") == "yes":
        return "Tram"
    if tags.get("public_transport") and not tags.get("bus"):
        return "Tram"
    return "Bus"


def parse_stops(payload: dict, lat: float, lon: float) -> list[Stop]:
    stops: list[Stop] = []
    for element in payload.get("elements") or []:
        if not isinstance(element, dict):
            continue
        stop_lat = safe_float(element.get("lat"))
        stop_lon = safe_float(element.get("lon"))
        if not valid_lat_lon(stop_lat, stop_lon):
            continue
        tags = element.get("tags") or {}
        stops.append(
            Stop(
                name=tags.get("name") or tags.get("station") or "Stop",
                type=classify_stop(tags),
                distance_km=round_km(haversine_km(lat, lon, stop_lat, stop_lon)),
                lat=stop_lat,
                lon=stop_lon,
            )
        )
    return sorted(stops, key=lambda stop: stop.distance_km)


def nearest_by_type(stops: list[Stop]) -> NearbyStops:
    by_type: dict[str, Stop] = {}
    for stop in sorted(stops, key=lambda s: s.distance_km):
        by_type.setdefault(stop.type, stop)
    return NearbyStops(train=by_type.get("Train"), tram=by_type.get("Tram"), bus=by_type.get("Bus"))


def nearest_stops(
    lat: float,
    lon: float,
    client: HttpClient,
    *,
    radius_m: int = DEFAULT_RADIUS_M,
    timeout: TimeoutConfig | None = None,
) -> NearbyStops:
    if not valid_lat_lon(safe_float(lat), safe_float(lon)):
        raise ValidationError("Missing or invalid lat, lon")
    lat, lon = float(lat), float(lon)

    payload = client.post_form_json(
        OVERPASS_URL,
        source_type="overpass",
        data={"data": build_stops_query(lat, lon, radius_m)},
        timeout=timeout or TimeoutConfig(connect=5.0, read=20.0),
    )
    if not isinstance(payload, dict):
        raise UpstreamDegraded("Overpass returned an unexpected payload")
    return nearest_by_type(parse_stops(payload, lat, lon))
