"""Transit profile for an address: stops, office distances and commute text."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from property_finder.common.errors import ValidationError
from property_finder.common.geometry import haversine_km, round_km
from property_finder.common.http import HttpClient
from property_finder.common.models import DrivingRoute, NearbyStops, Stop
from property_finder.geo.commute import COMMUTE_TO_COLLINGWOOD, commute_lookup, match_commute_suburb
from property_finder.geo.geocode import VICTORIA_SUFFIX, geocode
from property_finder.geo.routing import driving_route
from property_finder.geo.stops import DEFAULT_RADIUS_M, nearest_stops

logger = logging.getLogger(__name__)

DESTINATION = "Southern Cross Station"
WALK_MINUTES_PER_KM = 12
NOT_FOUND_MESSAGE = "Address not found. Try suburb name (e.g. South Morang)."


@dataclass(frozen=True)
class Office:
    key: str
    label: str
    lat: float
    lon: float


OFFICES = (
    Office(key="Siemens", label="Siemens (380 Docklands Dr, Docklands)", lat=-37.8190, lon=144.9460),
    Office(key="Canva", label="Canva (30 Rupert St, Collingwood)", lat=-37.8024, lon=144.9927),
)


def normalise_address(address: object) -> str:
    if not isinstance(address, str) or not address.strip():
        raise ValidationError("Missing address (e.g. suburb name or full address)")
    address = address.strip()
    if "VIC" in address or "Australia" in address:
        return address
    return f"{address}{VICTORIA_SUFFIX}"


def walk_to_stop(stop: Stop | None) -> dict | None:
    if stop is None:
        return None
    km = stop.distance_km
    distance = f"{int(km * 1000 + 0.5)} m" if km < 1 else f"{km:.1f} km"
    minutes = int(km * WALK_MINUTES_PER_KM + 0.5)
    return {"distance": distance, "duration": f"~{minutes} min walk"}


def stop_steps(stops: NearbyStops) -> list[dict]:
    return [
        {
            "departureStop": stop.name,
            "vehicleType": stop.type,
            "lineShortName": None,
            "summary": f"{stop.name} - {stop.type} ({stop.distance_km} km)",
        }
        for stop in stops.found()
    ]


def office_distance(lat: float, lon: float, office: Office, route: DrivingRoute | None) -> dict:
    if route is not None:
        return {"distanceKm": route.distance_km, "source": "driving", "durationMinutes": route.duration_minutes}
    straight = round_km(haversine_km(lat, lon, office.lat, office.lon))
    return {"distanceKm": straight, "source": "straight-line", "durationMinutes": None}


def resolve_transit_profile(
    address: str,
    client: HttpClient,
    *,
    radius_m: int = DEFAULT_RADIUS_M,
) -> dict:
    """Geocode ``address`` then look up stops and office routes in parallel.

    A geocode miss is not an error: the profile comes back with ``found``
    false and a hint message.
    """
    query = normalise_address(address)
    point = geocode(query, client)
    if point is None:
        return {
            "found": False,
            "address": query,
            "destination": DESTINATION,
            "durationText": None,
            "steps": [],
            "walkToFirstStop": None,
            "message": NOT_FOUND_MESSAGE,
        }

    suburb = match_commute_suburb(point.display_name) or match_commute_suburb(query)

    with ThreadPoolExecutor(max_workers=1 + len(OFFICES)) as pool:
        stops_future = pool.submit(nearest_stops, point.lat, point.lon, client, radius_m=radius_m)
        route_futures = {
            office.key: pool.submit(driving_route, point.lat, point.lon, office.lat, office.lon, client)
            for office in OFFICES
        }
        routes = {key: future.result() for key, future in route_futures.items()}
        stops = stops_future.result()

    profile = {
        "found": True,
        "address": point.display_name or query,
        "destination": DESTINATION,
        "durationText": commute_lookup(suburb),
        "durationTextCollingwood": commute_lookup(suburb, COMMUTE_TO_COLLINGWOOD),
        "durationValue": None,
        "steps": stop_steps(stops),
        "walkToFirstStop": walk_to_stop(stops.nearest()),
        "suburb": suburb,
        "lat": point.lat,
        "lon": point.lon,
    }
    for office in OFFICES:
        distance = office_distance(point.lat, point.lon, office, routes[office.key])
        profile[f"distance{office.key}Km"] = distance["distanceKm"]
        profile[f"distance{office.key}Source"] = distance["source"]
        profile[f"duration{office.key}DrivingMin"] = distance["durationMinutes"]

    logger.debug(
        "transit profile resolved",
        extra={"source": "transit", "suburb": suburb, "event": "TRANSIT_PROFILE", "rows_out": len(profile["steps"])},
    )
    return profile
