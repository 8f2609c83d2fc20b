"""Driving distance and duration via OSRM."""

from __future__ import annotations

import logging

from property_finder.common.constants import OSRM_ROUTE_URL
from property_finder.common.errors import PipelineError
from property_finder.common.http import HttpClient, TimeoutConfig
from property_finder.common.models import DrivingRoute

logger = logging.getLogger(__name__)


def driving_route(
    origin_lat: float,
    origin_lon: float,
    dest_lat: float,
    dest_lon: float,
    client: HttpClient,
    *,
    timeout: TimeoutConfig | None = None,
) -> DrivingRoute | None:
    """Route between two points, or None when OSRM fails or answers nonsense.

    Callers fall back to the straight-line distance on None.
    """
    # OSRM takes lon,lat pairs.
    coords = f"{origin_lon},{origin_lat};{dest_lon},{dest_lat}"
    try:
        payload = client.get_json(
            f"{OSRM_ROUTE_URL}/{coords}",
            source_type="osrm",
            params={"overview": "false"},
            timeout=timeout,
        )
    except PipelineError as exc:
        logger.info("driving route unavailable", extra={"source": "osrm", "error_code": exc.error_code})
        return None

    if not isinstance(payload, dict) or payload.get("code") != "Ok":
        return None
    routes = payload.get("routes") or []
    if not routes or not isinstance(routes[0], dict):
        return None
    try:
        distance_m = float(routes[0]["distance"])
        duration_s = float(routes[0]["duration"])
    except (KeyError, TypeError, ValueError):
        return None
    return DrivingRoute(
        distance_km=round(distance_m / 1000 * 100) / 100,
        duration_minutes=int(duration_s / 60 + 0.5),
    )
