"""Geometry helpers."""

from __future__ import annotations

import math
from typing import Any

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def round_km(value: float) -> float:
    return round(value * 100) / 100


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def valid_lat_lon(lat: float | None, lon: float | None) -> bool:
    if lat is None or lon is None:
        return False
    if math.isnan(lat) or math.isnan(lon):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


def coords_from_value(value: Any) -> tuple[float, float] | None:
    """Return ``(lat, lon)`` for a persisted ``[lat, lon]`` pair, else None."""
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return None
    lat = safe_float(value[0])
    lon = safe_float(value[1])
    if not valid_lat_lon(lat, lon):
        return None
    return lat, lon
