"""Nominatim geocoding."""

from __future__ import annotations

from property_finder.common.constants import NOMINATIM_SEARCH_URL
from property_finder.common.errors import UpstreamDegraded, ValidationError
from property_finder.common.geometry import safe_float, valid_lat_lon
from property_finder.common.http import HttpClient, TimeoutConfig
from property_finder.common.models import GeoPoint

COUNTRY_CODES = "au"
VICTORIA_SUFFIX = ", Victoria, Australia"


def suburb_query(name: str) -> str:
    return f"{name}{VICTORIA_SUFFIX}"


def geocode(query: str, client: HttpClient, *, timeout: TimeoutConfig | None = None) -> GeoPoint | None:
    """First Nominatim match for ``query`` or None when nothing matched.

    Every call goes through the shared ``nominatim`` delay gate inside the
    client, whichever stage or lookup issued it.
    """
    if not isinstance(query, str) or not query.strip():
        raise ValidationError("Geocode query must be a non-empty string")

    payload = client.get_json(
        NOMINATIM_SEARCH_URL,
        source_type="nominatim",
        params={"q": query.strip(), "format": "json", "limit": 1, "countrycodes": COUNTRY_CODES},
        timeout=timeout,
    )
    if not isinstance(payload, list):
        raise UpstreamDegraded("Nominatim returned an unexpected payload")
    if not payload:
        return None

    first = payload[0] if isinstance(payload[0], dict) else {}
    lat = safe_float(first.get("lat"))
    lon = safe_float(first.get("lon"))
    if not valid_lat_lon(lat, lon):
        return None
    return GeoPoint(lat=lat, lon=lon, display_name=first.get("display_name"))
