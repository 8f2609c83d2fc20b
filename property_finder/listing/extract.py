"""Listing extraction from raw real-estate HTML."""

from __future__ import annotations

import logging
from urllib.parse import urlparse

from property_finder.common.constants import BROWSER_USER_AGENT
from property_finder.common.errors import BlockedOrChallenged, UpstreamUnavailable, ValidationError
from property_finder.common.http import HttpClient, TimeoutConfig
from property_finder.common.models import Listing
from property_finder.listing import fields
from property_finder.listing.sites import GENERIC_SITE, ListingSite, site_for_url

logger = logging.getLogger(__name__)

SCRAPE_HEADERS = {
    "User-Agent": BROWSER_USER_AGENT,
    "Accept-Language": "en-AU,en;q=0.9",
    "Referer": "https://www.domain.com.au/",
    "Cache-Control": "no-cache",
}
SCRAPE_TIMEOUT = TimeoutConfig(connect=5.0, read=15.0)
UNSUPPORTED_URL_MESSAGE = "Please use a listing URL from domain.com.au or realestate.com.au."


def extract_listing(html: str, origin_url: str, site: ListingSite | None = None) -> Listing:
    """Best-effort extraction; fields that cannot be found are None."""
    html = html or ""
    site = site or site_for_url(origin_url) or GENERIC_SITE
    suburb = site.suburb_from_url(origin_url)
    kind = site.property_type_from_url(origin_url) or fields.property_type(html) or fields.DEFAULT_PROPERTY_TYPE

    return Listing(
        price=fields.first_price(html, site.price_strategies),
        suburb=suburb,
        bedrooms=fields.bedrooms(html),
        bathrooms=fields.bathrooms(html),
        garage=fields.parking(html),
        property_type=kind,
        garden=fields.garden(html),
        pool=fields.pool(html),
        display_address=fields.display_address(html, suburb),
    )


def validate_listing_url(url: object) -> ListingSite:
    if not isinstance(url, str) or not url.strip():
        raise ValidationError("Missing or invalid url")
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ValidationError("Missing or invalid url")
    site = site_for_url(url.strip())
    if site is None:
        raise ValidationError(UNSUPPORTED_URL_MESSAGE)
    return site


def fetch_listing(url: str, client: HttpClient, *, timeout: TimeoutConfig | None = None) -> dict:
    """Fetch a listing page and extract it.

    Raises ValidationError for unsupported URLs and BlockedOrChallenged when
    the page could not be loaded (non-2xx, timeout) or the site served an
    anti-automation page. The latter carries the suburb parsed from the URL
    so callers can pre-fill a manual entry form.
    """
    site = validate_listing_url(url)
    url = url.strip()
    suggested = site.suburb_from_url(url)
    try:
        html = client.get_html(url, source_type="listing", headers=SCRAPE_HEADERS, timeout=timeout or SCRAPE_TIMEOUT)
    except UpstreamUnavailable as exc:
        logger.warning(
            "listing fetch failed",
            extra={"source": site.name, "event": "LISTING_FETCH_FAIL", "status": "error", "suburb": suggested, "error_code": exc.error_code},
        )
        raise BlockedOrChallenged(str(exc), suggested_suburb=suggested, guidance=site.failure_guidance) from exc

    if fields.looks_blocked(html):
        logger.warning(
            "listing page blocked",
            extra={"source": site.name, "event": "LISTING_BLOCKED", "status": "error", "suburb": suggested},
        )
        raise BlockedOrChallenged(
            "Page returned a block or challenge",
            suggested_suburb=suggested,
            guidance=site.failure_guidance,
        )

    listing = extract_listing(html, url, site)
    return {"listing": listing.to_dict(), "source": site.name, "listingUrl": url}
