"""Listing-site families.

Each family owns its URL grammar for the suburb name. The grammars differ
between sites and are not shared.
"""

from __future__ import annotations

import re
from urllib.parse import urlparse

from property_finder.common.constants import STATE_CODES
from property_finder.listing import fields
from property_finder.listing.fields import PriceStrategy


def _title_words(raw: str) -> str | None:
    raw = raw.strip()
    if not raw:
        return None
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), raw)


class ListingSite:
    name = "generic"
    host_suffix: str | None = None
    price_strategies: tuple[PriceStrategy, ...] = (
        fields.price_from_dollar_range,
        fields.price_from_structured_field,
        fields.price_from_million_shorthand,
    )
    failure_guidance = "Could not load the listing. Enter the details manually instead."

    def matches(self, url: str) -> bool:
        if self.host_suffix is None:
            return False
        host = (urlparse(url).hostname or "").lower()
        return host == self.host_suffix or host.endswith("." + self.host_suffix)

    def suburb_from_url(self, url: str) -> str | None:
        return None

    def property_type_from_url(self, url: str) -> str | None:
        return None


class DomainSite(ListingSite):
    """domain.com.au: ``/<address>-<suburb>-<state>-<postcode>-<id>``."""

    name = "domain"
    host_suffix = "domain.com.au"
    price_strategies = (
        fields.price_from_dollar_range,
        fields.price_from_million_shorthand,
    )
    failure_guidance = (
        "Domain often blocks automated requests. Use the manual form: the suburb has been filled in "
        "from your URL. Add price, beds, baths and other details from the listing page, then assess "
        "the manual entry."
    )

    _PATH_RE = re.compile(r"domain\.com\.au/([^/?#]+)", re.IGNORECASE)

    def suburb_from_url(self, url: str) -> str | None:
        match = self._PATH_RE.search(url)
        if not match:
            return None
        parts = match.group(1).split("-")
        state_idx = next((i for i, part in enumerate(parts) if part.lower() in STATE_CODES), -1)
        if state_idx <= 0:
            return None
        words = [part for part in parts[:state_idx] if not part.isdigit()]
        return _title_words(" ".join(words))


class RealestateSite(ListingSite):
    """realestate.com.au: ``/property-<type>-<state>-<suburb>-<id>``."""

    name = "realestate"
    host_suffix = "realestate.com.au"
    failure_guidance = (
        "Could not load the realestate.com.au listing. The page may be unavailable or the URL may be "
        "incorrect."
    )

    _SUBURB_RE = re.compile(
        r"[/-](?:" + "|".join(STATE_CODES) + r")-([^-\d?/]+?)(?:-\d+)?(?:\?|$)",
        re.IGNORECASE,
    )

    def suburb_from_url(self, url: str) -> str | None:
        match = self._SUBURB_RE.search(url)
        if not match:
            return None
        return _title_words(match.group(1).replace("+", " "))

    def property_type_from_url(self, url: str) -> str | None:
        path = urlparse(url).path.lower()
        if re.search(r"property-unit|apartment|unit", path):
            return "Unit"
        if "townhouse" in path:
            return "Townhouse"
        if "house" in path:
            return "House"
        return None


SITES: tuple[ListingSite, ...] = (DomainSite(), RealestateSite())
GENERIC_SITE = ListingSite()


def site_for_url(url: str) -> ListingSite | None:
    for site in SITES:
        if site.matches(url):
            return site
    return None
