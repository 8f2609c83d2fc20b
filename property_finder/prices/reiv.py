"""REIV suburb median-price resolver with a short-lived cache."""

from __future__ import annotations

import logging
import re
from typing import Callable
from urllib.parse import quote, unquote

from bs4 import BeautifulSoup

from property_finder.common.cache import TtlCache
from property_finder.common.constants import REIV_SUBURB_URL
from property_finder.common.errors import UpstreamUnavailable, ValidationError
from property_finder.common.http import HttpClient, TimeoutConfig
from property_finder.common.models import PriceSnapshot

logger = logging.getLogger(__name__)

REIV_CACHE_TTL_SECONDS = 5 * 60

MedianStrategy = Callable[[str], "int | None"]

_AMOUNT = r"\$\s*(\d[\d,]*(?:\.\d+)?)\s*(mil(?:lion)?|m|k)?\b"
_LABELLED_RE = re.compile(r"Median\s*sale\s*price[^$]{0,200}?" + _AMOUNT, re.IGNORECASE)
_LOOSE_MILLION_RE = re.compile(r"\$\s*(\d(?:\.\d+)?)\s*(mil(?:lion)?|m)\b", re.IGNORECASE)
_LOOSE_THOUSAND_RE = re.compile(r"\$\s*(\d+(?:\.\d+)?)\s*(k)\b", re.IGNORECASE)
_LOOSE_PLAIN_RE = re.compile(r"\$\s*(\d[\d,]*)()")
_UNITS_RE = re.compile(r"\bUnits?\b.{0,300}?(?:median|price).{0,200}?" + _AMOUNT, re.IGNORECASE | re.DOTALL)
_QUARTERLY_CHANGE_RE = re.compile(r"Quarterly\s*price\s*change.{0,200}?(-?\d+(?:\.\d+)?)\s*%", re.IGNORECASE | re.DOTALL)


def scale_amount(number: str, suffix: str | None) -> int | None:
    cleaned = number.replace(",", "")
    try:
        value = float(cleaned)
    except ValueError:
        return None
    suffix = (suffix or "").lower()
    if suffix.startswith("m"):
        value *= 1_000_000
    elif suffix == "k":
        value *= 1_000
    amount = int(round(value))
    return amount if amount > 0 else None


def _from_match(match: re.Match[str] | None) -> int | None:
    if match is None:
        return None
    return scale_amount(match.group(1), match.group(2))


def labelled_median(text: str) -> int | None:
    return _from_match(_LABELLED_RE.search(text))


def loose_million(text: str) -> int | None:
    return _from_match(_LOOSE_MILLION_RE.search(text))


def loose_thousand(text: str) -> int | None:
    return _from_match(_LOOSE_THOUSAND_RE.search(text))


def loose_plain(text: str) -> int | None:
    return _from_match(_LOOSE_PLAIN_RE.search(text))


MEDIAN_STRATEGIES: tuple[MedianStrategy, ...] = (
    labelled_median,
    loose_million,
    loose_thousand,
    loose_plain,
)


def unit_median(text: str) -> int | None:
    return _from_match(_UNITS_RE.search(text))


def quarterly_change(text: str) -> float | None:
    match = _QUARTERLY_CHANGE_RE.search(text)
    return float(match.group(1)) if match else None


def page_text(html: str) -> str:
    return BeautifulSoup(html, "html.parser").get_text(" ", strip=True)


def parse_reiv_page(html: str) -> PriceSnapshot:
    text = page_text(html)
    median = None
    for strategy in MEDIAN_STRATEGIES:
        median = strategy(text)
        if median is not None:
            break
    return PriceSnapshot(
        median_price=median,
        median_price_unit=unit_median(text),
        quarterly_change=quarterly_change(text),
        source="reiv",
    )


def normalise_slug(slug: object) -> str:
    if not isinstance(slug, str):
        raise ValidationError("Missing suburb slug")
    cleaned = re.sub(r"\s+", " ", unquote(slug.replace("+", " "))).strip()
    if not cleaned:
        raise ValidationError("Missing suburb slug")
    return cleaned


def suburb_url(slug: str) -> str:
    return REIV_SUBURB_URL.format(slug=quote(slug, safe=""))


class PriceResolver:
    """Cache-first lookups of REIV suburb pages.

    A non-2xx page is a negative result (None). Transport failures still
    raise UpstreamUnavailable so batch callers can log and move on.
    """

    def __init__(
        self,
        client: HttpClient,
        *,
        cache: TtlCache[PriceSnapshot] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> None:
        self.client = client
        self.cache = cache if cache is not None else TtlCache(REIV_CACHE_TTL_SECONDS)
        self.timeout = timeout or TimeoutConfig(connect=5.0, read=20.0)

    def resolve(self, slug: str) -> PriceSnapshot | None:
        slug = normalise_slug(slug)
        cached = self.cache.get(slug)
        if cached is not None:
            return cached

        try:
            html = self.client.get_html(suburb_url(slug), source_type="reiv", timeout=self.timeout)
        except UpstreamUnavailable as exc:
            if exc.status_code is None:
                raise
            logger.info(
                "reiv page not found",
                extra={"source": "reiv", "suburb": slug, "event": "REIV_NOT_FOUND", "error_code": exc.error_code},
            )
            return None

        snapshot = parse_reiv_page(html)
        self.cache.set(slug, snapshot)
        return snapshot
