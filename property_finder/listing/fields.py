"""Field parsers for listing pages.

Each parser takes the raw page HTML and returns a value or None. Price
parsers are kept as separate strategies so a site can choose its own chain;
the first strategy to produce an in-range value wins.
"""

from __future__ import annotations

import re
from typing import Callable

from bs4 import BeautifulSoup

PRICE_MIN = 10_000
PRICE_MAX = 50_000_000

PriceStrategy = Callable[[str], "int | None"]

_DOLLAR_RANGE_RE = re.compile(r"\$[\d,]+(?:\s*-\s*\$?[\d,]+)?")
_JSON_PRICE_RE = re.compile(r'"price":\s*(\d+)')
_MILLION_RE = re.compile(r"\$(\d(?:\.\d)?)\s*[mM]")

_BEDS_RE = re.compile(r"(\d+)\s*Bed(?:s|room)?", re.IGNORECASE)
_BATHS_RE = re.compile(r"(\d+)\s*Bath(?:s|room)?", re.IGNORECASE)
_PARKING_RE = re.compile(r"(\d+)\s*(?:Parking|Car|Garage)", re.IGNORECASE)

_TYPE_RE = re.compile(r">\s*(House|Unit|Townhouse|Villa|Apartment)\s*<", re.IGNORECASE)
_GARDEN_RE = re.compile(r"garden|courtyard|yard|outdoor\s*space")
_POOL_RE = re.compile(r"pool")
_TITLE_SEPARATOR_RE = re.compile(r"\s*\|.*$", re.DOTALL)

_BLOCK_RE = re.compile(r"blocked|captcha|challenge|access denied|robot", re.IGNORECASE)
BLOCK_PAGE_MAX_LENGTH = 5000

DEFAULT_PROPERTY_TYPE = "House"


def in_price_range(value: int | None) -> bool:
    return value is not None and PRICE_MIN <= value <= PRICE_MAX


def price_from_dollar_range(html: str) -> int | None:
    """``$1,100,000 - $1,210,000`` -> 1100000 (lower bound of the range)."""
    for token in _DOLLAR_RANGE_RE.findall(html):
        lower = token.replace("$", "").replace(",", "")
        lower = re.split(r"\s*-\s*", lower)[0].strip()
        if not lower.isdigit():
            continue
        value = int(lower)
        if in_price_range(value):
            return value
    return None


def price_from_structured_field(html: str) -> int | None:
    for match in _JSON_PRICE_RE.finditer(html):
        value = int(match.group(1))
        if in_price_range(value):
            return value
    return None


def price_from_million_shorthand(html: str) -> int | None:
    """``$1.1m`` -> 1100000."""
    for match in _MILLION_RE.finditer(html):
        value = int(round(float(match.group(1)) * 1_000_000))
        if in_price_range(value):
            return value
    return None


def first_price(html: str, strategies: tuple[PriceStrategy, ...]) -> int | None:
    for strategy in strategies:
        value = strategy(html)
        if value is not None:
            return value
    return None


def _first_int(pattern: re.Pattern[str], html: str) -> int | None:
    match = pattern.search(html)
    if not match:
        return None
    return int(match.group(1))


def bedrooms(html: str) -> int | None:
    return _first_int(_BEDS_RE, html)


def bathrooms(html: str) -> int | None:
    return _first_int(_BATHS_RE, html)


def parking(html: str) -> int | None:
    return _first_int(_PARKING_RE, html)


def property_type(html: str) -> str | None:
    match = _TYPE_RE.search(html)
    if not match:
        return None
    return match.group(1).title()


def garden(html: str) -> str:
    return "yes" if _GARDEN_RE.search(html.lower()) else "unknown"


def pool(html: str) -> str:
    return "yes" if _POOL_RE.search(html.lower()) else "unknown"


def page_title(html: str) -> str | None:
    soup = BeautifulSoup(html, "html.parser")
    if soup.title is None:
        return None
    text = soup.title.get_text()
    if not text:
        return None
    return _TITLE_SEPARATOR_RE.sub("", text).strip()


def display_address(html: str, suburb: str | None) -> str:
    title = page_title(html)
    if title and 5 < len(title) < 120:
        return title
    return f"{suburb}, VIC" if suburb else "Unknown"


def looks_blocked(html: str) -> bool:
    return len(html) < BLOCK_PAGE_MAX_LENGTH and bool(_BLOCK_RE.search(html))
