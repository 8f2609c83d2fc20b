"""Data models used across the resolvers and the pipeline."""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Listing:
    price: int | None
    suburb: str | None
    bedrooms: int | None
    bathrooms: int | None
    garage: int | None
    property_type: str
    garden: str
    pool: str
    display_address: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "price": self.price,
            "suburb": self.suburb,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "garage": self.garage,
            "propertyType": self.property_type,
            "garden": self.garden,
            "pool": self.pool,
            "displayAddress": self.display_address,
        }


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lon: float
    display_name: str | None = None

    def to_cache_entry(self) -> dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}


@dataclass(frozen=True)
class Stop:
    name: str
    type: str
    distance_km: float
    lat: float
    lon: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "distanceKm": self.distance_km,
            "lat": self.lat,
            "lon": self.lon,
        }


@dataclass(frozen=True)
class NearbyStops:
    train: Stop | None
    tram: Stop | None
    bus: Stop | None

    def found(self) -> list[Stop]:
        return [stop for stop in (self.train, self.tram, self.bus) if stop is not None]

    def nearest(self) -> Stop | None:
        stops = self.found()
        if not stops:
            return None
        return min(stops, key=lambda stop: stop.distance_km)

    def to_dict(self) -> dict[str, Any]:
        return {
            "train": self.train.to_dict() if self.train else None,
            "tram": self.tram.to_dict() if self.tram else None,
            "bus": self.bus.to_dict() if self.bus else None,
        }


@dataclass(frozen=True)
class DrivingRoute:
    distance_km: float
    duration_minutes: int


@dataclass(frozen=True)
class PriceSnapshot:
    median_price: int | None
    median_price_unit: int | None
    quarterly_change: float | None
    source: str = "reiv"

    def has_price(self) -> bool:
        return self.median_price is not None or self.median_price_unit is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "medianPrice": self.median_price,
            "medianPriceUnit": self.median_price_unit,
            "quarterlyChange": self.quarterly_change,
            "source": self.source,
        }


@dataclass(frozen=True)
class ReportRow:
    median_price: int
    annual_change: float | None = None
    sales_count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"medianPrice": self.median_price}
        if self.annual_change is not None:
            out["annualChange"] = self.annual_change
        if self.sales_count is not None:
            out["salesCount"] = self.sales_count
        return out

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ReportRow":
        return cls(
            median_price=int(payload["medianPrice"]),
            annual_change=payload.get("annualChange"),
            sales_count=payload.get("salesCount"),
        )


_STUB_RECORD: dict[str, Any] = {
    "postcode": "",
    "municipality": "",
    "coords": None,
    "medianPrice": None,
    "medianPriceUnit": None,
    "annualChange": None,
    "salesCount": None,
    "priceHistory": {},
    "demographics": {
        "population": 0,
        "medianAge": None,
        "familyHouseholds": "-",
        "ownerOccupied": "-",
        "bornOverseas": "-",
    },
    "schools": [],
    "transport": {},
    "amenities": [],
    "reivSlug": "",
}

_WHITESPACE_RE = re.compile(r"\s+")


def slugify_suburb(name: str) -> str:
    return _WHITESPACE_RE.sub("-", name.strip().lower()).replace("(", "").replace(")", "")


def new_suburb_stub(slug: str = "") -> dict[str, Any]:
    record = copy.deepcopy(_STUB_RECORD)
    record["reivSlug"] = slug
    return record
