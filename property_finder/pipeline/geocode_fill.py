"""Fill missing suburb coordinates via Nominatim and the durable geocode cache."""

from __future__ import annotations

import logging

from property_finder.common.cache import JsonFileCache
from property_finder.common.errors import PipelineError
from property_finder.common.geometry import coords_from_value, safe_float, valid_lat_lon
from property_finder.common.http import HttpClient
from property_finder.common.logging import log_event
from property_finder.geo.geocode import geocode, suburb_query
from property_finder.pipeline.dataset import SuburbDataset

STAGE = "geocode"


def suburbs_missing_coords(dataset: SuburbDataset) -> list[str]:
    return [name for name, record in dataset.suburbs.items() if coords_from_value(record.get("coords")) is None]


def merge_cache_into_dataset(dataset: SuburbDataset, cache: JsonFileCache) -> int:
    merged = 0
    for name, entry in cache.items():
        record = dataset.suburbs.get(name)
        if record is None or coords_from_value(record.get("coords")) is not None:
            continue
        lat = safe_float(entry.get("lat")) if isinstance(entry, dict) else None
        lon = safe_float(entry.get("lon")) if isinstance(entry, dict) else None
        if not valid_lat_lon(lat, lon):
            continue
        record["coords"] = [lat, lon]
        merged += 1
    return merged


def run_geocode_fill(
    dataset: SuburbDataset,
    cache: JsonFileCache,
    client: HttpClient,
    *,
    limit: int | None = None,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> dict:
    logger = logger or logging.getLogger(__name__)
    missing = suburbs_missing_coords(dataset)
    uncached = [name for name in missing if name not in cache]
    to_process = uncached[:limit] if limit is not None else uncached

    log_event(
        logger,
        f"{len(missing)} suburbs missing coords, {len(missing) - len(uncached)} cached",
        run_id=run_id,
        stage=STAGE,
        event="STAGE_PLAN",
        rows_in=len(missing),
        rows_out=len(to_process),
    )

    geocoded = 0
    not_found = 0
    failed = 0
    for name in to_process:
        try:
            point = geocode(suburb_query(name), client)
        except PipelineError as exc:
            failed += 1
            log_event(
                logger,
                f"geocode failed: {exc}",
                level=logging.WARNING,
                run_id=run_id,
                stage=STAGE,
                suburb=name,
                source="nominatim",
                event="RECORD_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            continue
        if point is None:
            not_found += 1
            log_event(logger, "no geocode result", run_id=run_id, stage=STAGE, suburb=name, event="NOT_FOUND")
            continue
        # Persist per hit so an interrupted run resumes from the cache.
        cache.set(name, point.to_cache_entry())
        geocoded += 1
        log_event(logger, f"{name} -> {point.lat}, {point.lon}", run_id=run_id, stage=STAGE, suburb=name, event="GEOCODED")

    merged = merge_cache_into_dataset(dataset, cache)
    dataset.save()
    return {
        "missing": len(missing),
        "attempted": len(to_process),
        "geocoded": geocoded,
        "not_found": not_found,
        "failed": failed,
        "merged": merged,
        "with_coords": len(dataset.suburbs) - len(suburbs_missing_coords(dataset)),
    }
