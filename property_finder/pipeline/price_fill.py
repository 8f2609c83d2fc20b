"""Fill missing median prices from REIV suburb pages."""

from __future__ import annotations

import logging
import re

from property_finder.common.errors import PipelineError
from property_finder.common.logging import log_event
from property_finder.common.models import PriceSnapshot
from property_finder.pipeline.dataset import SuburbDataset
from property_finder.prices.reiv import PriceResolver

STAGE = "prices"

PRICE_NOTE = "Prices from REIV where VPSR not available."
PRICE_NOTE_WITH_UNITS = "Prices from REIV (House + Unit tabs) where VPSR not available."
_PRICE_NOTE_RE = re.compile(r"\s*Prices from REIV[^.]*\.?")


def suburbs_missing_price(dataset: SuburbDataset) -> list[str]:
    return [
        name
        for name, record in dataset.suburbs.items()
        if record.get("reivSlug") and record.get("medianPrice") is None
    ]


def apply_snapshot(record: dict, snapshot: PriceSnapshot, *, year: str, with_units: bool) -> bool:
    """Copy resolved prices onto ``record``; False when the page had nothing usable."""
    if snapshot.median_price is None and not (with_units and snapshot.median_price_unit is not None):
        return False
    if snapshot.median_price is not None:
        record["medianPrice"] = snapshot.median_price
        history = record.get("priceHistory")
        if isinstance(history, dict):
            history[year] = snapshot.median_price
        else:
            record["priceHistory"] = {year: snapshot.median_price}
    if with_units and snapshot.median_price_unit is not None:
        record["medianPriceUnit"] = snapshot.median_price_unit
    if snapshot.quarterly_change is not None:
        record["annualChange"] = snapshot.quarterly_change
    return True


def with_price_note(notes: str | None, *, with_units: bool) -> str:
    base = _PRICE_NOTE_RE.sub("", notes or "").strip()
    note = PRICE_NOTE_WITH_UNITS if with_units else PRICE_NOTE
    return f"{base} {note}" if base else note


def run_price_fill(
    dataset: SuburbDataset,
    resolver: PriceResolver,
    *,
    year: str,
    checkpoint_every: int = 20,
    limit: int | None = None,
    with_units: bool = False,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> dict:
    logger = logger or logging.getLogger(__name__)
    missing = suburbs_missing_price(dataset)
    to_process = missing[:limit] if limit is not None else missing
    log_event(
        logger,
        f"{len(missing)} suburbs missing median price, fetching {len(to_process)}",
        run_id=run_id,
        stage=STAGE,
        event="STAGE_PLAN",
        rows_in=len(missing),
        rows_out=len(to_process),
    )

    updated = 0
    not_found = 0
    failed = 0
    for index, name in enumerate(to_process, start=1):
        record = dataset.suburbs[name]
        try:
            snapshot = resolver.resolve(record["reivSlug"])
        except PipelineError as exc:
            failed += 1
            log_event(
                logger,
                f"price lookup failed: {exc}",
                level=logging.WARNING,
                run_id=run_id,
                stage=STAGE,
                suburb=name,
                source="reiv",
                event="RECORD_FAIL",
                status="error",
                error_code=exc.error_code,
            )
        else:
            if snapshot is not None and apply_snapshot(record, snapshot, year=year, with_units=with_units):
                updated += 1
                log_event(logger, f"{name}: {record.get('medianPrice')}", run_id=run_id, stage=STAGE, suburb=name, event="PRICED")
            else:
                not_found += 1
                log_event(logger, "no price data", run_id=run_id, stage=STAGE, suburb=name, event="NOT_FOUND")

        if index % checkpoint_every == 0:
            dataset.save()
            log_event(logger, f"checkpoint after {index} records", run_id=run_id, stage=STAGE, event="CHECKPOINT", rows_out=updated)

    dataset.metadata["notes"] = with_price_note(dataset.metadata.get("notes"), with_units=with_units)
    dataset.save()
    return {
        "missing": len(missing),
        "attempted": len(to_process),
        "updated": updated,
        "not_found": not_found,
        "failed": failed,
    }
