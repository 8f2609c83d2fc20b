"""Merge quarterly report rows into the suburb dataset."""

from __future__ import annotations

from property_finder.common.errors import ConfigError
from property_finder.common.models import ReportRow
from property_finder.common.schema import MERGE_POLICIES
from property_finder.common.time_utils import utc_today_iso
from property_finder.pipeline.dataset import SuburbDataset

PRICE_FIELDS = ("medianPrice", "medianPriceUnit", "annualChange", "salesCount")


def apply_report_row(record: dict, row: ReportRow, year: str) -> None:
    record["medianPrice"] = row.median_price
    history = record.get("priceHistory")
    if not isinstance(history, dict):
        history = {}
        record["priceHistory"] = history
    history[year] = row.median_price
    if row.annual_change is not None:
        record["annualChange"] = row.annual_change
    if row.sales_count is not None:
        record["salesCount"] = row.sales_count


def clear_prices(record: dict) -> None:
    for field in PRICE_FIELDS:
        record[field] = None


def update_report_metadata(dataset: SuburbDataset, report_cfg: dict) -> None:
    metadata = dataset.metadata
    metadata["source"] = report_cfg["source"]
    metadata["sourceUrl"] = report_cfg["source_url"]
    if report_cfg.get("data_quarter"):
        metadata["dataQuarter"] = report_cfg["data_quarter"]
    metadata["lastUpdated"] = report_cfg.get("last_updated") or utc_today_iso()
    metadata["notes"] = report_cfg["notes"]


def run_merge(
    dataset: SuburbDataset,
    rows: dict[str, ReportRow],
    *,
    year: str,
    missing_policy: str,
    report_cfg: dict,
) -> dict:
    """Overwrite price fields from ``rows``.

    Suburbs without a report row follow ``missing_policy``: ``retain`` keeps
    their previous prices, ``clear`` resets the price fields to null while
    keeping the price history.
    """
    if missing_policy not in MERGE_POLICIES:
        raise ConfigError(f"Unknown merge policy: {missing_policy}")

    updated = 0
    untouched = 0
    for name, record in dataset.suburbs.items():
        row = rows.get(name)
        if row is None:
            if missing_policy == "clear":
                clear_prices(record)
            untouched += 1
            continue
        apply_report_row(record, row, year)
        updated += 1

    update_report_metadata(dataset, report_cfg)
    dataset.save()
    return {
        "updated": updated,
        "retained" if missing_policy == "retain" else "cleared": untouched,
        "policy": missing_policy,
    }
