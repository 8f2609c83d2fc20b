"""Run summary reporting."""

from __future__ import annotations

from pathlib import Path

from property_finder.common.errors import DatasetError
from property_finder.common.fs import write_json
from property_finder.common.geometry import coords_from_value
from property_finder.common.time_utils import utc_timestamp_iso
from property_finder.pipeline.dataset import SuburbDataset, load_dataset


def dataset_counts(dataset: SuburbDataset) -> dict[str, int]:
    counts = {"suburbs": 0, "with_coords": 0, "with_price": 0, "with_reiv_slug": 0}
    for record in dataset.suburbs.values():
        counts["suburbs"] += 1
        if coords_from_value(record.get("coords")) is not None:
            counts["with_coords"] += 1
        if record.get("medianPrice") is not None:
            counts["with_price"] += 1
        if record.get("reivSlug"):
            counts["with_reiv_slug"] += 1
    return counts


def write_run_summary(run_meta_dir: Path, dataset_path: Path, run_id: str, command: str, outcome: dict) -> Path:
    failed = outcome.get("failed_stages", [])
    results = outcome.get("results", {})

    status = "success"
    if failed and not results:
        status = "error"
    elif failed:
        status = "partial"

    try:
        totals = dataset_counts(load_dataset(dataset_path))
    except DatasetError:
        totals = None

    summary_path = run_meta_dir / "run_summary.json"
    payload = {
        "run_id": run_id,
        "command": command,
        "finished_at": utc_timestamp_iso(),
        "status": status,
        "stages": results,
        "failed_stages": failed,
        "totals": totals,
    }
    write_json(summary_path, payload)
    return summary_path
