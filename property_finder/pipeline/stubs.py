"""Stub creation for report localities missing from the dataset."""

from __future__ import annotations

from property_finder.common.models import ReportRow, new_suburb_stub, slugify_suburb
from property_finder.pipeline.dataset import SuburbDataset


def run_stub_creation(dataset: SuburbDataset, rows: dict[str, ReportRow]) -> dict:
    """Add an empty record for each unknown locality; prices arrive in the merge stage."""
    added: list[str] = []
    for name in sorted(rows):
        if name in dataset.suburbs:
            continue
        dataset.suburbs[name] = new_suburb_stub(slugify_suburb(name))
        added.append(name)

    if added:
        dataset.save()
    return {"added": len(added), "added_names": added, "total": len(dataset.suburbs)}
