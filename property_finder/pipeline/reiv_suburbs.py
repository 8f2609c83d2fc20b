"""Sync the REIV all-suburbs index into the dataset."""

from __future__ import annotations

import logging
import re
from urllib.parse import unquote

from property_finder.common.constants import REIV_ALL_SUBURBS_URL
from property_finder.common.http import HttpClient, TimeoutConfig
from property_finder.common.logging import log_event
from property_finder.common.models import new_suburb_stub
from property_finder.pipeline.dataset import SuburbDataset

STAGE = "reiv-suburbs"
REIV_INDEX_NOTE = "All REIV Victorian suburbs included; those without coords do not appear on map."

_SUBURB_LINK_RE = re.compile(r"market-insights/suburb/([^\"?#>\s]+)", re.IGNORECASE)


def extract_suburb_slugs(html: str) -> list[str]:
    slugs: list[str] = []
    for match in _SUBURB_LINK_RE.finditer(html):
        slug = match.group(1).strip()
        if slug and slug not in slugs:
            slugs.append(slug)
    return slugs


def slug_to_name(slug: str) -> str:
    decoded = unquote(slug.replace("+", " "))
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), decoded)


def apply_reiv_index(dataset: SuburbDataset, slugs: list[str]) -> dict:
    added: list[str] = []
    slug_set = 0
    for slug in slugs:
        name = slug_to_name(slug)
        record = dataset.suburbs.get(name)
        if record is None:
            dataset.suburbs[name] = new_suburb_stub(slug)
            added.append(name)
        elif not record.get("reivSlug"):
            record["reivSlug"] = slug
            slug_set += 1

    notes = dataset.metadata.get("notes") or ""
    if REIV_INDEX_NOTE not in notes:
        dataset.metadata["notes"] = f"{notes} {REIV_INDEX_NOTE}".strip()
    return {"indexed": len(slugs), "added": len(added), "added_names": added, "slug_set": slug_set}


def run_reiv_suburb_sync(
    dataset: SuburbDataset,
    client: HttpClient,
    *,
    timeout: TimeoutConfig | None = None,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> dict:
    logger = logger or logging.getLogger(__name__)
    html = client.get_html(REIV_ALL_SUBURBS_URL, source_type="reiv", timeout=timeout or TimeoutConfig(connect=5.0, read=20.0))
    slugs = extract_suburb_slugs(html)
    stats = apply_reiv_index(dataset, slugs)
    dataset.save()
    log_event(
        logger,
        f"indexed {stats['indexed']} REIV suburbs, added {stats['added']}, set slug on {stats['slug_set']}",
        run_id=run_id,
        stage=STAGE,
        source="reiv",
        event="REIV_INDEX_SYNCED",
        rows_in=stats["indexed"],
        rows_out=stats["added"],
    )
    return {**stats, "total": len(dataset.suburbs)}
