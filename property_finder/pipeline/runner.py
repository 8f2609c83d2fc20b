"""Stage dispatch and fail-soft composition."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable

from property_finder.common.cache import JsonFileCache
from property_finder.common.config_loader import ConfigBundle
from property_finder.common.errors import DatasetError, PipelineError
from property_finder.common.http import HttpClient
from property_finder.common.logging import log_event
from property_finder.pipeline.dataset import load_dataset
from property_finder.pipeline.geocode_fill import run_geocode_fill
from property_finder.pipeline.merge import run_merge
from property_finder.pipeline.price_fill import run_price_fill
from property_finder.pipeline.reiv_suburbs import run_reiv_suburb_sync
from property_finder.pipeline.report import load_report_rows, run_extract_report
from property_finder.pipeline.stubs import run_stub_creation
from property_finder.prices.reiv import PriceResolver


@dataclass
class StageContext:
    bundle: ConfigBundle
    client: HttpClient
    run_id: str
    logger: logging.Logger
    limit: int | None = None
    with_units: bool = False


def execute_stage(stage: str, ctx: StageContext) -> dict:
    bundle = ctx.bundle
    if stage == "extract-report":
        return run_extract_report(bundle.path("report_input"), bundle.path("report_output"))

    # Every other stage reloads the dataset so it sees what the previous stage saved.
    dataset = load_dataset(bundle.path("dataset"))
    if stage == "stubs":
        return run_stub_creation(dataset, load_report_rows(bundle.path("report_output")))
    if stage == "merge":
        return run_merge(
            dataset,
            load_report_rows(bundle.path("report_output")),
            year=bundle.report_year,
            missing_policy=bundle.missing_policy,
            report_cfg=bundle.pipeline["report"],
        )
    if stage == "geocode":
        return run_geocode_fill(
            dataset,
            JsonFileCache(bundle.path("geocode_cache")),
            ctx.client,
            limit=ctx.limit,
            logger=ctx.logger,
            run_id=ctx.run_id,
        )
    if stage == "prices":
        return run_price_fill(
            dataset,
            PriceResolver(ctx.client, timeout=bundle.timeout),
            year=bundle.report_year,
            checkpoint_every=bundle.pipeline["prices"]["checkpoint_every"],
            limit=ctx.limit,
            with_units=ctx.with_units,
            logger=ctx.logger,
            run_id=ctx.run_id,
        )
    if stage == "reiv-suburbs":
        return run_reiv_suburb_sync(dataset, ctx.client, timeout=bundle.timeout, logger=ctx.logger, run_id=ctx.run_id)
    raise ValueError(f"Unknown stage: {stage}")


def run_stages(stages: Iterable[str], ctx: StageContext, *, strict: bool = False) -> dict:
    """Run ``stages`` in order; a failed stage is logged and the next one still runs.

    An unreadable dataset always propagates. With ``strict`` the first
    failure of any kind propagates.
    """
    results: dict[str, dict] = {}
    failures: list[str] = []

    for stage in stages:
        log_event(ctx.logger, "stage start", run_id=ctx.run_id, stage=stage, event="STAGE_START")
        started = time.monotonic()
        try:
            results[stage] = execute_stage(stage, ctx)
        except DatasetError:
            raise
        except PipelineError as exc:
            failures.append(stage)
            log_event(
                ctx.logger,
                f"stage failed: {exc}",
                level=logging.ERROR,
                run_id=ctx.run_id,
                stage=stage,
                event="STAGE_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            if strict:
                raise
            continue
        except Exception:
            failures.append(stage)
            ctx.logger.exception(
                "unexpected stage failure",
                extra={"run_id": ctx.run_id, "stage": stage, "event": "STAGE_FAIL", "status": "error", "error_code": "UNEXPECTED_ERROR"},
            )
            if strict:
                raise
            continue
        log_event(
            ctx.logger,
            "stage end",
            run_id=ctx.run_id,
            stage=stage,
            event="STAGE_END",
            duration_ms=int((time.monotonic() - started) * 1000),
        )

    return {"run_id": ctx.run_id, "results": results, "failed_stages": failures}
