"""CLI entrypoint for the Melbourne property finder data sync and lookups."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from property_finder.common.config_loader import ConfigBundle, load_config
from property_finder.common.constants import (
    EXIT_HARD_FAIL,
    EXIT_PARTIAL,
    EXIT_SUCCESS,
    LOOKUPS,
    OPTIONAL_STAGES,
    STAGES,
)
from property_finder.common.errors import BlockedOrChallenged, PipelineError, ValidationError
from property_finder.common.http import HttpClient, configure_rate_limits
from property_finder.common.logging import build_logger, log_event
from property_finder.common.time_utils import generate_run_id
from property_finder.geo.profile import resolve_transit_profile
from property_finder.geo.stops import nearest_stops
from property_finder.listing.extract import fetch_listing
from property_finder.pipeline.dataset import load_dataset
from property_finder.pipeline.reports import write_run_summary
from property_finder.pipeline.runner import StageContext, run_stages
from property_finder.prices.reiv import PriceResolver


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=[*STAGES, *OPTIONAL_STAGES, "all", *LOOKUPS])
    parser.add_argument("target", nargs="?", default=None, help="listing URL, address or REIV slug for lookups")
    parser.add_argument("--lat", type=float, default=None)
    parser.add_argument("--lon", type=float, default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--limit", type=int, default=None)
    parser.add_argument("--with-units", action="store_true")
    parser.add_argument("--strict", action="store_true")
    args = parser.parse_args(argv)
    if args.limit is not None and args.limit < 1:
        parser.error("--limit must be a positive integer")
    return args


def error_payload(exc: PipelineError) -> dict:
    payload: dict = {"error": str(exc), "errorCode": exc.error_code}
    if isinstance(exc, BlockedOrChallenged):
        payload["error"] = exc.guidance or str(exc)
        payload["useManualForm"] = True
        if exc.suggested_suburb:
            payload["suggestedSuburb"] = exc.suggested_suburb
    return payload


def run_lookup(args: argparse.Namespace, bundle: ConfigBundle, client: HttpClient) -> dict:
    if args.command == "listing":
        return fetch_listing(args.target, client)
    if args.command == "transit":
        return resolve_transit_profile(args.target, client, radius_m=bundle.pipeline["transit"]["radius_m"])
    if args.command == "stops":
        if args.lat is None or args.lon is None:
            raise ValidationError("Missing or invalid lat, lon")
        stops = nearest_stops(args.lat, args.lon, client, radius_m=bundle.pipeline["transit"]["radius_m"])
        return stops.to_dict()
    if args.command == "price":
        snapshot = PriceResolver(client, timeout=bundle.timeout).resolve(args.target)
        if snapshot is None:
            return {"error": "REIV data not found for this suburb", "found": False}
        return snapshot.to_dict()
    raise ValueError(f"Unknown lookup: {args.command}")


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    data_dir = Path(args.data_dir)

    bundle = load_config(config_dir, data_dir=data_dir, overlay_config_dir=overlay_config_dir)
    run_meta_dir = bundle.path("run_meta")
    logger = build_logger(run_id, run_meta_dir=run_meta_dir, level=args.log_level)
    configure_rate_limits(bundle.pipeline["rate_limits"])

    with HttpClient(timeout=bundle.timeout, retry=bundle.retry) as client:
        if args.command in LOOKUPS:
            try:
                result = run_lookup(args, bundle, client)
            except PipelineError as exc:
                log_event(logger, f"lookup failed: {exc}", run_id=run_id, event="LOOKUP_FAIL", status="error", error_code=exc.error_code)
                print(json.dumps(error_payload(exc), indent=2, ensure_ascii=False))
                return EXIT_HARD_FAIL
            print(json.dumps(result, indent=2, ensure_ascii=False))
            return EXIT_SUCCESS

        stages = STAGES if args.command == "all" else (args.command,)
        if stages != ("extract-report",):
            # Fail fast on an unreadable dataset before any stage touches upstreams.
            load_dataset(bundle.path("dataset"))

        ctx = StageContext(
            bundle=bundle,
            client=client,
            run_id=run_id,
            logger=logger,
            limit=args.limit,
            with_units=args.with_units,
        )
        try:
            outcome = run_stages(stages, ctx, strict=args.strict)
        except PipelineError as exc:
            log_event(logger, f"run aborted: {exc}", run_id=run_id, event="RUN_ABORT", status="error", error_code=exc.error_code)
            return EXIT_HARD_FAIL

    write_run_summary(run_meta_dir, bundle.path("dataset"), run_id=run_id, command=args.command, outcome=outcome)
    if outcome["failed_stages"]:
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except PipelineError as exc:
        print(f"error [{exc.error_code}]: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL
    except Exception as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
