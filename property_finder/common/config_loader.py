"""Configuration loading and validation."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from property_finder.common.errors import ConfigError
from property_finder.common.fs import read_yaml
from property_finder.common.http import RetryConfig, TimeoutConfig
from property_finder.common.schema import validate_pipeline_config
from property_finder.common.time_utils import current_year

CONFIG_FILENAME = "pipeline.yml"

DEFAULT_CONFIG: dict[str, Any] = {
    "paths": {
        "dataset": "suburbs.json",
        "geocode_cache": "geocode-cache.json",
        "report_input": "vpsr-report.pdf",
        "report_output": "vpsr-report.json",
        "run_meta": "run_meta",
    },
    "report": {
        "year": None,
        "source": "Victorian Property Sales Report - Land Victoria",
        "source_url": "https://www.land.vic.gov.au/valuations/resources-and-reports/property-sales-statistics",
        "data_quarter": None,
        "last_updated": None,
        "notes": "Median prices from the VPSR quarter where available. Demographics from ABS Census.",
    },
    "merge": {"missing_policy": "retain"},
    "rate_limits": {
        "nominatim": 1.1,
        "overpass": 1.0,
        "osrm": 0.0,
        "reiv": 2.0,
        "listing": 0.0,
    },
    "timeouts": {"connect": 5.0, "read": 15.0},
    "transit": {"radius_m": 2500},
    "prices": {"checkpoint_every": 20},
}


@dataclass(frozen=True)
class ConfigBundle:
    pipeline: dict
    data_dir: Path

    def path(self, key: str) -> Path:
        return self.data_dir / self.pipeline["paths"][key]

    @property
    def report_year(self) -> str:
        return str(self.pipeline["report"]["year"])

    @property
    def missing_policy(self) -> str:
        return self.pipeline["merge"]["missing_policy"]

    @property
    def timeout(self) -> TimeoutConfig:
        timeouts = self.pipeline["timeouts"]
        return TimeoutConfig(connect=float(timeouts["connect"]), read=float(timeouts["read"]))

    @property
    def retry(self) -> RetryConfig:
        return RetryConfig()


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _read_mapping(path: Path) -> dict:
    payload = read_yaml(path)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    return payload


def load_config(
    config_dir: Path | None,
    *,
    data_dir: Path,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConfigBundle:
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if config_dir is not None:
        path = config_dir / CONFIG_FILENAME
        if not path.exists():
            raise ConfigError(f"Missing config file: {path}")
        cfg = _deep_merge(cfg, _read_mapping(path))
    if overlay_config_dir is not None:
        overlay_path = overlay_config_dir / CONFIG_FILENAME
        if overlay_path.exists():
            cfg = _deep_merge(cfg, _read_mapping(overlay_path))

    report = cfg.get("report")
    if isinstance(report, dict) and report.get("year") is None:
        report["year"] = current_year()

    return ConfigBundle(pipeline=validate_pipeline_config(cfg, allow_unknown=allow_unknown), data_dir=data_dir)
