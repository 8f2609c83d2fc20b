"""Minimal strict schema for the pipeline YAML config."""

from __future__ import annotations

from property_finder.common.errors import ConfigError

MERGE_POLICIES = ("retain", "clear")

_SECTIONS = {
    "paths": {"dataset", "geocode_cache", "report_input", "report_output", "run_meta"},
    "report": {"year", "source", "source_url", "data_quarter", "last_updated", "notes"},
    "merge": {"missing_policy"},
    "rate_limits": {"nominatim", "overpass", "osrm", "reiv", "listing"},
    "timeouts": {"connect", "read"},
    "transit": {"radius_m"},
    "prices": {"checkpoint_every"},
}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_number(value: object, ctx: str, *, allow_zero: bool = True) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{ctx} must be a number")
    if value < 0 or (value == 0 and not allow_zero):
        raise ConfigError(f"{ctx} must be {'non-negative' if allow_zero else 'positive'}")


def validate_pipeline_config(cfg: object, *, allow_unknown: bool = False) -> dict:
    if not isinstance(cfg, dict):
        raise ConfigError("pipeline config must be a mapping")

    _assert_required_keys(cfg, set(_SECTIONS), "pipeline config")
    _assert_no_unknown_keys(cfg, set(_SECTIONS), "pipeline config", allow_unknown)

    for section, keys in _SECTIONS.items():
        if not isinstance(cfg[section], dict):
            raise ConfigError(f"{section} must be a mapping")
        _assert_required_keys(cfg[section], keys, section)
        _assert_no_unknown_keys(cfg[section], keys, section, allow_unknown)

    policy = cfg["merge"]["missing_policy"]
    if policy not in MERGE_POLICIES:
        raise ConfigError(f"merge.missing_policy must be one of {', '.join(MERGE_POLICIES)}, got {policy!r}")

    for source, seconds in cfg["rate_limits"].items():
        _assert_positive_number(seconds, f"rate_limits.{source}")
    for key in ("connect", "read"):
        _assert_positive_number(cfg["timeouts"][key], f"timeouts.{key}", allow_zero=False)
    _assert_positive_number(cfg["transit"]["radius_m"], "transit.radius_m", allow_zero=False)

    checkpoint_every = cfg["prices"]["checkpoint_every"]
    if isinstance(checkpoint_every, bool) or not isinstance(checkpoint_every, int) or checkpoint_every < 1:
        raise ConfigError("prices.checkpoint_every must be a positive integer")

    year = str(cfg["report"]["year"])
    if len(year) != 4 or not year.isdigit():
        raise ConfigError("report.year must be a 4-digit year")

    return cfg
