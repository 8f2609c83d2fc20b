"""UTC-focused helpers for run metadata."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def utc_today_iso() -> str:
    return utc_now().date().isoformat()


def utc_timestamp_iso() -> str:
    return utc_now().isoformat(timespec="milliseconds")


def current_year() -> str:
    return str(utc_now().year)


def generate_run_id() -> str:
    return utc_now().strftime("sync-%Y%m%dT%H%M%S%fZ")
