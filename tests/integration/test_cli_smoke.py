from __future__ import annotations

import json
from pathlib import Path

import pytest

from property_finder.cli import main, parse_args, run_command
from property_finder.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, NOMINATIM_SEARCH_URL
from property_finder.common.errors import UpstreamUnavailable
from property_finder.common.http import HttpClient
from property_finder.pipeline import runner

REPORT_TEXT = """Locality Apr-Jun 2025
KEW 2400000 2300000 4.3 1.1 40
SOUTH MORANG 780000 775000 1.3 52
"""


def write_config(config_dir: Path) -> Path:
    config_dir.mkdir()
    (config_dir / "pipeline.yml").write_text(
        """paths:
  report_input: report.txt
  report_output: report.json
report:
  year: "2025"
rate_limits:
  nominatim: 0
  overpass: 0
  reiv: 0
""",
        encoding="utf-8",
    )
    return config_dir


def seed_data(data_dir: Path) -> None:
    data_dir.mkdir()
    (data_dir / "report.txt").write_text(REPORT_TEXT, encoding="utf-8")
    (data_dir / "suburbs.json").write_text(
        json.dumps({"metadata": {}, "suburbs": {"Kew": {"coords": [-37.8064, 145.0306], "medianPrice": 2000000, "priceHistory": {}, "reivSlug": "kew"}}}),
        encoding="utf-8",
    )


@pytest.mark.integration
def test_cli_report_stages_update_dataset(tmp_path: Path):
    config_dir = write_config(tmp_path / "config")
    data_dir = tmp_path / "data"
    seed_data(data_dir)

    for command in ("extract-report", "stubs", "merge"):
        args = parse_args([command, "--config-dir", str(config_dir), "--data-dir", str(data_dir), "--run-id", "sync-test"])
        assert run_command(args) == EXIT_SUCCESS

    dataset = json.loads((data_dir / "suburbs.json").read_text(encoding="utf-8"))
    assert dataset["suburbs"]["Kew"]["medianPrice"] == 2400000
    assert dataset["suburbs"]["South Morang"]["priceHistory"] == {"2025": 780000}
    assert dataset["suburbs"]["South Morang"]["reivSlug"] == "south-morang"

    summary = json.loads((data_dir / "run_meta" / "run_summary.json").read_text(encoding="utf-8"))
    assert summary["run_id"] == "sync-test"
    assert summary["status"] == "success"
    assert summary["totals"]["suburbs"] == 2
    assert (data_dir / "run_meta" / "sync-test.log.jsonl").exists()


@pytest.mark.integration
def test_cli_all_reports_partial_when_upstream_stage_fails(tmp_path: Path, monkeypatch):
    config_dir = write_config(tmp_path / "config")
    data_dir = tmp_path / "data"
    seed_data(data_dir)

    def geocode_down(*_args, **_kwargs):
        raise UpstreamUnavailable("Timed out")

    monkeypatch.setattr(runner, "run_geocode_fill", geocode_down)
    monkeypatch.setattr(runner, "run_price_fill", lambda *_args, **_kwargs: {"updated": 0})

    args = parse_args(["all", "--config-dir", str(config_dir), "--data-dir", str(data_dir), "--run-id", "sync-all"])

    assert run_command(args) == EXIT_PARTIAL
    summary = json.loads((data_dir / "run_meta" / "run_summary.json").read_text(encoding="utf-8"))
    assert summary["failed_stages"] == ["geocode"]
    assert summary["status"] == "partial"


@pytest.mark.integration
def test_cli_unreadable_dataset_is_hard_failure(tmp_path: Path):
    config_dir = write_config(tmp_path / "config")
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "suburbs.json").write_text("{not json", encoding="utf-8")

    assert main(["merge", "--config-dir", str(config_dir), "--data-dir", str(data_dir)]) == EXIT_HARD_FAIL
    assert not (data_dir / "run_meta" / "run_summary.json").exists()


@pytest.mark.integration
def test_cli_lookup_prints_json(tmp_path: Path, monkeypatch, capsys):
    config_dir = write_config(tmp_path / "config")

    def fake_get_json(self, url, **_kwargs):
        assert url == NOMINATIM_SEARCH_URL
        return []

    monkeypatch.setattr(HttpClient, "get_json", fake_get_json)
    args = parse_args(["transit", "Atlantis", "--config-dir", str(config_dir), "--data-dir", str(tmp_path / "data")])

    assert run_command(args) == EXIT_SUCCESS
    printed = json.loads(capsys.readouterr().out)
    assert printed["found"] is False
