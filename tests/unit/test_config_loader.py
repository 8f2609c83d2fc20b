from pathlib import Path

import pytest

from property_finder.common.config_loader import load_config
from property_finder.common.errors import ConfigError
from property_finder.common.time_utils import current_year


def test_load_config_from_repo_config_dir(tmp_path: Path):
    bundle = load_config(Path("config"), data_dir=tmp_path)

    assert bundle.report_year == "2025"
    assert bundle.missing_policy == "retain"
    assert bundle.path("dataset") == tmp_path / "suburbs.json"
    assert bundle.pipeline["rate_limits"]["nominatim"] == 1.1
    assert bundle.timeout.read == 15.0


def test_load_config_applies_overlay_values(tmp_path: Path):
    base = tmp_path / "base"
    overlay = tmp_path / "overlay"
    base.mkdir()
    overlay.mkdir()
    (base / "pipeline.yml").write_text(
        """report:
  year: "2024"
merge:
  missing_policy: retain
""",
        encoding="utf-8",
    )
    (overlay / "pipeline.yml").write_text(
        """merge:
  missing_policy: clear
rate_limits:
  reiv: 0.5
""",
        encoding="utf-8",
    )

    bundle = load_config(base, data_dir=tmp_path, overlay_config_dir=overlay)

    assert bundle.missing_policy == "clear"
    assert bundle.pipeline["rate_limits"]["reiv"] == 0.5
    assert bundle.pipeline["rate_limits"]["nominatim"] == 1.1
    assert bundle.report_year == "2024"


def test_load_config_ignores_empty_overlay_file(tmp_path: Path):
    base = tmp_path / "base"
    overlay = tmp_path / "overlay"
    base.mkdir()
    overlay.mkdir()
    (base / "pipeline.yml").write_text("merge:\n  missing_policy: clear\n", encoding="utf-8")
    (overlay / "pipeline.yml").write_text("", encoding="utf-8")

    bundle = load_config(base, data_dir=tmp_path, overlay_config_dir=overlay)
    assert bundle.missing_policy == "clear"


def test_load_config_defaults_year_to_current(tmp_path: Path):
    bundle = load_config(None, data_dir=tmp_path)
    assert bundle.report_year == current_year()


def test_load_config_missing_file_raises(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nowhere", data_dir=tmp_path)


def test_load_config_rejects_non_mapping_overlay(tmp_path: Path):
    base = tmp_path / "base"
    overlay = tmp_path / "overlay"
    base.mkdir()
    overlay.mkdir()
    (base / "pipeline.yml").write_text("merge:\n  missing_policy: retain\n", encoding="utf-8")
    (overlay / "pipeline.yml").write_text("- not\n- a mapping\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(base, data_dir=tmp_path, overlay_config_dir=overlay)
