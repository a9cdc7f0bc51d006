from pathlib import Path

import pytest

from alertmap.common.config_loader import load_all_configs, resolve_data_path
from alertmap.common.errors import ConfigError

ALERTS_YAML = """upstream:
  endpoint: "https://example.test/history"
  lang: he
  mode: 0
  max_span_days: 30
  timeout:
    connect: 5
    read: 10
  headers: {}
coordinates:
  csv_path: coord.csv
  key_column: loc
  lat_column: lat
  lon_column: long
aggregation:
  top_n: 10
  list_limit: 100
  nearest_max_distance_m: 20000
"""

APARTMENTS_YAML = """store:
  path: apartments.json
  key: apartments
geocoder:
  endpoint: "https://example.test/search"
  accept_language: he
  min_query_length: 4
  suggestion_limit: 5
  rate_per_sec: 1.0
contact:
  whatsapp_base_url: "https://wa.me"
  message_template: "Interested in {address}"
"""


def _base(tmp_path: Path) -> Path:
    base = tmp_path / "base"
    base.mkdir()
    (base / "alerts.yml").write_text(ALERTS_YAML, encoding="utf-8")
    (base / "apartments.yml").write_text(APARTMENTS_YAML, encoding="utf-8")
    return base


def test_load_all_configs_from_repo_config_dir():
    bundle = load_all_configs(Path("config"))
    assert bundle.alerts["upstream"]["max_span_days"] == 30
    assert bundle.alerts["aggregation"]["nearest_max_distance_m"] == 20000
    assert bundle.apartments["store"]["key"] == "apartments"


def test_load_all_configs_applies_overlay_values(tmp_path: Path):
    base = _base(tmp_path)
    overlay = tmp_path / "overlay"
    overlay.mkdir()
    (overlay / "alerts.yml").write_text("aggregation:\n  top_n: 3\n", encoding="utf-8")

    bundle = load_all_configs(base, overlay_config_dir=overlay)

    assert bundle.alerts["aggregation"]["top_n"] == 3
    assert bundle.alerts["aggregation"]["list_limit"] == 100
    assert bundle.apartments["store"]["path"] == "apartments.json"


def test_load_all_configs_ignores_empty_overlay_file(tmp_path: Path):
    base = _base(tmp_path)
    overlay = tmp_path / "overlay"
    overlay.mkdir()
    (overlay / "alerts.yml").write_text("", encoding="utf-8")

    bundle = load_all_configs(base, overlay_config_dir=overlay)
    assert bundle.alerts["aggregation"]["top_n"] == 10


def test_load_all_configs_rejects_non_mapping_overlay(tmp_path: Path):
    base = _base(tmp_path)
    overlay = tmp_path / "overlay"
    overlay.mkdir()
    (overlay / "apartments.yml").write_text("- not\n- a\n- mapping\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_all_configs(base, overlay_config_dir=overlay)


def test_load_all_configs_rejects_missing_file(tmp_path: Path):
    base = _base(tmp_path)
    (base / "apartments.yml").unlink()
    with pytest.raises(ConfigError):
        load_all_configs(base)


def test_resolve_data_path(tmp_path: Path):
    assert resolve_data_path("coord.csv", tmp_path) == tmp_path / "coord.csv"
    absolute = tmp_path / "elsewhere" / "coord.csv"
    assert resolve_data_path(str(absolute), Path("data")) == absolute
