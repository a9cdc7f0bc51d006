"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from alertmap.common.errors import ConfigError
from alertmap.common.fs import read_yaml
from alertmap.common.schema import validate_alerts_config, validate_apartments_config

ALERTS_CONFIG = "alerts.yml"
APARTMENTS_CONFIG = "apartments.yml"


@dataclass(frozen=True)
class ConfigBundle:
    alerts: dict
    apartments: dict


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


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if not isinstance(base, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay config must contain a mapping: {overlay_path}")
    return _deep_merge(base, overlay)


def load_all_configs(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConfigBundle:
    def _overlay(name: str) -> Path | None:
        return overlay_config_dir / name if overlay_config_dir is not None else None

    alerts = validate_alerts_config(
        _load_yaml_with_overlay(config_dir / ALERTS_CONFIG, _overlay(ALERTS_CONFIG)),
        allow_unknown=allow_unknown,
    )
    apartments = validate_apartments_config(
        _load_yaml_with_overlay(config_dir / APARTMENTS_CONFIG, _overlay(APARTMENTS_CONFIG)),
        allow_unknown=allow_unknown,
    )
    return ConfigBundle(alerts=alerts, apartments=apartments)


def resolve_data_path(value: str, data_dir: Path) -> Path:
    """Config paths are relative to the data directory unless absolute."""
    path = Path(value)
    if path.is_absolute():
        return path
    return data_dir / path
