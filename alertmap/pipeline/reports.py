"""Alert summary report: statistics and map layers for one resolved view."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Sequence

from alertmap.common.errors import ParseError
from alertmap.common.fs import read_json, write_json
from alertmap.common.models import ResolvedAlert
from alertmap.pipeline.aggregate import compute_heatmap_weights, compute_stats, compute_unique_markers
from alertmap.pipeline.resolve import list_view


def summary_path(data_dir: Path) -> Path:
    return data_dir / "out" / "reports" / "alert_summary.json"


def build_alert_summary(
    resolved: Sequence[ResolvedAlert],
    *,
    raw_count: int,
    category: str,
    top_n: int,
    list_limit: int,
) -> dict:
    stats = compute_stats(resolved, top_n=top_n)
    heatmap = sorted(compute_heatmap_weights(resolved))
    return {
        "category": category,
        "raw_alerts": raw_count,
        "stats": stats.to_dict(),
        "heatmap": [{"lat": lat, "lon": lon, "weight": weight} for lat, lon, weight in heatmap],
        "markers": [alert.to_dict() for alert in compute_unique_markers(resolved)],
        "list": [alert.to_dict() for alert in list_view(resolved, list_limit)],
    }


def write_alert_summary(path: Path, summary: dict, *, run_id: str) -> Path:
    write_json(path, {"run_id": run_id, **summary})
    return path


def load_summary_markers(path: Path) -> list[ResolvedAlert]:
    if not path.exists():
        raise ParseError(f"Missing alert summary: {path}; run the resolve stage first")
    payload = read_json(path)
    markers = []
    for idx, row in enumerate(payload.get("markers", [])):
        try:
            markers.append(
                ResolvedAlert(
                    date=datetime.fromisoformat(row["date"]),
                    title=row["title"],
                    location=row["location"],
                    category=row["category"],
                    lat=float(row["lat"]),
                    lon=float(row["lon"]),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ParseError(f"Malformed marker #{idx} in {path}") from exc
    return markers
