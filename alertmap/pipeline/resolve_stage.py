"""Resolve stage: raw alert file -> resolved CSV and summary report."""

from __future__ import annotations

import logging
from pathlib import Path

from alertmap.common.config_loader import resolve_data_path
from alertmap.common.constants import CATEGORY_ALL
from alertmap.common.errors import ParseError
from alertmap.common.schema import parse_raw_alerts
from alertmap.harvest.alert_file import load_alert_file
from alertmap.pipeline.coordinates import load_coordinate_table
from alertmap.pipeline.export import write_resolved_csv
from alertmap.pipeline.reports import build_alert_summary, summary_path, write_alert_summary
from alertmap.pipeline.resolve import filter_by_category, resolve_alerts


def latest_raw_file(data_dir: Path) -> Path:
    raw_dir = data_dir / "raw" / "alerts"
    candidates = sorted(raw_dir.glob("alerts_*.json"), key=lambda path: path.stat().st_mtime)
    if not candidates:
        raise ParseError(f"No fetched alert files under {raw_dir}")
    return candidates[-1]


def run_resolve(
    alerts_config: dict,
    data_dir: Path,
    run_id: str,
    *,
    input_path: Path | None = None,
    category: str = CATEGORY_ALL,
    logger: logging.Logger | None = None,
) -> dict:
    coord_cfg = alerts_config["coordinates"]
    aggregation = alerts_config["aggregation"]

    table = load_coordinate_table(
        resolve_data_path(coord_cfg["csv_path"], data_dir),
        key_column=coord_cfg["key_column"],
        lat_column=coord_cfg["lat_column"],
        lon_column=coord_cfg["lon_column"],
        logger=logger,
    )

    source = input_path or latest_raw_file(data_dir)
    raws = parse_raw_alerts(load_alert_file(source))
    resolved = filter_by_category(resolve_alerts(raws, table, logger=logger), category)

    csv_path = write_resolved_csv(data_dir / "out" / "resolved_alerts.csv", resolved)
    summary = build_alert_summary(
        resolved,
        raw_count=len(raws),
        category=category,
        top_n=int(aggregation["top_n"]),
        list_limit=int(aggregation["list_limit"]),
    )
    report_path = write_alert_summary(summary_path(data_dir), summary, run_id=run_id)
    return {
        "input": str(source),
        "resolved_count": len(resolved),
        "csv_path": csv_path,
        "report_path": report_path,
        "summary": summary,
    }
