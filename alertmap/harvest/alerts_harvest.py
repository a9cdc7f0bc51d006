"""Alert history harvest: date-range chunking and sequential upstream fetch."""

from __future__ import annotations

import logging
import time
from datetime import date, timedelta
from pathlib import Path

from alertmap.common.constants import DEFAULT_MAX_SPAN_DAYS
from alertmap.common.errors import UpstreamError
from alertmap.common.fs import write_json
from alertmap.common.http import NO_RETRY, HttpClient, TimeoutConfig
from alertmap.common.logging import log_event
from alertmap.common.models import DateRange
from alertmap.common.time_utils import format_display_date, format_upstream_date

SOURCE = "oref"

_logger = logging.getLogger(__name__)


def span_days(start: date, end: date) -> int:
    """Inclusive number of calendar days in ``[start, end]``; 0 when reversed."""
    if start > end:
        return 0
    return (end - start).days + 1


def chunk_date_range(start: date, end: date, max_span_days: int = DEFAULT_MAX_SPAN_DAYS) -> list[DateRange]:
    """Split ``[start, end]`` into consecutive inclusive windows of at most ``max_span_days`` days.

    Each window ends ``max_span_days - 1`` days after it starts, the next one
    starts the following day, and the last window is clipped to ``end``. A
    reversed range produces no windows.
    """
    if max_span_days <= 0:
        raise ValueError("max_span_days must be positive")

    chunks: list[DateRange] = []
    current = start
    while current <= end:
        chunk_end = min(current + timedelta(days=max_span_days - 1), end)
        chunks.append(DateRange(start=current, end=chunk_end))
        current = chunk_end + timedelta(days=1)
    return chunks


def _fetch_chunk(client: HttpClient, upstream_config: dict, chunk: DateRange) -> list[dict]:
    timeout_cfg = upstream_config["timeout"]
    payload = client.get_json(
        upstream_config["endpoint"],
        source_type=SOURCE,
        params={
            "lang": upstream_config["lang"],
            "fromDate": format_upstream_date(chunk.start),
            "toDate": format_upstream_date(chunk.end),
            "mode": upstream_config["mode"],
        },
        headers=upstream_config.get("headers"),
        timeout=TimeoutConfig(connect=float(timeout_cfg["connect"]), read=float(timeout_cfg["read"])),
        allow_empty=True,
    )
    # The history endpoint answers an empty body when a window has no alerts.
    if payload is None:
        return []
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        raise UpstreamError(
            f"Unexpected payload for {format_upstream_date(chunk.start)}..{format_upstream_date(chunk.end)}: "
            "expected a JSON array of objects"
        )
    return payload


def fetch_range(
    start: date,
    end: date,
    *,
    upstream_config: dict,
    http_client: HttpClient | None = None,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> list[dict]:
    """Fetch every alert between ``start`` and ``end`` (inclusive).

    Chunks are requested one after another and concatenated in order. Any
    failure raises :class:`UpstreamError`; records from earlier chunks are
    discarded with it.
    """
    logger = logger or _logger
    max_span = int(upstream_config.get("max_span_days", DEFAULT_MAX_SPAN_DAYS))

    if start > end:
        log_event(
            logger,
            f"from {start.isoformat()} is after to {end.isoformat()}; nothing to fetch",
            level=logging.WARNING,
            run_id=run_id,
            stage="fetch",
            source=SOURCE,
            event="RANGE_REVERSED",
            status="ok",
            rows_out=0,
        )
        return []

    chunks = chunk_date_range(start, end, max_span)
    started = time.monotonic()
    records: list[dict] = []

    owns_client = http_client is None
    client = http_client or HttpClient(retry=NO_RETRY)
    try:
        for idx, chunk in enumerate(chunks):
            try:
                chunk_records = _fetch_chunk(client, upstream_config, chunk)
            except UpstreamError as exc:
                log_event(
                    logger,
                    f"chunk {chunk.start.isoformat()}..{chunk.end.isoformat()} failed: {exc}",
                    level=logging.ERROR,
                    run_id=run_id,
                    stage="fetch",
                    source=SOURCE,
                    event="FETCH_FAIL",
                    status="error",
                    chunk=idx,
                    rows_in=len(records),
                    error_code=exc.error_code,
                )
                raise
            records.extend(chunk_records)
            log_event(
                logger,
                f"fetched {len(chunk_records)} alerts for {chunk.start.isoformat()}..{chunk.end.isoformat()}",
                run_id=run_id,
                stage="fetch",
                source=SOURCE,
                event="CHUNK_FETCH",
                status="ok",
                chunk=idx,
                rows_out=len(chunk_records),
            )
    finally:
        if owns_client:
            client.close()

    log_event(
        logger,
        f"fetched {len(records)} alerts over {span_days(start, end)} day(s) in {len(chunks)} request(s)",
        run_id=run_id,
        stage="fetch",
        source=SOURCE,
        event="FETCH_DONE",
        status="ok",
        duration_ms=int((time.monotonic() - started) * 1000),
        rows_out=len(records),
    )
    return records


def raw_output_path(data_dir: Path, start: date, end: date) -> Path:
    return data_dir / "raw" / "alerts" / f"alerts_{start.isoformat()}_{end.isoformat()}.json"


def run_fetch(
    start: date,
    end: date,
    alerts_config: dict,
    data_dir: Path,
    run_id: str,
    *,
    http_client: HttpClient | None = None,
    logger: logging.Logger | None = None,
) -> dict:
    upstream_config = alerts_config["upstream"]
    rows = fetch_range(
        start,
        end,
        upstream_config=upstream_config,
        http_client=http_client,
        logger=logger,
        run_id=run_id,
    )
    chunks = chunk_date_range(start, end, int(upstream_config["max_span_days"]))
    payload = {
        "run_id": run_id,
        "source": SOURCE,
        "from": format_display_date(start),
        "to": format_display_date(end),
        "chunks": [
            {"from": format_upstream_date(chunk.start), "to": format_upstream_date(chunk.end)}
            for chunk in chunks
        ],
        "row_count": len(rows),
        "rows": rows,
    }
    out_path = raw_output_path(data_dir, start, end)
    write_json(out_path, payload)
    payload["path"] = str(out_path)
    return payload
