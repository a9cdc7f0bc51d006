"""Read alert history files uploaded by the user or written by the fetch stage."""

from __future__ import annotations

import json
from pathlib import Path

from alertmap.common.errors import ParseError
from alertmap.common.fs import read_json


def load_alert_file(path: Path) -> list[dict]:
    """Return raw alert records from ``path``.

    Accepts either a bare JSON array (as downloaded from the alert history
    site) or a fetch-stage payload with a ``rows`` key.
    """
    try:
        payload = read_json(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise ParseError(f"Could not read alert file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ParseError(f"Alert file {path} is not valid JSON: {exc.msg} (line {exc.lineno})") from exc

    if isinstance(payload, dict) and "rows" in payload:
        payload = payload["rows"]
    if not isinstance(payload, list):
        raise ParseError(f"Alert file {path} must contain a JSON array of alerts")
    return payload
