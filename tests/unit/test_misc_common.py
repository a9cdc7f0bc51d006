import json
import logging
from datetime import date
from pathlib import Path

import pytest

from alertmap.common.deterministic import first_by_key, stable_sorted
from alertmap.common.errors import ParseError, ValidationError
from alertmap.common.logging import JsonLineFormatter, build_logger, log_event
from alertmap.common.time_utils import (
    format_display_date,
    format_upstream_date,
    generate_run_id,
    parse_alert_timestamp,
    parse_display_date,
)


def test_stable_sorted_orders_values_and_keeps_ties():
    items = [("a", 1), ("b", 2), ("c", 1), ("d", 2)]
    assert stable_sorted(items, key=lambda item: item[1], reverse=True) == [("b", 2), ("d", 2), ("a", 1), ("c", 1)]


def test_first_by_key_keeps_first_occurrence():
    assert first_by_key(["apple", "avocado", "banana"], key=lambda s: s[0]) == ["apple", "banana"]


def test_generate_run_id_prefix():
    assert generate_run_id().startswith("run-")


def test_display_and_upstream_date_formats():
    parsed = parse_display_date("05.02.2024")
    assert parsed == date(2024, 2, 5)
    assert format_upstream_date(parsed) == "2024-02-05"
    assert format_display_date(parsed) == "05.02.2024"


@pytest.mark.parametrize("value", [None, "", "2024-02-05", "31.02.2024", "5/2/2024"])
def test_parse_display_date_rejects_bad_input(value):
    with pytest.raises(ValidationError):
        parse_display_date(value)


def test_parse_alert_timestamp_rejects_garbage():
    with pytest.raises(ParseError):
        parse_alert_timestamp(12)


def test_json_log_line_has_stable_fields(tmp_path: Path):
    logger = build_logger("run-test", data_dir=tmp_path, level="DEBUG")
    log_event(logger, "hello", level=logging.DEBUG, stage="fetch", chunk=2, rows_out=5)
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "run_meta" / "run-test.log.jsonl").read_text(encoding="utf-8").splitlines()
    payload = json.loads(lines[-1])

    assert payload["message"] == "hello"
    assert payload["stage"] == "fetch"
    assert payload["chunk"] == 2
    assert payload["error_code"] is None
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_formatter_fills_missing_fields():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    payload = json.loads(JsonLineFormatter().format(record))
    assert payload["run_id"] is None
    assert payload["message"] == "msg"
