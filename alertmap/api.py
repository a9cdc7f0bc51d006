"""
HTTP surface consumed by the alert dashboard.

Routes:
  GET /api/alerts?fromDate=DD.MM.YYYY&toDate=DD.MM.YYYY
      200: JSON array of raw alerts for the inclusive range
      400: {"error": ...} when a date is missing or malformed
      500: {"error": "Failed to fetch alerts"} when the upstream source fails

Run with: uvicorn alertmap.api:create_app --factory
"""

import logging
import os
from pathlib import Path
from typing import Callable, Optional

from fastapi import APIRouter, FastAPI, Query
from fastapi.responses import JSONResponse

from alertmap.common.config_loader import ConfigBundle, load_all_configs
from alertmap.common.errors import UpstreamError, ValidationError
from alertmap.common.http import NO_RETRY, HttpClient
from alertmap.common.logging import log_event
from alertmap.common.time_utils import parse_display_date
from alertmap.harvest.alerts_harvest import fetch_range

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "ALERTMAP_CONFIG_DIR"


def _build_router(bundle: ConfigBundle, http_client_factory: Callable[[], HttpClient]) -> APIRouter:
    router = APIRouter(prefix="/api", tags=["alerts"])

    @router.get("/alerts")
    def get_alerts(
        from_date: Optional[str] = Query(default=None, alias="fromDate"),
        to_date: Optional[str] = Query(default=None, alias="toDate"),
    ):
        log_event(logger, f"alerts requested from {from_date} to {to_date}", stage="fetch", event="REQUEST")
        if not from_date or not to_date:
            return JSONResponse({"error": "fromDate and toDate are required"}, status_code=400)

        try:
            start = parse_display_date(from_date, field="fromDate")
            end = parse_display_date(to_date, field="toDate")
        except ValidationError as exc:
            return JSONResponse({"error": str(exc)}, status_code=400)

        client = http_client_factory()
        try:
            records = fetch_range(start, end, upstream_config=bundle.alerts["upstream"], http_client=client, logger=logger)
        except UpstreamError as exc:
            log_event(
                logger,
                f"alert fetch failed: {exc}",
                level=logging.ERROR,
                stage="fetch",
                event="FETCH_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            return JSONResponse({"error": "Failed to fetch alerts"}, status_code=500)
        finally:
            client.close()
        return records

    return router


def create_app(
    bundle: Optional[ConfigBundle] = None,
    http_client_factory: Optional[Callable[[], HttpClient]] = None,
) -> FastAPI:
    if bundle is None:
        bundle = load_all_configs(Path(os.environ.get(CONFIG_DIR_ENV, "config")))
    factory = http_client_factory or (lambda: HttpClient(retry=NO_RETRY))

    app = FastAPI(title="Alert History Map", version="0.3.0")
    app.include_router(_build_router(bundle, factory))
    return app
