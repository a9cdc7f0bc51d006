"""Address search against a Nominatim-compatible geocoding service."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

from alertmap.common.errors import GeocodeError, UpstreamError
from alertmap.common.http import HttpClient, TimeoutConfig
from alertmap.common.logging import log_event

SOURCE = "nominatim"

_logger = logging.getLogger(__name__)


def _safe_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class NominatimGeocoder:
    def __init__(
        self,
        geocoder_config: dict,
        *,
        http_client: HttpClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = geocoder_config
        self.logger = logger or _logger
        self._owns_client = http_client is None
        self.client = http_client or HttpClient(
            timeout=TimeoutConfig(connect=10, read=30),
            rate_limits={SOURCE: float(geocoder_config["rate_per_sec"])},
        )

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "NominatimGeocoder":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def search(self, query: str, *, accept_language: str | None = None) -> list[dict]:
        params = {"format": "json", "q": query}
        if accept_language:
            params["accept-language"] = accept_language
        payload = self.client.get_json(self.config["endpoint"], source_type=SOURCE, params=params)
        if not isinstance(payload, list):
            raise UpstreamError("Geocoder returned an unexpected payload")
        return [item for item in payload if isinstance(item, dict)]

    def geocode(self, address: str) -> tuple[float, float]:
        """Coordinates of the best match for ``address``."""
        for candidate in self.search(address)[:1]:
            lat = _safe_float(candidate.get("lat"))
            lon = _safe_float(candidate.get("lon"))
            if lat is not None and lon is not None:
                return lat, lon
        raise GeocodeError(f"Could not find coordinates for the given address: {address}")

    def suggest(self, query: str) -> list[str]:
        if len(query) < int(self.config["min_query_length"]):
            return []
        try:
            candidates = self.search(query, accept_language=self.config.get("accept_language"))
        except UpstreamError as exc:
            log_event(
                self.logger,
                f"address suggestions failed: {exc}",
                level=logging.WARNING,
                source=SOURCE,
                event="SUGGEST_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            return []
        names = [str(item["display_name"]) for item in candidates if item.get("display_name")]
        return names[: int(self.config["suggestion_limit"])]
