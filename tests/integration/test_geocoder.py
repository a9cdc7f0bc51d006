from __future__ import annotations

import pytest

from alertmap.common.errors import GeocodeError
from alertmap.common.http import HttpRequestError
from alertmap.harvest.geocoder import NominatimGeocoder

GEOCODER = {
    "endpoint": "https://nominatim.example/search",
    "accept_language": "he",
    "min_query_length": 4,
    "suggestion_limit": 2,
    "rate_per_sec": 1.0,
}


class FakeNominatim:
    def __init__(self, payload=None, fail: bool = False):
        self.payload = payload if payload is not None else []
        self.fail = fail
        self.calls = []

    def get_json(self, url: str, **kwargs):
        self.calls.append(kwargs["params"])
        if self.fail:
            raise HttpRequestError("HTTP status: 503")
        return self.payload

    def close(self):
        return None


@pytest.mark.integration
def test_geocode_uses_first_match():
    fake = FakeNominatim([{"lat": "32.0809", "lon": "34.7806", "display_name": "A"}, {"lat": "1", "lon": "2"}])

    with NominatimGeocoder(GEOCODER, http_client=fake) as geocoder:
        assert geocoder.geocode("Dizengoff 100, Tel Aviv") == (32.0809, 34.7806)

    assert fake.calls[0] == {"format": "json", "q": "Dizengoff 100, Tel Aviv"}


@pytest.mark.integration
def test_geocode_without_match_raises():
    with pytest.raises(GeocodeError):
        NominatimGeocoder(GEOCODER, http_client=FakeNominatim([])).geocode("nowhere at all")


@pytest.mark.integration
def test_suggest_limits_results_and_skips_short_queries():
    fake = FakeNominatim([{"display_name": "one"}, {"display_name": "two"}, {"display_name": "three"}])
    geocoder = NominatimGeocoder(GEOCODER, http_client=fake)

    assert geocoder.suggest("abc") == []
    assert fake.calls == []
    assert geocoder.suggest("Allenby") == ["one", "two"]
    assert fake.calls[0]["accept-language"] == "he"


@pytest.mark.integration
def test_suggest_swallows_upstream_failure():
    assert NominatimGeocoder(GEOCODER, http_client=FakeNominatim(fail=True)).suggest("Allenby") == []
