import httpx
import pytest

from servicearea.config.settings import get_settings
from servicearea.core.errors import GeocodeNotFound, GeocodingUnavailable
from servicearea.core.geo import GeoPoint
from servicearea.geocoding.base import geocode_first
from servicearea.geocoding.mapbox import MapboxGeocoder


def _settings_with_token():
    settings = get_settings()
    geocoding = settings.geocoding.model_copy(update={"access_token": "pk.test"})
    return settings.model_copy(update={"geocoding": geocoding})


def test_mapbox_centers_are_converted_from_lon_lat(monkeypatch):
    calls = []

    def fake_get_json(url, *, params=None, headers=None, timeout_seconds=10):
        calls.append((url, params, headers))
        return {
            "features": [
                {"place_name": "Canton, Georgia", "center": [-84.4913, 34.2368]},
                {"place_name": "Canton, Ohio", "center": [-81.3784, 40.7989]},
            ]
        }

    monkeypatch.setattr("servicearea.geocoding.mapbox.get_json", fake_get_json)

    points = MapboxGeocoder(_settings_with_token()).geocode("  Canton, GA  ")

    assert points == [GeoPoint(34.2368, -84.4913), GeoPoint(40.7989, -81.3784)]
    url, params, headers = calls[0]
    assert url.endswith("/Canton%2C%20GA.json")
    assert params == {"access_token": "pk.test", "limit": 1, "country": "us"}
    assert headers["User-Agent"].startswith("servicearea/")


def test_mapbox_skips_malformed_and_out_of_range_features(monkeypatch):
    monkeypatch.setattr(
        "servicearea.geocoding.mapbox.get_json",
        lambda *_args, **_kwargs: {
            "features": [
                {"center": [200.0, 10.0]},
                {"center": "nope"},
                {"no_center": True},
                {"center": [-84.5, 34.1]},
            ]
        },
    )

    points = MapboxGeocoder(_settings_with_token()).geocode("somewhere")
    assert points == [GeoPoint(34.1, -84.5)]


def test_mapbox_empty_address_skips_network(monkeypatch):
    def fail(*_args, **_kwargs):
        raise AssertionError("network should not be called")

    monkeypatch.setattr("servicearea.geocoding.mapbox.get_json", fail)
    assert MapboxGeocoder(_settings_with_token()).geocode("   ") == []


def test_mapbox_without_token_is_unavailable():
    with pytest.raises(GeocodingUnavailable, match="MAPBOX_ACCESS_TOKEN"):
        MapboxGeocoder(get_settings()).geocode("Canton, GA")


def test_mapbox_http_errors_are_wrapped(monkeypatch):
    def fake_get_json(url, **_kwargs):
        request = httpx.Request("GET", url)
        response = httpx.Response(401, request=request)
        raise httpx.HTTPStatusError("401", request=request, response=response)

    monkeypatch.setattr("servicearea.geocoding.mapbox.get_json", fake_get_json)

    with pytest.raises(GeocodingUnavailable):
        MapboxGeocoder(_settings_with_token()).geocode("Canton, GA")


def test_geocode_first_raises_when_nothing_matches(monkeypatch):
    monkeypatch.setattr("servicearea.geocoding.mapbox.get_json", lambda *_a, **_k: {"features": []})

    with pytest.raises(GeocodeNotFound):
        geocode_first(MapboxGeocoder(_settings_with_token()), "nowhere at all")
