"""
HTTP helpers.

`get_json` is the one network call the package makes: `MapboxGeocoder` uses it for forward
geocoding lookups. The Mapbox token travels as a query parameter, the User-Agent comes from
`geocoding.user_agent`, and non-2xx responses raise so the geocoder can turn them into
`GeocodingUnavailable`.
"""

from __future__ import annotations

from typing import Any

import httpx


DEFAULT_USER_AGENT = "servicearea/0.1.0"


def get_json(
    url: str,
    *,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout_seconds: float = 10,
    client: httpx.Client | None = None,
) -> Any:
    """GET `url` and return the decoded JSON response.

    Pass `client` to reuse a connection pool (or a mock transport); otherwise a
    short-lived client is opened per call.

    Raises:
        httpx.HTTPError: On transport errors or non-2xx status codes.
        ValueError: If the response body is not valid JSON.
    """
    request_headers = {"User-Agent": DEFAULT_USER_AGENT}
    if headers:
        request_headers.update(headers)

    if client is not None:
        resp = client.get(url, params=params, headers=request_headers, timeout=timeout_seconds)
        resp.raise_for_status()
        return resp.json()

    with httpx.Client(timeout=timeout_seconds) as owned:
        resp = owned.get(url, params=params, headers=request_headers)
        resp.raise_for_status()
        return resp.json()
