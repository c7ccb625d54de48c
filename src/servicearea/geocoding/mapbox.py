"""
Forward geocoding client (Mapbox Places API).

Mapbox reports each feature's `center` as `[longitude, latitude]`. This is the one place
that order is converted into a `GeoPoint`; nothing downstream sees raw pairs.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from servicearea.config.settings import Settings
from servicearea.core.errors import GeocodingUnavailable, InvalidCoordinate
from servicearea.core.geo import GeoPoint
from servicearea.core.http import get_json

logger = logging.getLogger(__name__)


class MapboxGeocoder:
    """Calls the Mapbox forward-geocoding endpoint and parses candidates."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def _fetch(self, address: str) -> dict[str, Any]:
        geocoding = self._settings.geocoding
        if not geocoding.access_token:
            raise GeocodingUnavailable("Geocoding access token is not configured (set MAPBOX_ACCESS_TOKEN).")

        params: dict[str, Any] = {"access_token": geocoding.access_token, "limit": geocoding.limit}
        if geocoding.country:
            params["country"] = geocoding.country

        url = f"{geocoding.base_url.rstrip('/')}/{quote(address, safe='')}.json"
        try:
            data = get_json(
                url,
                params=params,
                headers={"User-Agent": geocoding.user_agent},
                timeout_seconds=self._settings.app.http_timeout_seconds,
            )
        except httpx.HTTPError as e:
            raise GeocodingUnavailable(f"Geocoding request failed: {e}") from e
        except ValueError as e:
            raise GeocodingUnavailable(f"Geocoding response was not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise GeocodingUnavailable("Geocoding response root must be an object.")
        return data

    def geocode(self, address: str) -> list[GeoPoint]:
        """Return candidate points for `address` (best match first; empty when nothing matched)."""
        address = (address or "").strip()
        if not address:
            logger.warning("Empty address provided for geocoding")
            return []

        data = self._fetch(address)
        points: list[GeoPoint] = []
        for feature in data.get("features") or []:
            center = feature.get("center") if isinstance(feature, dict) else None
            if not isinstance(center, (list, tuple)) or len(center) != 2:
                logger.warning("Skipping geocoding feature without a [lon, lat] center: %r", feature)
                continue
            try:
                points.append(GeoPoint.from_lon_lat(center))
            except (InvalidCoordinate, TypeError, ValueError) as e:
                logger.warning("Skipping geocoding feature with invalid center %r: %s", center, str(e))

        if not points:
            logger.info("No geocoding results for address: %s", address)
        return points
