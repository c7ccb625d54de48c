from __future__ import annotations

from typing import Protocol

from servicearea.core.errors import GeocodeNotFound
from servicearea.core.geo import GeoPoint


class Geocoder(Protocol):
    """Turns a free-text address into zero or more candidate points, best match first."""

    def geocode(self, address: str) -> list[GeoPoint]: ...


def geocode_first(geocoder: Geocoder, address: str) -> GeoPoint:
    """Return the best candidate for `address`.

    Raises:
        GeocodeNotFound: If the geocoder returned no candidates.
    """
    points = geocoder.geocode(address)
    if not points:
        raise GeocodeNotFound(address)
    return points[0]
