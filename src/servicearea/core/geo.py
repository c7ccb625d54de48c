from __future__ import annotations
from dataclasses import dataclass
from math import atan2, cos, isfinite, radians, sin, sqrt
from typing import Literal

from servicearea.core.errors import InvalidCoordinate

"""
Geospatial helpers.

A tiny geometry layer: one point type and great-circle distance, without pulling in
heavier GIS dependencies.

Coordinate order is always (latitude, longitude) inside the package. External
sources that speak (longitude, latitude), such as geocoder responses and GeoJSON,
go through `GeoPoint.from_lon_lat` / `GeoPoint.to_lon_lat` exactly once.
"""

DistanceUnit = Literal["mi", "km", "m"]

# Mean Earth radius per unit.
EARTH_RADIUS = {
    "mi": 3_958.8,
    "km": 6_371.0,
    "m": 6_371_000.0,
}


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        lat = self.latitude
        lon = self.longitude
        if not (isfinite(lat) and isfinite(lon)):
            raise InvalidCoordinate(lat, lon, "coordinates must be finite numbers")
        if not -90 <= lat <= 90:
            raise InvalidCoordinate(lat, lon, "latitude must be within [-90, 90]")
        if not -180 <= lon <= 180:
            raise InvalidCoordinate(lat, lon, "longitude must be within [-180, 180]")

    @classmethod
    def from_lat_lon(cls, latitude: float, longitude: float) -> GeoPoint:
        return cls(latitude=float(latitude), longitude=float(longitude))

    @classmethod
    def from_lon_lat(cls, pair: tuple[float, float] | list[float]) -> GeoPoint:
        """Build a point from a `[longitude, latitude]` pair (GeoJSON / geocoder order)."""
        if len(pair) != 2:
            raise ValueError(f"Expected a [longitude, latitude] pair, got {pair!r}")
        lon, lat = pair
        return cls(latitude=float(lat), longitude=float(lon))

    def to_lon_lat(self) -> list[float]:
        return [self.longitude, self.latitude]


def haversine(a: GeoPoint, b: GeoPoint, unit: DistanceUnit = "mi") -> float:
    """Compute great-circle distance between two points in the given unit."""
    r = EARTH_RADIUS[unit]
    lat1 = radians(a.latitude)
    lon1 = radians(a.longitude)
    lat2 = radians(b.latitude)
    lon2 = radians(b.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h a hair outside [0, 1] for antipodal points.
    h = min(1.0, max(0.0, h))
    return r * 2 * atan2(sqrt(h), sqrt(1 - h))


def haversine_miles(a: GeoPoint, b: GeoPoint) -> float:
    """Compute great-circle distance in miles between two points."""
    return haversine(a, b, "mi")


def ring_vertex_count(step_degrees: float) -> int:
    """Number of vertices when walking 0..360 degrees in `step_degrees` increments.

    Raises:
        ValueError: If the step is not positive or does not divide 360 evenly.
    """
    if not isfinite(step_degrees) or step_degrees <= 0:
        raise ValueError(f"vertex step must be positive, got {step_degrees!r}")
    count = 360 / step_degrees
    if abs(count - round(count)) > 1e-9:
        raise ValueError(f"vertex step must divide 360 evenly, got {step_degrees!r}")
    return int(round(count))
