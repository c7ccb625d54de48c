"""
Renderer boundary.

The core never touches a map widget. It calls a `Renderer` with three capabilities
(marker, polygon, fit bounds); the web UI supplies one, and `GeoJsonRenderer` records
the calls as a GeoJSON FeatureCollection the widget can load directly.

GeoJSON positions are `[longitude, latitude]`; `GeoPoint.to_lon_lat` is the only conversion.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol

from servicearea.core.geo import GeoPoint
from servicearea.service.area import BoundaryPolygon, EligibilityResult


class Renderer(Protocol):
    def draw_marker(self, point: GeoPoint, result: EligibilityResult | None = None) -> None: ...

    def draw_polygon(self, polygon: BoundaryPolygon) -> None: ...

    def fit_bounds(self, south_west: GeoPoint, north_east: GeoPoint) -> None: ...


def bounds_of(points: Iterable[GeoPoint]) -> tuple[GeoPoint, GeoPoint]:
    """Return the (south-west, north-east) corners enclosing `points`."""
    pts = list(points)
    if not pts:
        raise ValueError("bounds_of() needs at least one point")
    south_west = GeoPoint(
        latitude=min(p.latitude for p in pts), longitude=min(p.longitude for p in pts)
    )
    north_east = GeoPoint(
        latitude=max(p.latitude for p in pts), longitude=max(p.longitude for p in pts)
    )
    return south_west, north_east


class GeoJsonRenderer:
    """Collects drawing calls into a GeoJSON FeatureCollection."""

    def __init__(self) -> None:
        self._features: list[dict[str, Any]] = []
        self._bbox: list[float] | None = None

    def draw_marker(self, point: GeoPoint, result: EligibilityResult | None = None) -> None:
        properties: dict[str, Any] = {"kind": "candidate"}
        if result is not None:
            properties["distance_miles"] = result.distance_miles
            properties["within_service"] = result.within_service
        self._features.append(
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": point.to_lon_lat()},
                "properties": properties,
            }
        )

    def draw_polygon(self, polygon: BoundaryPolygon) -> None:
        ring = [p.to_lon_lat() for p in polygon.closed_ring()]
        self._features.append(
            {
                "type": "Feature",
                "geometry": {"type": "Polygon", "coordinates": [ring]},
                "properties": {"kind": "service_area"},
            }
        )

    def fit_bounds(self, south_west: GeoPoint, north_east: GeoPoint) -> None:
        self._bbox = [south_west.longitude, south_west.latitude, north_east.longitude, north_east.latitude]

    def to_geojson(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": "FeatureCollection", "features": list(self._features)}
        if self._bbox is not None:
            out["bbox"] = list(self._bbox)
        return out
