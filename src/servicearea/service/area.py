"""
Service-area evaluation.

Two pure operations over an immutable `ServiceConfig`:
- `evaluate`: great-circle distance from the service center plus an inclusive radius check.
- `boundary_polygon`: a coarse planar circle for the map, for display only.

The polygon treats longitude and latitude degrees as directly comparable (1 degree ~ 69
miles on both axes) and ignores curvature. It is a visual aid; eligibility is always
decided by `evaluate`, never by point-in-polygon tests against the ring.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import cos, isfinite, radians, sin
from typing import Iterator

from servicearea.config.settings import ServiceSettings
from servicearea.core.errors import InvalidCoordinate, InvalidServiceConfig
from servicearea.core.geo import GeoPoint, haversine_miles, ring_vertex_count

MILES_PER_DEGREE = 69.0
DEFAULT_VERTEX_STEP_DEGREES = 5.0


@dataclass(frozen=True)
class ServiceConfig:
    """Fixed service center and radius (miles)."""

    center: GeoPoint
    radius_miles: float

    def __post_init__(self) -> None:
        if not isinstance(self.center, GeoPoint):
            raise InvalidServiceConfig(f"center must be a GeoPoint, got {self.center!r}")
        if not isfinite(self.radius_miles) or self.radius_miles <= 0:
            raise InvalidServiceConfig(f"radius_miles must be a positive number, got {self.radius_miles!r}")


@dataclass(frozen=True)
class EligibilityResult:
    distance_miles: float
    within_service: bool


@dataclass(frozen=True)
class BoundaryPolygon:
    """Ordered ring of vertices; the first vertex is not repeated at the end."""

    vertices: tuple[GeoPoint, ...]

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self) -> Iterator[GeoPoint]:
        return iter(self.vertices)

    def closed_ring(self) -> list[GeoPoint]:
        """Vertices with the first one repeated at the end (for renderers that need it)."""
        return [*self.vertices, self.vertices[0]] if self.vertices else []


def load_service_config(service: ServiceSettings) -> ServiceConfig:
    """Build the process-wide `ServiceConfig` from settings.

    Raises:
        InvalidServiceConfig: If the center is out of range or the radius is not positive.
    """
    try:
        center = GeoPoint.from_lat_lon(service.center_latitude, service.center_longitude)
    except InvalidCoordinate as e:
        raise InvalidServiceConfig(f"Malformed service center: {e.reason}") from e
    return ServiceConfig(center=center, radius_miles=float(service.radius_miles))


def evaluate(candidate: GeoPoint, config: ServiceConfig) -> EligibilityResult:
    """Classify `candidate` against the service radius (a point exactly on the radius is eligible)."""
    distance = haversine_miles(config.center, candidate)
    return EligibilityResult(distance_miles=distance, within_service=distance <= config.radius_miles)


def _wrap_longitude(lon: float) -> float:
    if -180 <= lon <= 180:
        return lon
    return (lon + 180) % 360 - 180


def boundary_polygon(
    config: ServiceConfig, vertex_step_degrees: float = DEFAULT_VERTEX_STEP_DEGREES
) -> BoundaryPolygon:
    """Approximate the service radius as a planar circle of `360 / step` vertices.

    Every vertex lies within `radius_miles / 69` planar degrees of the center as long as
    the ring stays inside the valid coordinate ranges. A ring crossing the antimeridian has
    its longitudes wrapped into [-180, 180] (and one crossing a pole is clamped), so the
    planar bound and `bounds_of` framing do not hold for those vertices.
    """
    count = ring_vertex_count(vertex_step_degrees)
    r = config.radius_miles / MILES_PER_DEGREE
    center = config.center

    vertices = []
    for i in range(count):
        theta = radians(i * vertex_step_degrees)
        # x axis = longitude, y axis = latitude.
        lon = center.longitude + r * cos(theta)
        lat = center.latitude + r * sin(theta)
        vertices.append(GeoPoint(latitude=min(90.0, max(-90.0, lat)), longitude=_wrap_longitude(lon)))
    return BoundaryPolygon(vertices=tuple(vertices))


class ServiceAreaEvaluator:
    """Binds one `ServiceConfig` and memoizes its boundary polygon per step."""

    def __init__(self, config: ServiceConfig):
        self._config = config
        self._polygons: dict[float, BoundaryPolygon] = {}

    @property
    def config(self) -> ServiceConfig:
        return self._config

    def evaluate(self, candidate: GeoPoint) -> EligibilityResult:
        return evaluate(candidate, self._config)

    def boundary_polygon(self, vertex_step_degrees: float = DEFAULT_VERTEX_STEP_DEGREES) -> BoundaryPolygon:
        key = float(vertex_step_degrees)
        polygon = self._polygons.get(key)
        if polygon is None:
            polygon = boundary_polygon(self._config, key)
            self._polygons[key] = polygon
        return polygon
