"""
Address/point eligibility checks.

`EligibilityChecker` ties the collaborators together:
geocoder (address -> points) -> `ServiceAreaEvaluator` -> renderer.

Results come back as typed verdicts (`Eligible`, `Ineligible`, `AddressNotFound`,
`InvalidLocation`) so callers branch on the type instead of sentinel values. The evaluator
is never called when geocoding found nothing.

Each submission gets a request generation from `RequestGate`. When a newer submission
has started by the time an older one resolves, the older verdict is still returned to its
caller but is not drawn, so a slow lookup cannot overwrite what the user sees.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Union

from servicearea.core.errors import GeocodeNotFound, InvalidCoordinate
from servicearea.core.geo import GeoPoint
from servicearea.geocoding.base import Geocoder, geocode_first
from servicearea.render import Renderer, bounds_of
from servicearea.service.area import EligibilityResult, ServiceAreaEvaluator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Eligible:
    point: GeoPoint
    result: EligibilityResult


@dataclass(frozen=True)
class Ineligible:
    point: GeoPoint
    result: EligibilityResult


@dataclass(frozen=True)
class AddressNotFound:
    address: str


@dataclass(frozen=True)
class InvalidLocation:
    reason: str


Verdict = Union[Eligible, Ineligible, AddressNotFound, InvalidLocation]


class RequestGate:
    """Monotonic request generations; only the latest one may publish.

    Publishing runs under the gate so a newer request cannot be overtaken mid-draw. The lock
    is re-entrant, so a renderer may start a new check from inside a draw call; renderers
    should stay quick, since `issue()` waits while one is drawing.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._generation = 0

    def issue(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._generation

    def publish_if_current(self, token: int, publish: Callable[[], None]) -> bool:
        """Run `publish` while holding the gate if `token` is still the latest generation."""
        with self._lock:
            if token != self._generation:
                return False
            publish()
            return True


class EligibilityChecker:
    def __init__(
        self,
        evaluator: ServiceAreaEvaluator,
        *,
        geocoder: Geocoder | None = None,
        renderer: Renderer | None = None,
        gate: RequestGate | None = None,
        polygon_step_degrees: float = 5,
    ):
        self._evaluator = evaluator
        self._geocoder = geocoder
        self._renderer = renderer
        self._gate = gate or RequestGate()
        self._step = polygon_step_degrees

    @property
    def evaluator(self) -> ServiceAreaEvaluator:
        return self._evaluator

    def render_service_area(self) -> None:
        """Draw the boundary polygon and frame the map on it (map initialization)."""
        if self._renderer is None:
            return
        polygon = self._evaluator.boundary_polygon(self._step)
        self._renderer.draw_polygon(polygon)
        self._renderer.fit_bounds(*bounds_of(polygon))

    def check_address(self, address: str) -> Verdict:
        """Geocode `address` and classify the best candidate.

        Raises:
            GeocodingUnavailable: If the geocoding service fails.
        """
        if self._geocoder is None:
            raise RuntimeError("EligibilityChecker has no geocoder configured")
        token = self._gate.issue()
        try:
            point = geocode_first(self._geocoder, address)
        except GeocodeNotFound:
            logger.info("Address not found: %s", address)
            return AddressNotFound(address=address)
        return self._classify(token, point)

    def check_point(self, latitude: float, longitude: float) -> Verdict:
        """Classify a raw (latitude, longitude) pair."""
        token = self._gate.issue()
        try:
            point = GeoPoint.from_lat_lon(latitude, longitude)
        except InvalidCoordinate as e:
            return InvalidLocation(reason=e.reason)
        return self._classify(token, point)

    def _classify(self, token: int, point: GeoPoint) -> Verdict:
        result = self._evaluator.evaluate(point)
        verdict: Verdict = Eligible(point, result) if result.within_service else Ineligible(point, result)
        logger.debug(
            "Checked (%s, %s): %.3f mi within=%s",
            point.latitude,
            point.longitude,
            result.distance_miles,
            result.within_service,
        )

        renderer = self._renderer
        if renderer is not None:
            published = self._gate.publish_if_current(token, lambda: self._draw(renderer, point, result))
            if not published:
                logger.info("Dropping stale eligibility result for request %s", token)
        return verdict

    def _draw(self, renderer: Renderer, point: GeoPoint, result: EligibilityResult) -> None:
        polygon = self._evaluator.boundary_polygon(self._step)
        renderer.draw_marker(point, result)
        renderer.fit_bounds(*bounds_of([*polygon, point]))
