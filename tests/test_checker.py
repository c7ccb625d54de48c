from servicearea.core.geo import GeoPoint
from servicearea.render import GeoJsonRenderer, bounds_of
from servicearea.service.area import ServiceAreaEvaluator, ServiceConfig
from servicearea.service.checker import (
    AddressNotFound,
    Eligible,
    EligibilityChecker,
    Ineligible,
    InvalidLocation,
    RequestGate,
)

CONFIG = ServiceConfig(center=GeoPoint(34.1, -84.5), radius_miles=25)
NEAR = GeoPoint(34.2, -84.4)
FAR = GeoPoint(35.5, -84.5)


class StubGeocoder:
    def __init__(self, results: dict[str, list[GeoPoint]]):
        self.results = results
        self.calls: list[str] = []

    def geocode(self, address: str) -> list[GeoPoint]:
        self.calls.append(address)
        return self.results.get(address, [])


class RecordingRenderer:
    def __init__(self):
        self.markers = []
        self.polygons = []
        self.bounds = []

    def draw_marker(self, point, result=None):
        self.markers.append((point, result))

    def draw_polygon(self, polygon):
        self.polygons.append(polygon)

    def fit_bounds(self, south_west, north_east):
        self.bounds.append((south_west, north_east))


class ExplodingEvaluator(ServiceAreaEvaluator):
    def evaluate(self, candidate):
        raise AssertionError("evaluate must not run without a candidate")


def test_check_address_returns_typed_verdicts():
    geocoder = StubGeocoder({"near": [NEAR, FAR], "far": [FAR]})
    checker = EligibilityChecker(ServiceAreaEvaluator(CONFIG), geocoder=geocoder)

    near = checker.check_address("near")
    assert isinstance(near, Eligible)
    assert near.point == NEAR
    assert near.result.within_service is True

    far = checker.check_address("far")
    assert isinstance(far, Ineligible)
    assert far.result.distance_miles > 25


def test_address_not_found_never_reaches_evaluator():
    checker = EligibilityChecker(ExplodingEvaluator(CONFIG), geocoder=StubGeocoder({}))
    verdict = checker.check_address("nowhere")
    assert verdict == AddressNotFound(address="nowhere")


def test_check_point_reports_invalid_location():
    checker = EligibilityChecker(ServiceAreaEvaluator(CONFIG))
    verdict = checker.check_point(91, 0)
    assert isinstance(verdict, InvalidLocation)
    assert "latitude" in verdict.reason


def test_render_service_area_draws_polygon_and_fits_it():
    renderer = RecordingRenderer()
    evaluator = ServiceAreaEvaluator(CONFIG)
    checker = EligibilityChecker(evaluator, renderer=renderer)

    checker.render_service_area()

    assert renderer.polygons == [evaluator.boundary_polygon(5)]
    assert renderer.bounds == [bounds_of(evaluator.boundary_polygon(5))]


def test_check_draws_marker_for_latest_request():
    renderer = RecordingRenderer()
    checker = EligibilityChecker(ServiceAreaEvaluator(CONFIG), renderer=renderer)

    verdict = checker.check_point(NEAR.latitude, NEAR.longitude)

    assert renderer.markers == [(NEAR, verdict.result)]
    south_west, north_east = renderer.bounds[-1]
    assert south_west.latitude <= NEAR.latitude <= north_east.latitude


def test_stale_lookup_does_not_overwrite_newer_result():
    renderer = RecordingRenderer()
    geocoder = StubGeocoder({"new": [NEAR]})
    checker = EligibilityChecker(ServiceAreaEvaluator(CONFIG), geocoder=geocoder, renderer=renderer)

    class SlowGeocoder:
        # The user submits "new" while "old" is still being geocoded.
        def geocode(self, address):
            checker.check_address("new")
            return [FAR]

    stale_checker = EligibilityChecker(
        checker.evaluator, geocoder=SlowGeocoder(), renderer=renderer, gate=checker._gate
    )
    old = stale_checker.check_address("old")

    assert isinstance(old, Ineligible)
    assert [p for p, _ in renderer.markers] == [NEAR]


def test_request_gate_only_latest_token_publishes():
    gate = RequestGate()
    first = gate.issue()
    second = gate.issue()
    published = []

    assert gate.is_current(second) and not gate.is_current(first)
    assert gate.publish_if_current(first, lambda: published.append(first)) is False
    assert gate.publish_if_current(second, lambda: published.append(second)) is True
    assert published == [second]


def test_geojson_renderer_emits_lon_lat_and_closed_ring():
    renderer = GeoJsonRenderer()
    evaluator = ServiceAreaEvaluator(CONFIG)
    checker = EligibilityChecker(evaluator, renderer=renderer, polygon_step_degrees=90)
    checker.render_service_area()
    checker.check_point(NEAR.latitude, NEAR.longitude)

    data = renderer.to_geojson()
    polygon, marker = data["features"]
    ring = polygon["geometry"]["coordinates"][0]
    assert len(ring) == 5
    assert ring[0] == ring[-1]
    assert marker["geometry"]["coordinates"] == [NEAR.longitude, NEAR.latitude]
    assert marker["properties"]["within_service"] is True
    west, south, east, north = data["bbox"]
    assert west < NEAR.longitude < east
    assert south < NEAR.latitude < north


def test_renderer_may_start_a_new_check_while_drawing():
    evaluator = ServiceAreaEvaluator(CONFIG)

    class ReenteringRenderer(RecordingRenderer):
        def __init__(self):
            super().__init__()
            self.checker = None

        def draw_marker(self, point, result=None):
            super().draw_marker(point, result)
            if point == NEAR:
                self.checker.check_point(FAR.latitude, FAR.longitude)

    renderer = ReenteringRenderer()
    checker = EligibilityChecker(evaluator, renderer=renderer)
    renderer.checker = checker

    verdict = checker.check_point(NEAR.latitude, NEAR.longitude)

    assert isinstance(verdict, Eligible)
    assert [p for p, _ in renderer.markers] == [NEAR, FAR]
