"""
ServiceArea CLI entrypoint.

Quick local checks without the web UI:
- `servicearea check --address "..."` or `servicearea check --lat 34.2 --lon -84.4`
- `servicearea polygon [--step 5] [--json]`
- `servicearea serve` (runs the API with uvicorn)

`check` exits 0 when the location is eligible, 1 when it is not, 2 when the address
was not found or the coordinate is invalid, 3 when the geocoder failed.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from servicearea.config.settings import get_settings
from servicearea.core.errors import GeocodingUnavailable
from servicearea.core.logging import configure_logging
from servicearea.geocoding.mapbox import MapboxGeocoder
from servicearea.render import GeoJsonRenderer
from servicearea.service.area import ServiceAreaEvaluator, load_service_config
from servicearea.service.checker import AddressNotFound, EligibilityChecker, InvalidLocation

EXIT_ELIGIBLE = 0
EXIT_INELIGIBLE = 1
EXIT_INPUT_ERROR = 2
EXIT_UNAVAILABLE = 3


def _build_evaluator() -> ServiceAreaEvaluator:
    return ServiceAreaEvaluator(load_service_config(get_settings().service))


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the `check` subcommand."""
    settings = get_settings()
    evaluator = _build_evaluator()
    checker = EligibilityChecker(evaluator, geocoder=MapboxGeocoder(settings))

    if args.address:
        try:
            verdict = checker.check_address(args.address)
        except GeocodingUnavailable as e:
            print(f"Geocoding failed: {e}", file=sys.stderr)
            return EXIT_UNAVAILABLE
    elif args.lat is not None and args.lon is not None:
        verdict = checker.check_point(args.lat, args.lon)
    else:
        print("check: provide --address or both --lat and --lon", file=sys.stderr)
        return EXIT_INPUT_ERROR

    if isinstance(verdict, AddressNotFound):
        print(f"Address not found: {verdict.address}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    if isinstance(verdict, InvalidLocation):
        print(f"Invalid location: {verdict.reason}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    radius = evaluator.config.radius_miles
    result = verdict.result
    if args.json:
        payload = {
            "latitude": verdict.point.latitude,
            "longitude": verdict.point.longitude,
            "distance_miles": result.distance_miles,
            "within_service": result.within_service,
            "radius_miles": radius,
        }
        print(json.dumps(payload, indent=2))
    else:
        label = "within" if result.within_service else "outside"
        print(
            f"({verdict.point.latitude:.5f}, {verdict.point.longitude:.5f}) is "
            f"{result.distance_miles:.2f} mi from the center: {label} the {radius:g} mi service area"
        )
    return EXIT_ELIGIBLE if result.within_service else EXIT_INELIGIBLE


def _cmd_polygon(args: argparse.Namespace) -> int:
    """Handle the `polygon` subcommand."""
    step = float(args.step) if args.step is not None else get_settings().service.polygon_step_degrees
    evaluator = _build_evaluator()

    if args.json:
        renderer = GeoJsonRenderer()
        EligibilityChecker(evaluator, renderer=renderer, polygon_step_degrees=step).render_service_area()
        print(json.dumps(renderer.to_geojson(), indent=2))
        return 0

    for vertex in evaluator.boundary_polygon(step):
        print(f"{vertex.latitude:.6f},{vertex.longitude:.6f}")
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("servicearea.api.app:app", host=args.host, port=int(args.port))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ServiceArea CLI."""
    parser = argparse.ArgumentParser(prog="servicearea")
    sub = parser.add_subparsers(dest="command", required=True)

    chk = sub.add_parser("check", help="Check whether an address or coordinate is inside the service area.")
    chk.add_argument("--address", type=str, default=None, help="Free-text address to geocode")
    chk.add_argument("--lat", type=float, default=None)
    chk.add_argument("--lon", type=float, default=None)
    chk.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    chk.set_defaults(func=_cmd_check)

    poly = sub.add_parser("polygon", help="Print the approximate service-area boundary.")
    poly.add_argument("--step", type=float, default=None, help="Degrees between vertices (must divide 360)")
    poly.add_argument("--json", action="store_true", help="Output a GeoJSON FeatureCollection")
    poly.set_defaults(func=_cmd_polygon)

    srv = sub.add_parser("serve", help="Run the HTTP API.")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.set_defaults(func=_cmd_serve)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m servicearea.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
