"""
API routes.

Endpoints:
- GET  `/api/service-area`: center, radius and the boundary polygon as GeoJSON.
- POST `/api/eligibility`: check an address or a location against the service radius.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, HTTPException

from servicearea.config.settings import get_settings
from servicearea.core.errors import GeocodingUnavailable
from servicearea.domain.models import (
    EligibilityRequest,
    EligibilityResponse,
    Location,
    ServiceAreaResponse,
)
from servicearea.geocoding.base import Geocoder
from servicearea.geocoding.mapbox import MapboxGeocoder
from servicearea.render import GeoJsonRenderer
from servicearea.service.area import ServiceAreaEvaluator, load_service_config
from servicearea.service.checker import AddressNotFound, EligibilityChecker, InvalidLocation

router = APIRouter()


@lru_cache
def get_evaluator() -> ServiceAreaEvaluator:
    """Process-wide evaluator (raises `InvalidServiceConfig` on bad settings)."""
    return ServiceAreaEvaluator(load_service_config(get_settings().service))


@lru_cache
def _geocoder() -> Geocoder:
    return MapboxGeocoder(get_settings())


@router.get("/api/service-area", response_model=ServiceAreaResponse)
def get_service_area() -> ServiceAreaResponse:
    """Return the service area and its display polygon."""
    step = get_settings().service.polygon_step_degrees
    evaluator = get_evaluator()
    renderer = GeoJsonRenderer()
    checker = EligibilityChecker(evaluator, renderer=renderer, polygon_step_degrees=step)
    checker.render_service_area()

    config = evaluator.config
    return ServiceAreaResponse(
        center=Location(latitude=config.center.latitude, longitude=config.center.longitude),
        radius_miles=config.radius_miles,
        vertex_step_degrees=step,
        vertex_count=len(evaluator.boundary_polygon(step)),
        map=renderer.to_geojson(),
    )


@router.post("/api/eligibility", response_model=EligibilityResponse)
def post_eligibility(request: EligibilityRequest) -> EligibilityResponse:
    """Geocode (when needed) and classify the request location."""
    step = get_settings().service.polygon_step_degrees
    evaluator = get_evaluator()
    renderer = GeoJsonRenderer()
    checker = EligibilityChecker(
        evaluator, geocoder=_geocoder(), renderer=renderer, polygon_step_degrees=step
    )
    checker.render_service_area()

    try:
        if request.location is not None:
            verdict = checker.check_point(request.location.latitude, request.location.longitude)
        else:
            verdict = checker.check_address(request.address or "")
    except GeocodingUnavailable as e:
        raise HTTPException(
            status_code=502,
            detail={"code": "GEOCODING_UNAVAILABLE", "message": str(e)},
        ) from e

    if isinstance(verdict, AddressNotFound):
        raise HTTPException(
            status_code=404,
            detail={"code": "ADDRESS_NOT_FOUND", "message": "Address not found"},
        )
    if isinstance(verdict, InvalidLocation):
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": verdict.reason},
        )

    return EligibilityResponse(
        status="eligible" if verdict.result.within_service else "ineligible",
        location=Location(latitude=verdict.point.latitude, longitude=verdict.point.longitude),
        distance_miles=verdict.result.distance_miles,
        within_service=verdict.result.within_service,
        radius_miles=evaluator.config.radius_miles,
        map=renderer.to_geojson(),
    )
