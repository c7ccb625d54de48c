"""
API models (Pydantic).

These types are the JSON contract of the HTTP API. Coordinate ranges are not enforced
here: out-of-range points flow into the core so they are rejected as `InvalidCoordinate`
with the same message the CLI prints.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator


class Location(BaseModel):
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


class EligibilityRequest(BaseModel):
    """Either a free-text address or an explicit location (not both)."""

    address: str | None = Field(default=None, max_length=500)
    location: Location | None = None

    @model_validator(mode="after")
    def _validate_one_of(self) -> "EligibilityRequest":
        has_address = bool(self.address and self.address.strip())
        if has_address == (self.location is not None):
            raise ValueError("Provide exactly one of 'address' or 'location'")
        return self


class EligibilityResponse(BaseModel):
    status: Literal["eligible", "ineligible"]
    location: Location
    distance_miles: float = Field(..., ge=0)
    within_service: bool
    radius_miles: float
    map: dict[str, Any] = Field(default_factory=dict)


class ServiceAreaResponse(BaseModel):
    center: Location
    radius_miles: float
    vertex_step_degrees: float
    vertex_count: int
    map: dict[str, Any] = Field(default_factory=dict)
