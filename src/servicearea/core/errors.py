"""
Error taxonomy.

- `InvalidCoordinate`: a point outside the valid latitude/longitude ranges (caller may retry).
- `InvalidServiceConfig`: bad service center or radius (fatal at startup).
- `GeocodeNotFound`: the geocoder returned no candidates for an address.
- `GeocodingUnavailable`: the geocoder could not be reached or answered with an error.
"""

from __future__ import annotations


class ServiceAreaError(Exception):
    """Base class for all service-area errors."""


class InvalidCoordinate(ServiceAreaError, ValueError):
    """A latitude or longitude lies outside its valid range."""

    def __init__(self, latitude: float, longitude: float, reason: str):
        self.latitude = latitude
        self.longitude = longitude
        self.reason = reason
        super().__init__(f"Invalid coordinate ({latitude}, {longitude}): {reason}")


class InvalidServiceConfig(ServiceAreaError, ValueError):
    """The service center or radius is malformed."""


class GeocodeNotFound(ServiceAreaError, LookupError):
    """No candidate location was found for an address."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Address not found: {address!r}")


class GeocodingUnavailable(ServiceAreaError):
    """The geocoding service failed (transport error or non-2xx response)."""
