"""
House facing direction: which way does the building at an address face?

Resolves an address with Nominatim, fetches nearby building outlines and roads
from Overpass, and infers a compass direction from the geometry.

Usage:
    from house_facing import FacingDirectionEngine

    async with FacingDirectionEngine() as engine:
        result = await engine.search("360 Plantation St, Worcester, MA")
        print(result.direction, result.bearing)
"""

from house_facing.core.cancellation import CancellationToken, SearchCancelled
from house_facing.core.utils.geo import DirectionResult, GeoPoint
from house_facing.geocoding.base import AddressNotFoundError, GeocodingError
from house_facing.spatial.base import SpatialQueryFailed
from house_facing.inference import (
    DirectionIndeterminate,
    FacingDirectionEngine,
    FacingError,
    FacingReport,
    NoStreetData,
    OrientationIndeterminate,
    ResultCache,
)

__version__ = "1.0.0"

__all__ = [
    "CancellationToken",
    "SearchCancelled",
    "DirectionResult",
    "GeoPoint",
    "AddressNotFoundError",
    "GeocodingError",
    "SpatialQueryFailed",
    "DirectionIndeterminate",
    "FacingDirectionEngine",
    "FacingError",
    "FacingReport",
    "NoStreetData",
    "OrientationIndeterminate",
    "ResultCache",
]
