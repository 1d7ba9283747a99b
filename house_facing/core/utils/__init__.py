"""
Shared utility functions for the house facing direction engine.

Modules:
- geo: Geometry kernel (haversine, bearing, segment projection, compass mapping)
- address: Address cleaning and normalization

Usage:
    from house_facing.core.utils import haversine_distance, normalize_address
"""

from house_facing.core.utils.geo import (
    GeoPoint,
    DirectionResult,
    haversine_distance,
    initial_bearing,
    closest_point_on_segment,
    edge_midpoint,
    bearing_to_compass,
)
from house_facing.core.utils.address import (
    clean_address,
    normalize_address,
)

__all__ = [
    # Geo utilities
    "GeoPoint",
    "DirectionResult",
    "haversine_distance",
    "initial_bearing",
    "closest_point_on_segment",
    "edge_midpoint",
    "bearing_to_compass",
    # Address utilities
    "clean_address",
    "normalize_address",
]
