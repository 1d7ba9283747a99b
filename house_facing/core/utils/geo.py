"""
Geometry kernel: the coordinate type and the calculations built on it.

This module consolidates all geographic calculations used across the codebase:
- Haversine great-circle distance (meters)
- Initial great-circle bearing
- Closest point on a segment (planar, building/street scale)
- Bearing to 8-point compass mapping

Usage:
    from house_facing.core.utils.geo import GeoPoint, haversine_distance, initial_bearing

    a = GeoPoint(42.2626, -71.8023)
    b = GeoPoint(42.2700, -71.8100)

    distance_m = haversine_distance(a, b)
    heading = initial_bearing(a, b)
    facing = bearing_to_compass(heading)   # DirectionResult(direction=..., bearing=...)
"""

import math
from dataclasses import dataclass
from typing import Tuple

# Earth radius in meters
EARTH_RADIUS_METERS = 6_371_000

# Compass sectors as half-open [min, max) ranges; North is split across 0/360
COMPASS_SECTORS: Tuple[Tuple[str, float, float], ...] = (
    ("North", 337.5, 360.0),
    ("North", 0.0, 22.5),
    ("Northeast", 22.5, 67.5),
    ("East", 67.5, 112.5),
    ("Southeast", 112.5, 157.5),
    ("South", 157.5, 202.5),
    ("Southwest", 202.5, 247.5),
    ("West", 247.5, 292.5),
    ("Northwest", 292.5, 337.5),
)

COMPASS_DIRECTIONS = (
    "North", "Northeast", "East", "Southeast",
    "South", "Southwest", "West", "Northwest",
)


@dataclass(frozen=True)
class GeoPoint:
    """A WGS84 coordinate in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self):
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(f"Coordinates must be finite: {self.latitude}, {self.longitude}")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {self.longitude}")

    def __str__(self) -> str:
        return f"{self.latitude:.6f}, {self.longitude:.6f}"


@dataclass(frozen=True)
class DirectionResult:
    """Facing direction: compass label plus whole-degree bearing in [0, 360)."""

    direction: str
    bearing: int

    @property
    def as_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {"direction": self.direction, "bearing": self.bearing}


def haversine_distance(a: GeoPoint, b: GeoPoint) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Uses the Haversine formula which gives accurate results for most distances.

    Args:
        a: First point
        b: Second point

    Returns:
        Distance between the two points in meters

    Example:
        >>> round(haversine_distance(GeoPoint(0.0, 0.0), GeoPoint(1.0, 0.0)))
        111195
    """
    # Convert to radians
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    delta_phi = math.radians(b.latitude - a.latitude)
    delta_lambda = math.radians(b.longitude - a.longitude)

    # Haversine formula
    h = (
        math.sin(delta_phi / 2) ** 2 +
        math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_METERS * c


def initial_bearing(a: GeoPoint, b: GeoPoint) -> float:
    """
    Calculate the initial great-circle bearing from `a` to `b`.

    Returns:
        Bearing in degrees, 0 = North, clockwise, normalized into [0, 360)
    """
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    delta_lambda = math.radians(b.longitude - a.longitude)

    y = math.sin(delta_lambda) * math.cos(phi2)
    x = (
        math.cos(phi1) * math.sin(phi2) -
        math.sin(phi1) * math.cos(phi2) * math.cos(delta_lambda)
    )

    theta = math.degrees(math.atan2(y, x))
    return (theta + 360.0) % 360.0


def closest_point_on_segment(point: GeoPoint, start: GeoPoint, end: GeoPoint) -> GeoPoint:
    """
    Project `point` onto the segment `start`-`end`.

    Treats latitude/longitude as planar coordinates, which is accurate enough at
    building and street scale but not across large areas.

    Args:
        point: Point to project
        start: Segment start
        end: Segment end

    Returns:
        The closest point on the segment; `start` itself for a degenerate segment
    """
    d_lat = end.latitude - start.latitude
    d_lng = end.longitude - start.longitude

    length_sq = d_lat * d_lat + d_lng * d_lng
    if length_sq == 0:
        return start

    t = (
        (point.latitude - start.latitude) * d_lat +
        (point.longitude - start.longitude) * d_lng
    ) / length_sq

    # Clamp to the segment
    t = min(1.0, max(0.0, t))

    return GeoPoint(start.latitude + t * d_lat, start.longitude + t * d_lng)


def edge_midpoint(start: GeoPoint, end: GeoPoint) -> GeoPoint:
    """Planar midpoint of an edge."""
    return GeoPoint(
        (start.latitude + end.latitude) / 2,
        (start.longitude + end.longitude) / 2,
    )


def bearing_to_compass(bearing: float) -> DirectionResult:
    """
    Map a bearing onto one of eight 45-degree compass sectors.

    The sector is chosen from the exact bearing; the reported bearing is
    rounded half-up to whole degrees and kept inside [0, 360).

    Example:
        >>> bearing_to_compass(100.0)
        DirectionResult(direction='East', bearing=100)
        >>> bearing_to_compass(359.7)
        DirectionResult(direction='North', bearing=0)
    """
    if not math.isfinite(bearing):
        raise ValueError(f"Bearing must be finite: {bearing}")

    bearing = bearing % 360.0
    rounded = int(math.floor(bearing + 0.5)) % 360

    for name, low, high in COMPASS_SECTORS:
        if low <= bearing < high:
            return DirectionResult(direction=name, bearing=rounded)

    # Only reachable through float edge cases right below 360
    return DirectionResult(direction="North", bearing=rounded)
