"""
Bounding boxes and feature query descriptors for spatial lookups.

Building a query does not execute it; the descriptor is handed to a
spatial provider which decides how to render and send it.
"""

from dataclasses import dataclass
from enum import Enum

from house_facing.core.utils.geo import GeoPoint


class FeatureKind(str, Enum):
    """OpenStreetMap feature tag requested from the spatial provider."""
    BUILDING = "building"
    HIGHWAY = "highway"


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned lat/lng rectangle in decimal degrees."""

    north: float
    south: float
    east: float
    west: float

    def __post_init__(self):
        if not self.north > self.south:
            raise ValueError(f"north ({self.north}) must be greater than south ({self.south})")
        if not self.east > self.west:
            raise ValueError(f"east ({self.east}) must be greater than west ({self.west})")

    def contains(self, point: GeoPoint) -> bool:
        return (
            self.south <= point.latitude <= self.north and
            self.west <= point.longitude <= self.east
        )

    @property
    def as_overpass(self) -> str:
        """Overpass bbox filter order: south, west, north, east."""
        return f"{self.south},{self.west},{self.north},{self.east}"


@dataclass(frozen=True)
class FeatureQuery:
    """Which feature kind to fetch and where."""

    kind: FeatureKind
    box: BoundingBox

    def to_overpass(self, timeout: int) -> str:
        """
        Render as an Overpass QL query returning full geometry.

        Args:
            timeout: Server-side timeout in seconds
        """
        bbox = self.box.as_overpass
        tag = self.kind.value
        return (
            f"[out:json][timeout:{timeout}];\n"
            f"(\n"
            f'  way["{tag}"]({bbox});\n'
            f'  relation["{tag}"]({bbox});\n'
            f");\n"
            f"out geom;"
        )


def build_bounding_box(center: GeoPoint, offset: float) -> BoundingBox:
    """
    Build a square box of side 2 x offset degrees around a point.

    Raises:
        ValueError: If offset is not positive
    """
    if offset <= 0:
        raise ValueError(f"Offset must be positive: {offset}")

    return BoundingBox(
        north=center.latitude + offset,
        south=center.latitude - offset,
        east=center.longitude + offset,
        west=center.longitude - offset,
    )


def build_feature_query(kind: FeatureKind, box: BoundingBox) -> FeatureQuery:
    return FeatureQuery(kind=FeatureKind(kind), box=box)
