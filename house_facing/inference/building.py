"""
Building-edge strategy.

The building outline edge nearest to a road is taken as the front of the
building; it faces from the edge midpoint toward the closest point on that
road. Without usable roads the building is assumed to run parallel to its
street, so it faces perpendicular to its longest edge.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from house_facing.core import settings
from house_facing.core.cancellation import CancellationToken
from house_facing.core.utils.geo import (
    DirectionResult,
    GeoPoint,
    bearing_to_compass,
    closest_point_on_segment,
    edge_midpoint,
    haversine_distance,
    initial_bearing,
)
from house_facing.inference.base import OrientationIndeterminate, Provenance, StrategyOutcome
from house_facing.spatial.base import BaseSpatialProvider, SpatialElement, SpatialQueryFailed
from house_facing.spatial.query import FeatureKind, build_bounding_box, build_feature_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EdgeMatch:
    """A building edge and the nearest road point to its midpoint."""

    start: GeoPoint
    end: GeoPoint
    midpoint: GeoPoint
    street_point: GeoPoint
    distance: float


def polygon_edges(polygon: Sequence[GeoPoint]) -> List[Tuple[GeoPoint, GeoPoint]]:
    """Consecutive node pairs, n-1 edges, without joining the last node to the first."""
    return list(zip(polygon, polygon[1:]))


def find_closest_edge_to_street(
    polygon: Sequence[GeoPoint],
    roads: Sequence[SpatialElement],
) -> Optional[EdgeMatch]:
    """
    Find the polygon edge whose midpoint is closest to any road segment.

    Returns:
        The globally closest edge/road-point pair, or None when no road has
        a segment
    """
    best: Optional[EdgeMatch] = None

    for start, end in polygon_edges(polygon):
        midpoint = edge_midpoint(start, end)

        for road in roads:
            if not road.is_line:
                continue
            for seg_start, seg_end in road.segments():
                street_point = closest_point_on_segment(midpoint, seg_start, seg_end)
                distance = haversine_distance(midpoint, street_point)

                if best is None or distance < best.distance:
                    best = EdgeMatch(start, end, midpoint, street_point, distance)

    return best


def facing_from_longest_edge(polygon: Sequence[GeoPoint]) -> DirectionResult:
    """
    Face perpendicular (+90 degrees) to the polygon's longest edge.

    Raises:
        OrientationIndeterminate: If fewer than two distinct non-zero edges exist
    """
    longest: Optional[Tuple[GeoPoint, GeoPoint]] = None
    max_length = 0.0
    distinct = set()

    for start, end in polygon_edges(polygon):
        length = haversine_distance(start, end)
        if length <= 0:
            continue
        # A->B and B->A are the same side
        distinct.add(frozenset((start, end)))
        if length > max_length:
            max_length = length
            longest = (start, end)

    if longest is None or len(distinct) < 2:
        raise OrientationIndeterminate()

    edge_bearing = initial_bearing(*longest)
    return bearing_to_compass((edge_bearing + 90.0) % 360.0)


class BuildingEdgeStrategy:
    """
    Infer facing direction from the first building outline at the target.

    Usage:
        strategy = BuildingEdgeStrategy(OverpassProvider())
        outcome = await strategy.infer(point)
    """

    name = "building"

    def __init__(
        self,
        provider: BaseSpatialProvider,
        building_offset: Optional[float] = None,
        street_offset: Optional[float] = None,
    ):
        self.provider = provider
        self.building_offset = building_offset or settings.BUILDING_BBOX_OFFSET
        self.street_offset = street_offset or settings.EXTENDED_STREET_BBOX_OFFSET

    async def find_building(
        self,
        point: GeoPoint,
        token: CancellationToken,
    ) -> Tuple[GeoPoint, ...]:
        """
        Outline of the first building returned around `point`.

        Raises:
            OrientationIndeterminate: No building, or one with fewer than 3 nodes
            SpatialQueryFailed: The building query failed
        """
        box = build_bounding_box(point, self.building_offset)
        buildings = await self.provider.fetch(build_feature_query(FeatureKind.BUILDING, box), token)

        if not buildings:
            raise OrientationIndeterminate("No building found at this location")

        building = buildings[0]
        if not building.is_polygon:
            raise OrientationIndeterminate("Insufficient building data")

        logger.debug(f"Using {building.osm_type} {building.osm_id} with {len(building.points)} nodes")
        return building.points

    async def nearby_roads(self, point: GeoPoint, token: CancellationToken) -> List[SpatialElement]:
        """Roads in the extended box, or none if the query failed."""
        box = build_bounding_box(point, self.street_offset)
        try:
            return await self.provider.fetch(build_feature_query(FeatureKind.HIGHWAY, box), token)
        except SpatialQueryFailed as e:
            logger.warning(f"Road lookup for building failed, using longest edge: {e}")
            return []

    async def infer(
        self,
        point: GeoPoint,
        token: Optional[CancellationToken] = None,
    ) -> StrategyOutcome:
        token = token or CancellationToken()
        polygon = await self.find_building(point, token)
        roads = await self.nearby_roads(point, token)

        match = find_closest_edge_to_street(polygon, roads)
        if match is not None:
            bearing = initial_bearing(match.midpoint, match.street_point)
            logger.debug(
                f"Front edge midpoint {match.midpoint} is {match.distance:.1f}m "
                f"from street point {match.street_point}"
            )
            return StrategyOutcome(bearing_to_compass(bearing), Provenance.BUILDING_EDGE)

        logger.debug("No road segments near building, falling back to longest edge")
        return StrategyOutcome(facing_from_longest_edge(polygon), Provenance.LONGEST_EDGE)
