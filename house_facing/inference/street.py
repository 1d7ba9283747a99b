"""
Street-orientation strategy: face the nearest street.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from house_facing.core import settings
from house_facing.core.cancellation import CancellationToken
from house_facing.core.utils.geo import (
    GeoPoint,
    bearing_to_compass,
    closest_point_on_segment,
    haversine_distance,
    initial_bearing,
)
from house_facing.inference.base import NoStreetData, Provenance, StrategyOutcome
from house_facing.spatial.base import BaseSpatialProvider, SpatialElement
from house_facing.spatial.query import FeatureKind, build_bounding_box, build_feature_query

logger = logging.getLogger(__name__)


def closest_point_on_road(point: GeoPoint, road: SpatialElement) -> Tuple[Optional[GeoPoint], float]:
    """Closest point on any segment of `road` and its distance in meters."""
    closest: Optional[GeoPoint] = None
    min_distance = float("inf")

    for seg_start, seg_end in road.segments():
        candidate = closest_point_on_segment(point, seg_start, seg_end)
        distance = haversine_distance(point, candidate)
        if distance < min_distance:
            closest, min_distance = candidate, distance

    return closest, min_distance


def rank_roads(point: GeoPoint, roads: Sequence[SpatialElement]) -> List[Tuple[SpatialElement, float]]:
    """Roads with at least one segment, nearest first (stable for ties)."""
    ranked = [
        (road, closest_point_on_road(point, road)[1])
        for road in roads
        if road.is_line
    ]
    ranked.sort(key=lambda item: item[1])
    return ranked


class StreetOrientationStrategy:
    """
    Infer facing direction as the bearing from the target to the nearest street.

    Usage:
        strategy = StreetOrientationStrategy(OverpassProvider())
        outcome = await strategy.infer(point)
    """

    name = "street"

    def __init__(self, provider: BaseSpatialProvider, street_offset: Optional[float] = None):
        self.provider = provider
        self.street_offset = street_offset or settings.STREET_BBOX_OFFSET

    async def infer(
        self,
        point: GeoPoint,
        token: Optional[CancellationToken] = None,
    ) -> StrategyOutcome:
        """
        Raises:
            NoStreetData: No road with at least two points near the target
            SpatialQueryFailed: The road query failed
        """
        token = token or CancellationToken()
        box = build_bounding_box(point, self.street_offset)
        roads = await self.provider.fetch(build_feature_query(FeatureKind.HIGHWAY, box), token)

        ranked = rank_roads(point, roads)
        if not ranked:
            raise NoStreetData()

        nearest, distance = ranked[0]
        street_point, _ = closest_point_on_road(point, nearest)
        if street_point is None:
            raise NoStreetData()

        logger.debug(
            f"Nearest street is {nearest.osm_type} {nearest.osm_id}, "
            f"{distance:.1f}m away at {street_point}"
        )
        bearing = initial_bearing(point, street_point)
        return StrategyOutcome(bearing_to_compass(bearing), Provenance.STREET)
