"""
Spatial module: bounding boxes, feature queries and the Overpass client.

Usage:
    from house_facing.spatial import (
        FeatureKind, OverpassProvider, build_bounding_box, build_feature_query,
    )

    box = build_bounding_box(point, 0.002)
    roads = await OverpassProvider().fetch(build_feature_query(FeatureKind.HIGHWAY, box))
"""

from house_facing.spatial.query import (
    BoundingBox,
    FeatureKind,
    FeatureQuery,
    build_bounding_box,
    build_feature_query,
)
from house_facing.spatial.base import (
    BaseSpatialProvider,
    SpatialElement,
    SpatialQueryFailed,
)
from house_facing.spatial.providers.overpass import OverpassProvider

__all__ = [
    "BoundingBox",
    "FeatureKind",
    "FeatureQuery",
    "build_bounding_box",
    "build_feature_query",
    "BaseSpatialProvider",
    "SpatialElement",
    "SpatialQueryFailed",
    "OverpassProvider",
]
