"""
Facing-direction inference: strategies, result cache and orchestration.
"""

from house_facing.inference.base import (
    DirectionIndeterminate,
    FacingError,
    FacingReport,
    InferenceAttempt,
    NoStreetData,
    OrientationIndeterminate,
    Provenance,
    StrategyOutcome,
)
from house_facing.inference.building import (
    BuildingEdgeStrategy,
    facing_from_longest_edge,
    find_closest_edge_to_street,
)
from house_facing.inference.street import StreetOrientationStrategy, rank_roads
from house_facing.inference.cache import ResultCache
from house_facing.inference.orchestrator import FacingDirectionEngine

__all__ = [
    "DirectionIndeterminate",
    "FacingError",
    "FacingReport",
    "InferenceAttempt",
    "NoStreetData",
    "OrientationIndeterminate",
    "Provenance",
    "StrategyOutcome",
    "BuildingEdgeStrategy",
    "facing_from_longest_edge",
    "find_closest_edge_to_street",
    "StreetOrientationStrategy",
    "rank_roads",
    "ResultCache",
    "FacingDirectionEngine",
]
