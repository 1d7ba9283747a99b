"""
Base classes and interfaces for spatial feature providers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

from house_facing.core.cancellation import CancellationToken
from house_facing.core.utils.geo import GeoPoint
from house_facing.spatial.query import FeatureQuery


@dataclass(frozen=True)
class SpatialElement:
    """A building or road reduced to its shape."""

    osm_type: str
    osm_id: int
    points: Tuple[GeoPoint, ...]

    @property
    def is_polygon(self) -> bool:
        """Enough nodes to describe a building outline."""
        return len(self.points) >= 3

    @property
    def is_line(self) -> bool:
        """Enough points to form at least one segment."""
        return len(self.points) >= 2

    def segments(self) -> List[Tuple[GeoPoint, GeoPoint]]:
        """Consecutive point pairs; closed rings are not wrapped."""
        return list(zip(self.points, self.points[1:]))


class SpatialQueryFailed(Exception):
    """Exception raised when a spatial provider request fails."""

    def __init__(self, message: str, provider: str = "", status_code: Optional[int] = None):
        self.message = message
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"[{provider}] {message}" if provider else message)


class BaseSpatialProvider(ABC):
    """
    Abstract base class for spatial feature providers.

    Subclasses must implement:
    - fetch(): Execute a FeatureQuery
    - provider_name: Name of the provider
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Name of the spatial provider."""
        pass

    @abstractmethod
    async def fetch(
        self,
        query: FeatureQuery,
        token: Optional[CancellationToken] = None,
    ) -> List[SpatialElement]:
        """
        Fetch the features described by `query`.

        Returns:
            Elements in provider order

        Raises:
            SpatialQueryFailed: On a non-success response or transport failure
        """
        pass

    async def close(self) -> None:
        """Release any open sessions."""
        pass
