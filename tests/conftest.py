"""
Shared fixtures: in-memory providers standing in for Nominatim and Overpass.
"""

import asyncio
import math
from typing import Dict, List, Optional, Union

import pytest

from house_facing.core.utils.geo import EARTH_RADIUS_METERS, GeoPoint
from house_facing.geocoding.base import BaseGeocoder, GeocodeCandidate, GeocodingError
from house_facing.inference.cache import ResultCache
from house_facing.spatial.base import BaseSpatialProvider, SpatialElement, SpatialQueryFailed
from house_facing.spatial.query import FeatureKind

METERS_PER_DEGREE = EARTH_RADIUS_METERS * math.pi / 180


def offset_point(origin: GeoPoint, bearing: float, meters: float) -> GeoPoint:
    """Move `meters` along `bearing` using a local flat-earth approximation."""
    d_lat = meters * math.cos(math.radians(bearing)) / METERS_PER_DEGREE
    d_lng = meters * math.sin(math.radians(bearing)) / (
        METERS_PER_DEGREE * math.cos(math.radians(origin.latitude))
    )
    return GeoPoint(origin.latitude + d_lat, origin.longitude + d_lng)


def make_element(coords, osm_id: int = 1, osm_type: str = "way") -> SpatialElement:
    """Element from (lat, lng) pairs."""
    return SpatialElement(
        osm_type=osm_type,
        osm_id=osm_id,
        points=tuple(GeoPoint(lat, lng) for lat, lng in coords),
    )


class FakeGeocoder(BaseGeocoder):
    """Returns canned candidates per query and records every query."""

    def __init__(
        self,
        responses: Optional[Dict[str, Union[List[GeocodeCandidate], Exception]]] = None,
        delay: float = 0.0,
    ):
        self.responses = responses or {}
        self.delay = delay
        self.calls: List[str] = []

    @property
    def provider_name(self) -> str:
        return "fake"

    async def search(self, query, limit=5, token=None):
        self.calls.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if token is not None:
            token.raise_if_cancelled()

        response = self.responses.get(query, [])
        if isinstance(response, Exception):
            raise response
        return list(response)[:limit]


class FakeSpatialProvider(BaseSpatialProvider):
    """Returns canned elements per feature kind and records every query."""

    def __init__(
        self,
        buildings: Union[List[SpatialElement], Exception, None] = None,
        roads: Union[List[SpatialElement], Exception, None] = None,
        delays: Optional[Dict[FeatureKind, float]] = None,
    ):
        self.responses = {
            FeatureKind.BUILDING: buildings if buildings is not None else [],
            FeatureKind.HIGHWAY: roads if roads is not None else [],
        }
        self.delays = delays or {}
        self.calls = []

    @property
    def provider_name(self) -> str:
        return "fake"

    async def fetch(self, query, token=None):
        self.calls.append(query)
        delay = self.delays.get(query.kind, 0.0)
        if delay:
            await asyncio.sleep(delay)
        if token is not None:
            token.raise_if_cancelled()

        response = self.responses[query.kind]
        if isinstance(response, Exception):
            raise response
        return list(response)


def candidate(lat=40.0, lng=-75.0, label="123 Main St, Springfield", importance=0.2,
              house_number="123", place_type="house", road="Main St") -> GeocodeCandidate:
    return GeocodeCandidate(
        point=GeoPoint(lat, lng),
        label=label,
        importance=importance,
        place_type=place_type,
        house_number=house_number,
        road=road,
    )


@pytest.fixture
def target():
    return GeoPoint(40.0, -75.0)


@pytest.fixture
def rectangle(target):
    """
    Closed building outline whose longest side runs at a bearing of 10 degrees.

    A -> B is 40m at 10 degrees, the short sides are 10m at 280 degrees. The
    opposite long side sits slightly further north, so A -> B is strictly the
    longest edge.
    """
    a = target
    b = offset_point(a, 10.0, 40.0)
    side = offset_point(a, 280.0, 10.0)
    s_lat, s_lng = side.latitude - a.latitude, side.longitude - a.longitude
    c = GeoPoint(b.latitude + s_lat, b.longitude + s_lng)
    d = GeoPoint(a.latitude + s_lat, a.longitude + s_lng)
    return (a, b, c, d, a)


@pytest.fixture
def road_north(target):
    """East-west road 55m north of the target."""
    lat = target.latitude + 0.0005
    return SpatialElement(
        osm_type="way",
        osm_id=100,
        points=(GeoPoint(lat, target.longitude - 0.001), GeoPoint(lat, target.longitude + 0.001)),
    )


@pytest.fixture
def road_south(target):
    """East-west road 33m south of the target."""
    lat = target.latitude - 0.0003
    return SpatialElement(
        osm_type="way",
        osm_id=200,
        points=(GeoPoint(lat, target.longitude - 0.001), GeoPoint(lat, target.longitude + 0.001)),
    )


@pytest.fixture
def cache():
    return ResultCache(max_entries=16, ttl=0)


@pytest.fixture
def geocoding_error():
    return GeocodingError("HTTP 503", provider="fake")


@pytest.fixture
def spatial_outage():
    return SpatialQueryFailed("Failed to fetch data from Overpass API", provider="fake", status_code=504)
